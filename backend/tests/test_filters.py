import pytest
from werkzeug.exceptions import BadRequest
from repairdesk.config.pagination import normalize_pagination
from repairdesk.utils.filters import parse_filters
from repairdesk.utils.validation import coerce_cost, optional_text


def test_parse_filters_defaults_and_validation(app_instance):
    specs = {'status': {'default': 'All', 'validate': lambda v: v in ('All', 'New')}, 'n': {'default': 0, 'coerce': int}}
    assert parse_filters(specs, {}) == {'status': 'All', 'n': 0}
    assert parse_filters(specs, {'status': 'New', 'n': '3'}) == {'status': 'New', 'n': 3}
    with app_instance.test_request_context():
        with pytest.raises(BadRequest):
            parse_filters(specs, {'status': 'Lost'})
        with pytest.raises(BadRequest):
            parse_filters(specs, {'n': 'x'})


def test_normalize_pagination():
    assert normalize_pagination(None, None) == (50, 0)
    assert normalize_pagination('500', '-4') == (200, 0)
    assert normalize_pagination('0', '7') == (1, 7)
    with pytest.raises(ValueError):
        normalize_pagination('abc', None)


def test_coerce_cost(app_instance):
    assert coerce_cost('') is None
    assert coerce_cost('12.50') == 12.5
    with app_instance.test_request_context():
        for bad in ('-1', 'abc', True, 'nan'):
            with pytest.raises(BadRequest):
                coerce_cost(bad)


def test_optional_text():
    assert optional_text('  x ') == 'x'
    assert optional_text('   ') is None
    assert optional_text(None) is None
