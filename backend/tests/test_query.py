import pytest
from repairdesk.services.query import filter_rows, filter_tickets, join_ticket, search_text


@pytest.fixture()
def populated(store):
    john = store.add_customer({'name': 'John Doe', 'phone': '555-0100', 'email': 'john@example.com'})
    jane = store.add_customer({'name': 'Jane Roe'})
    dell = store.add_device({'type': 'Laptop', 'brand': 'Dell', 'model': 'XPS 13', 'serial': 'ABC123'})
    phone = store.add_device({'type': 'Phone', 'brand': 'Apple', 'model': 'iPhone 12'})
    alice = store.add_technician({'name': 'Alice'})
    new = store.add_ticket({'customer_id': john.id, 'device_id': dell.id, 'problem_description': 'Fan noise', 'status': 'New'})
    ready = store.add_ticket({'customer_id': jane.id, 'device_id': phone.id, 'problem_description': 'Cracked screen', 'status': 'Ready', 'technician_id': alice.id})
    cancelled = store.add_ticket({'customer_id': 'gone', 'device_id': 'gone', 'problem_description': 'Water damage', 'status': 'Cancelled'})
    return store, {'new': new, 'ready': ready, 'cancelled': cancelled}


def test_status_filter_exact(populated):
    store, t = populated
    assert filter_tickets(store.snapshot(), 'Ready') == [t['ready']]


def test_all_and_blank_filters_return_everything_in_order(populated):
    store, t = populated
    expected = [t['cancelled'], t['ready'], t['new']]
    assert filter_tickets(store.snapshot(), 'All') == expected
    assert filter_tickets(store.snapshot(), None, '') == expected


def test_search_case_insensitive_on_device_brand(populated):
    store, t = populated
    assert filter_tickets(store.snapshot(), 'All', 'dell') == [t['new']]
    assert filter_tickets(store.snapshot(), 'All', 'DELL') == [t['new']]


@pytest.mark.parametrize('term,key', [
    ('555-0100', 'new'),
    ('john@example', 'new'),
    ('abc123', 'new'),
    ('iphone', 'ready'),
    ('alice', 'ready'),
    ('water', 'cancelled'),
])
def test_search_covers_joined_fields(populated, term, key):
    store, t = populated
    assert filter_tickets(store.snapshot(), 'All', term) == [t[key]]


def test_status_and_search_combine(populated):
    store, _ = populated
    assert filter_tickets(store.snapshot(), 'New', 'alice') == []


def test_device_type_not_searched(populated):
    store, _ = populated
    assert filter_tickets(store.snapshot(), 'All', 'laptop') == []


def test_dangling_references_resolve_to_none(populated):
    store, t = populated
    row = join_ticket(store.snapshot(), t['cancelled'])
    assert row.customer is None and row.device is None and row.technician is None
    assert search_text(row) == 'water damage'


def test_filter_rows_join(populated):
    store, t = populated
    row = filter_rows(store.snapshot(), 'Ready')[0]
    assert row.customer.name == 'Jane Roe'
    assert row.technician.name == 'Alice'
