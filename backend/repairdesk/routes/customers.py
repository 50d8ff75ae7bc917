from __future__ import annotations
from flask import Blueprint, abort
from repairdesk import get_store
from repairdesk.decorators.audit import audit_log
from repairdesk.services.store import StoreValidationError
from repairdesk.utils.listing import apply_pagination, make_list_response
from repairdesk.utils.validation import json_object, require_fields, optional_text

customers_bp = Blueprint('customers', __name__)


@customers_bp.get('/customers')
def list_customers():
    rows, total, limit, offset = apply_pagination(get_store().customers)
    return make_list_response([c.to_record() for c in rows], total, limit, offset)


@customers_bp.post('/customers')
@audit_log('CUSTOMER.CREATE', entity='Customer', entity_id_key='id', meta_keys=['name'])
def create_customer():
    data = json_object()
    require_fields(data, ['name'], 'name required')
    try:
        c = get_store().add_customer({
            'name': optional_text(data.get('name')),
            'phone': optional_text(data.get('phone')),
            'email': optional_text(data.get('email')),
        })
    except StoreValidationError as e:
        abort(400, description=str(e))
    return c.to_record(), 201
