from __future__ import annotations
from flask import Blueprint, abort
from repairdesk import get_store
from repairdesk.decorators.audit import audit_log
from repairdesk.services.store import StoreValidationError
from repairdesk.utils.listing import apply_pagination, make_list_response
from repairdesk.utils.validation import json_object, require_fields, optional_text

technicians_bp = Blueprint('technicians', __name__)


@technicians_bp.get('/technicians')
def list_technicians():
    rows, total, limit, offset = apply_pagination(get_store().technicians)
    return make_list_response([t.to_record() for t in rows], total, limit, offset)


@technicians_bp.post('/technicians')
@audit_log('TECHNICIAN.CREATE', entity='Technician', entity_id_key='id', meta_keys=['name'])
def create_technician():
    data = json_object()
    require_fields(data, ['name'], 'name required')
    try:
        t = get_store().add_technician({'name': optional_text(data.get('name'))})
    except StoreValidationError as e:
        abort(400, description=str(e))
    return t.to_record(), 201
