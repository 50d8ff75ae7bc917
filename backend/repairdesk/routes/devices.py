from __future__ import annotations
from flask import Blueprint, abort
from repairdesk import get_store
from repairdesk.decorators.audit import audit_log
from repairdesk.services.store import StoreValidationError
from repairdesk.utils.listing import apply_pagination, make_list_response
from repairdesk.utils.validation import json_object, require_fields, optional_text

devices_bp = Blueprint('devices', __name__)


@devices_bp.get('/devices')
def list_devices():
    rows, total, limit, offset = apply_pagination(get_store().devices)
    return make_list_response([d.to_record() for d in rows], total, limit, offset)


@devices_bp.post('/devices')
@audit_log('DEVICE.CREATE', entity='Device', entity_id_key='id', meta_keys=['type', 'brand', 'model'])
def create_device():
    data = json_object()
    # type is free text; the HTML form offers Laptop/Desktop/Phone/Tablet/Other
    require_fields(data, ['type'], 'type required')
    try:
        d = get_store().add_device({
            'type': optional_text(data.get('type')),
            'brand': optional_text(data.get('brand')),
            'model': optional_text(data.get('model')),
            'serial': optional_text(data.get('serial')),
        })
    except StoreValidationError as e:
        abort(400, description=str(e))
    return d.to_record(), 201
