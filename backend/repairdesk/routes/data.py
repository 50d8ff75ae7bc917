from __future__ import annotations
import time
from flask import Blueprint, request, abort, make_response
from repairdesk import get_store
from repairdesk.decorators.audit import audit_log

data_bp = Blueprint('data', __name__)


def export_filename() -> str:
    return f'repair-data-{int(time.time() * 1000)}.json'


@data_bp.get('/export')
def export_data():
    resp = make_response(get_store().export_all())
    resp.mimetype = 'application/json'
    resp.headers['Content-Disposition'] = f'attachment; filename={export_filename()}'
    return resp


@data_bp.post('/import')
@audit_log('DATA.IMPORT', entity='RepairData', meta_keys=['customers', 'technicians', 'devices', 'tickets'])
def import_data():
    """Replace every collection with the posted JSON document (all-or-nothing)."""
    store = get_store()
    err = store.import_all(request.get_data(as_text=True))
    if err:
        abort(400, description=err)
    return _counts(store)


def _counts(store):
    return {
        'customers': len(store.customers),
        'technicians': len(store.technicians),
        'devices': len(store.devices),
        'tickets': len(store.tickets),
    }
