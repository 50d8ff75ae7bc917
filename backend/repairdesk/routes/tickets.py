from __future__ import annotations
from flask import Blueprint, request, abort
from repairdesk import get_store
from repairdesk.decorators.audit import audit_log
from repairdesk.models.entities import ALL_STATUSES, STATUS_FILTER_ALL, TicketStatus
from repairdesk.services.query import TicketRow, filter_rows, join_ticket
from repairdesk.services.store import StoreValidationError
from repairdesk.utils.filters import parse_filters
from repairdesk.utils.formatting import (
    cost_label, created_label, customer_label, device_label, short_id, technician_label,
)
from repairdesk.utils.listing import apply_pagination, make_list_response
from repairdesk.utils.validation import validate_status, json_object, require_fields, optional_text, coerce_cost

tickets_bp = Blueprint('tickets', __name__)

TICKET_FILTER_SPECS = {
    'status': {'default': STATUS_FILTER_ALL, 'validate': lambda v: v == STATUS_FILTER_ALL or v in ALL_STATUSES},
    'q': {'default': '', 'coerce': str},
}


@tickets_bp.get('/tickets')
def list_tickets():
    filters = parse_filters(TICKET_FILTER_SPECS, request.args)
    rows = filter_rows(get_store().snapshot(), filters['status'], filters['q'])
    page, total, limit, offset = apply_pagination(rows)
    return make_list_response([_row_json(r) for r in page], total, limit, offset)


@tickets_bp.post('/tickets')
@audit_log('TICKET.CREATE', entity='Ticket', entity_id_key='id', meta_keys=['customerId', 'deviceId', 'status'])
def create_ticket():
    data = json_object()
    require_fields(data, ['customerId', 'deviceId', 'problemDescription'], 'Customer, device and description are required')
    status = validate_status(data.get('status') or TicketStatus.NEW.value, ALL_STATUSES)
    store = get_store()
    try:
        t = store.add_ticket({
            'customer_id': optional_text(data.get('customerId')),
            'device_id': optional_text(data.get('deviceId')),
            'problem_description': optional_text(data.get('problemDescription')),
            'status': status,
            'technician_id': optional_text(data.get('technicianId')),
            'estimated_cost': coerce_cost(data.get('estimatedCost')),
            'notes': optional_text(data.get('notes')),
        })
    except StoreValidationError as e:
        abort(400, description=str(e))
    return _row_json(join_ticket(store.snapshot(), t)), 201


@tickets_bp.get('/tickets/<ticket_id>')
def get_ticket(ticket_id: str):
    store = get_store()
    t = store.get_ticket(ticket_id)
    if not t:
        abort(404)
    return _row_json(join_ticket(store.snapshot(), t))


@tickets_bp.patch('/tickets/<ticket_id>')
@audit_log('TICKET.UPDATE', entity='Ticket', entity_id_arg='ticket_id', diff_keys=['status', 'technicianId', 'estimatedCost', 'notes'], pre_fetch=lambda a, kw: _prefetch_ticket(kw.get('ticket_id')), meta_keys=['status'])
def update_ticket(ticket_id: str):
    store = get_store()
    if not store.get_ticket(ticket_id):
        abort(404)
    data = json_object(required=True)
    if not data:
        abort(400, description='at least one ticket field required')
    updates = dict(data)
    if 'status' in updates:
        updates['status'] = validate_status(updates['status'], ALL_STATUSES)
    if 'estimatedCost' in updates:
        updates['estimatedCost'] = coerce_cost(updates['estimatedCost'])
    for key in ('technicianId', 'notes'):
        if key in updates:
            updates[key] = optional_text(updates[key])
    try:
        t = store.update_ticket(ticket_id, updates)
    except StoreValidationError as e:
        abort(400, description=str(e))
    return _row_json(join_ticket(store.snapshot(), t))


@tickets_bp.delete('/tickets/<ticket_id>')
@audit_log('TICKET.DELETE', entity='Ticket', entity_id_arg='ticket_id')
def delete_ticket(ticket_id: str):
    # deleting an unknown id is a no-op, not an error
    get_store().remove_ticket(ticket_id)
    return '', 204


def _row_json(row: TicketRow):
    t = row.ticket
    return {
        **t.to_record(),
        'customer': row.customer.to_record() if row.customer else None,
        'device': row.device.to_record() if row.device else None,
        'technician': row.technician.to_record() if row.technician else None,
        'display': {
            'shortId': short_id(t.id),
            'created': created_label(t.created_at),
            'customer': customer_label(row.customer),
            'device': device_label(row.device),
            'technician': technician_label(row.technician),
            'estimatedCost': cost_label(t.estimated_cost),
        },
    }


def _prefetch_ticket(ticket_id: str):
    t = get_store().get_ticket(ticket_id)
    if not t:
        return {}
    rec = t.to_record()
    return {k: rec.get(k) for k in ('status', 'technicianId', 'estimatedCost', 'notes')}
