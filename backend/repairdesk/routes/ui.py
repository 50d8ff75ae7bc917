"""Single-page HTML view: ticket list with filters, create forms, import/export.

Every form posts back here and redirects to the page (post/redirect/get);
validation failures are reported with ``flash`` and leave the store untouched.
"""
from __future__ import annotations
from flask import Blueprint, flash, redirect, render_template, request, url_for
from werkzeug.exceptions import BadRequest
from repairdesk import get_store
from repairdesk.models.entities import ALL_STATUSES, DEVICE_TYPES, STATUS_FILTER_ALL, TicketStatus
from repairdesk.services.audit import add_audit
from repairdesk.services.query import filter_rows
from repairdesk.services.store import StoreValidationError
from repairdesk.utils import formatting
from repairdesk.utils.validation import coerce_cost, optional_text

ui_bp = Blueprint('ui', __name__)


@ui_bp.app_context_processor
def inject_formatting():
    return {'fmt': formatting}


def _render_index(import_text: str = '', show_import: bool = False, status_code: int = 200):
    store = get_store()
    status = request.values.get('status') or STATUS_FILTER_ALL
    if status != STATUS_FILTER_ALL and status not in ALL_STATUSES:
        status = STATUS_FILTER_ALL
    search = request.values.get('q') or ''
    data = store.snapshot()
    return render_template(
        'index.html',
        rows=filter_rows(data, status, search),
        customers=data.customers,
        technicians=data.technicians,
        devices=data.devices,
        statuses=ALL_STATUSES,
        filter_options=(STATUS_FILTER_ALL, *ALL_STATUSES),
        device_types=DEVICE_TYPES,
        status_filter=status,
        search=search,
        import_text=import_text,
        show_import=show_import or request.args.get('show_import') == '1',
    ), status_code


def _back():
    return redirect(url_for(
        'ui.index',
        status=request.form.get('return_status') or None,
        q=request.form.get('return_q') or None,
    ))


def _form_cost(raw):
    try:
        return coerce_cost(raw, 'Estimated cost'), None
    except BadRequest as e:
        return None, e.description


@ui_bp.get('/')
def index():
    return _render_index()


@ui_bp.post('/customers')
def add_customer():
    name = optional_text(request.form.get('name'))
    if not name:
        flash('Name required', 'error')
        return _back()
    c = get_store().add_customer({
        'name': name,
        'phone': optional_text(request.form.get('phone')),
        'email': optional_text(request.form.get('email')),
    })
    add_audit('CUSTOMER.CREATE', 'Customer', c.id, {'name': c.name})
    return _back()


@ui_bp.post('/technicians')
def add_technician():
    name = optional_text(request.form.get('name'))
    if not name:
        flash('Name required', 'error')
        return _back()
    t = get_store().add_technician({'name': name})
    add_audit('TECHNICIAN.CREATE', 'Technician', t.id, {'name': t.name})
    return _back()


@ui_bp.post('/devices')
def add_device():
    device_type = optional_text(request.form.get('type'))
    if not device_type:
        flash('Device type required', 'error')
        return _back()
    d = get_store().add_device({
        'type': device_type,
        'brand': optional_text(request.form.get('brand')),
        'model': optional_text(request.form.get('model')),
        'serial': optional_text(request.form.get('serial')),
    })
    add_audit('DEVICE.CREATE', 'Device', d.id, {'type': d.type})
    return _back()


@ui_bp.post('/tickets')
def add_ticket():
    form = request.form
    customer_id = optional_text(form.get('customer_id'))
    device_id = optional_text(form.get('device_id'))
    description = optional_text(form.get('problem_description'))
    if not (customer_id and device_id and description):
        flash('Customer, device and description are required', 'error')
        return _back()
    status = form.get('status') or TicketStatus.NEW.value
    if status not in ALL_STATUSES:
        flash('Invalid status', 'error')
        return _back()
    cost, err = _form_cost(form.get('estimated_cost'))
    if err:
        flash(err, 'error')
        return _back()
    t = get_store().add_ticket({
        'customer_id': customer_id,
        'device_id': device_id,
        'problem_description': description,
        'status': status,
        'technician_id': optional_text(form.get('technician_id')),
        'estimated_cost': cost,
    })
    add_audit('TICKET.CREATE', 'Ticket', t.id, {'status': t.status.value})
    return _back()


@ui_bp.post('/tickets/<ticket_id>/update')
def update_ticket(ticket_id: str):
    form = request.form
    updates = {}
    if 'status' in form:
        if form['status'] not in ALL_STATUSES:
            flash('Invalid status', 'error')
            return _back()
        updates['status'] = form['status']
    if 'technician_id' in form:
        # empty selection means Unassigned
        updates['technician_id'] = optional_text(form['technician_id'])
    if 'estimated_cost' in form:
        cost, err = _form_cost(form['estimated_cost'])
        if err:
            flash(err, 'error')
            return _back()
        updates['estimated_cost'] = cost
    if not updates:
        return _back()
    try:
        t = get_store().update_ticket(ticket_id, updates)
    except StoreValidationError as e:
        flash(str(e), 'error')
        return _back()
    if t is not None:
        add_audit('TICKET.UPDATE', 'Ticket', ticket_id, {'status': t.status.value})
    return _back()


@ui_bp.post('/tickets/<ticket_id>/delete')
def delete_ticket(ticket_id: str):
    if get_store().remove_ticket(ticket_id):
        add_audit('TICKET.DELETE', 'Ticket', ticket_id)
    return _back()


@ui_bp.post('/import')
def import_data():
    text = request.form.get('import_text', '')
    err = get_store().import_all(text)
    if err:
        flash(err, 'error')
        # keep the pasted text so it can be corrected
        return _render_index(import_text=text, show_import=True, status_code=400)
    add_audit('DATA.IMPORT', 'RepairData')
    flash('Data imported', 'info')
    return _back()
