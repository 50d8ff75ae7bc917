from __future__ import annotations
"""Audit logging decorator for route handlers that mutate the repair store.

Usage examples:

@audit_log('CUSTOMER.CREATE', entity='Customer', entity_id_key='id', meta_keys=['name'])
def create_customer():
    ... return customer.to_record(), 201

@audit_log('TICKET.UPDATE', entity='Ticket', entity_id_arg='ticket_id', diff_keys=['status'],
           pre_fetch=lambda a, kw: _prefetch_ticket(kw.get('ticket_id')))
def update_ticket(ticket_id): ...

Parameters:
  action: required audit action code (e.g. TICKET.CREATE)
  entity: optional entity label (Ticket, Customer, Device, Technician)
  entity_id_key: key in the returned JSON object whose value becomes entity_id.
  entity_id_arg: name of the path parameter to use for entity_id (fallback if entity_id_key absent).
  meta_keys: list of keys to project from returned JSON into meta dict (shallow copy).
  meta_builder: callable returning a meta dict; receives (data, original_return_value, args, kwargs). If provided it overrides meta_keys.
  diff_keys / pre_fetch: snapshot fields before the handler runs and record before/after for changed keys.

Return handling:
  Flask view functions commonly return one of:
    dict
    (dict, status)
    Response (redirects from the HTML page)
  The decorator extracts the first element as the JSON payload for key/meta extraction while preserving the original return value.
  Error responses (status >= 400) are not audited.
"""

import logging
from functools import wraps
from typing import Any, Callable, Iterable, Optional, Dict

from repairdesk.services.audit import add_audit

logger = logging.getLogger(__name__)


def _extract_payload(rv: Any):
    """Return (data, status) where data is the JSON-able dict for inspection."""
    if isinstance(rv, tuple) and rv:
        status = rv[1] if len(rv) > 1 and isinstance(rv[1], int) else 200
        return rv[0], status
    return rv, getattr(rv, 'status_code', 200)


def audit_log(
    action: str,
    *,
    entity: Optional[str] = None,
    entity_id_key: Optional[str] = None,
    entity_id_arg: Optional[str] = None,
    meta_keys: Optional[Iterable[str]] = None,
    meta_builder: Optional[Callable[[dict, Any, tuple, dict], dict]] = None,
    diff_keys: Optional[Iterable[str]] = None,
    pre_fetch: Optional[Callable[[tuple, dict], Dict[str, Any]]] = None,
):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            before_snapshot = None
            if diff_keys and pre_fetch:
                before_snapshot = pre_fetch(args, kwargs)
            rv = fn(*args, **kwargs)
            try:
                data, status = _extract_payload(rv)
                if status >= 400:
                    return rv
                entity_id = None
                if isinstance(data, dict) and entity_id_key and entity_id_key in data:
                    entity_id = data.get(entity_id_key)
                elif entity_id_arg and entity_id_arg in kwargs:
                    entity_id = kwargs.get(entity_id_arg)
                if not isinstance(data, dict):
                    data = {}
                meta = None
                if meta_builder:
                    meta = meta_builder(data, rv, args, kwargs)
                elif meta_keys:
                    meta = {k: data.get(k) for k in meta_keys if k in data}
                if diff_keys and isinstance(before_snapshot, dict):
                    changes = {}
                    for k in diff_keys:
                        if k in before_snapshot and k in data and before_snapshot.get(k) != data.get(k):
                            changes[k] = {'before': before_snapshot.get(k), 'after': data.get(k)}
                    if changes:
                        meta = dict(meta or {})
                        meta['changes'] = changes
                add_audit(action, entity, entity_id, meta)
            except Exception:
                # audit failures must not change the response of a mutation that already happened
                logger.exception('Audit logging failed for %s', action)
            return rv
        return wrapper
    return outer
