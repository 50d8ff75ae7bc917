from __future__ import annotations
import logging
from typing import Any, Dict, Optional
from flask import has_request_context, request

audit_logger = logging.getLogger('repairdesk.audit')


def add_audit(action: str, entity: Optional[str] = None, entity_id: Optional[str] = None, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Emit one structured audit record for a store mutation.

    Parameters:
      action: short action code e.g. TICKET.CREATE, TICKET.UPDATE, DATA.IMPORT
      entity: optional entity name (Ticket, Customer, etc.)
      entity_id: optional record id
      meta: additional JSON-safe dictionary (will be shallow copied)
    """
    record = {
        'action': action,
        'entity': entity,
        'entity_id': str(entity_id) if entity_id is not None else None,
        'meta': dict(meta or {}),
        'remote_addr': request.remote_addr if has_request_context() else None,
    }
    audit_logger.info('%s entity=%s id=%s meta=%s', action, entity, record['entity_id'], record['meta'], extra={'audit': record})
    return record
