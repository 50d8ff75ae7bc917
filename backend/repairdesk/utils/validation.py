from __future__ import annotations
"""Reusable validation helpers for request payloads.

Required-field checks happen here, before any store call, so a rejected request
never mutates state. All helpers abort with 400 and a detail message.
"""
import math
from typing import Any, Iterable, Mapping, Optional
from flask import abort, request


def validate_status(new_status: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that new_status is inside allowed.

    Returns the status (to enable inline usage) or aborts with 400.
    """
    if new_status not in allowed:
        abort(400, description=f"{field_name} invalid")
    return new_status


def json_object(required: bool = False) -> dict:
    """Request JSON body as a dict; non-object bodies abort with 400."""
    data = request.get_json(silent=True)
    if data is None and not required:
        return {}
    if not isinstance(data, dict):
        abort(400, description='JSON object body required')
    return data


def require_fields(data: Mapping[str, Any], names: Iterable[str], description: Optional[str] = None) -> None:
    names = list(names)
    missing = [n for n in names if not _present(data.get(n))]
    if missing:
        abort(400, description=description or f"{', '.join(names)} required")


def optional_text(value: Any) -> Optional[str]:
    """Blank form/JSON values mean 'not provided'."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def coerce_cost(value: Any, field_name: str = 'estimatedCost') -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        abort(400, description=f"{field_name} invalid")
    try:
        cost = float(value)
    except (TypeError, ValueError):
        abort(400, description=f"{field_name} invalid")
    if math.isnan(cost) or math.isinf(cost) or cost < 0:
        abort(400, description=f"{field_name} must be a non-negative number")
    return cost


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True

__all__ = ['validate_status', 'json_object', 'require_fields', 'optional_text', 'coerce_cost']
