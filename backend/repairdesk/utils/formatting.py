"""Display labels shared by the HTML page and the JSON ticket rows."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
from repairdesk.models.entities import Customer, Device, Technician, TicketStatus

UNASSIGNED = 'Unassigned'


def short_id(item_id: str) -> str:
    return item_id[:6]


def created_label(dt: datetime) -> str:
    """Medium date plus short time, e.g. ``Jan 5, 2024 3:04 PM`` (UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    hour = dt.hour % 12 or 12
    return f"{dt:%b} {dt.day}, {dt.year} {hour}:{dt:%M} {'AM' if dt.hour < 12 else 'PM'}"


def customer_label(customer: Optional[Customer]) -> str:
    if customer is None:
        return ''
    return f'{customer.name} ({customer.phone})' if customer.phone else customer.name


def device_label(device: Optional[Device]) -> str:
    if device is None:
        return ''
    parts = [device.type, device.brand, device.model, f'SN:{device.serial}' if device.serial else None]
    return ' '.join(p for p in parts if p)


def technician_label(technician: Optional[Technician]) -> str:
    return technician.name if technician else UNASSIGNED


def cost_label(cost: Optional[float]) -> str:
    return f'${cost:.2f}' if cost is not None else '?'


def status_css(status: TicketStatus) -> str:
    return 'status-' + status.value.replace(' ', '').lower()


__all__ = [
    'UNASSIGNED', 'short_id', 'created_label', 'customer_label', 'device_label',
    'technician_label', 'cost_label', 'status_css',
]
