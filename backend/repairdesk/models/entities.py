"""Repair desk records.

Every record serializes with camelCase keys (``customerId``,
``problemDescription``...) so the persisted blob keeps the shape the shop's
exported files already use, while Python code works with snake_case
attributes. Blank strings are treated as absent so optional fields fall back
to ``None`` and required fields fail validation.
"""
from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel


class TicketStatus(str, Enum):
    NEW = 'New'
    DIAGNOSING = 'Diagnosing'
    AWAITING_PARTS = 'Awaiting Parts'
    IN_PROGRESS = 'In Progress'
    READY = 'Ready'
    PICKED_UP = 'Picked Up'
    CANCELLED = 'Cancelled'


# Canonical display order; any status may be set from any other.
ALL_STATUSES = tuple(s.value for s in TicketStatus)
STATUS_FILTER_ALL = 'All'
DEVICE_TYPES = ('Laptop', 'Desktop', 'Phone', 'Tablet', 'Other')


def utc_timestamp(dt: datetime) -> datetime:
    """Return a UTC tz-aware timestamp truncated to whole milliseconds."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def format_timestamp(dt: datetime) -> str:
    dt = utc_timestamp(dt)
    return dt.strftime('%Y-%m-%dT%H:%M:%S.') + f'{dt.microsecond // 1000:03d}Z'


class RecordModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra='ignore',
    )

    @model_validator(mode='before')
    @classmethod
    def _drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if not (isinstance(v, str) and not v.strip())}
        return data

    def to_record(self) -> dict:
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class Customer(RecordModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None


class Technician(RecordModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)


class Device(RecordModel):
    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    brand: Optional[str] = None
    model: Optional[str] = None
    serial: Optional[str] = None


class Ticket(RecordModel):
    id: str = Field(min_length=1)
    created_at: datetime
    updated_at: datetime
    customer_id: str = Field(min_length=1)
    device_id: str = Field(min_length=1)
    problem_description: str = Field(min_length=1)
    status: TicketStatus = TicketStatus.NEW
    technician_id: Optional[str] = None
    estimated_cost: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @field_validator('created_at', 'updated_at')
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return utc_timestamp(value)

    @field_serializer('created_at', 'updated_at')
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)


class RepairData(BaseModel):
    """The whole persisted record: four order-preserving collections.

    Collections are tuples so a snapshot handed out by the store cannot be
    changed in place.
    """
    model_config = ConfigDict(frozen=True, extra='ignore')

    customers: Tuple[Customer, ...] = ()
    technicians: Tuple[Technician, ...] = ()
    devices: Tuple[Device, ...] = ()
    tickets: Tuple[Ticket, ...] = ()

    @field_validator('customers', 'technicians', 'devices', 'tickets', mode='before')
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return () if value is None else value

    def is_empty(self) -> bool:
        return not (self.customers or self.technicians or self.devices or self.tickets)

    def find_customer(self, customer_id: Optional[str]) -> Optional[Customer]:
        return _find_by_id(self.customers, customer_id)

    def find_technician(self, technician_id: Optional[str]) -> Optional[Technician]:
        return _find_by_id(self.technicians, technician_id)

    def find_device(self, device_id: Optional[str]) -> Optional[Device]:
        return _find_by_id(self.devices, device_id)

    def find_ticket(self, ticket_id: Optional[str]) -> Optional[Ticket]:
        return _find_by_id(self.tickets, ticket_id)

    def to_record(self) -> dict:
        return {
            'customers': [c.to_record() for c in self.customers],
            'technicians': [t.to_record() for t in self.technicians],
            'devices': [d.to_record() for d in self.devices],
            'tickets': [t.to_record() for t in self.tickets],
        }


def _find_by_id(items: Iterable[RecordModel], item_id: Optional[str]):
    # linear scan; dangling or blank references resolve to None
    if not item_id:
        return None
    return next((item for item in items if item.id == item_id), None)


__all__ = [
    'TicketStatus', 'ALL_STATUSES', 'STATUS_FILTER_ALL', 'DEVICE_TYPES',
    'Customer', 'Technician', 'Device', 'Ticket', 'RepairData',
    'utc_timestamp', 'format_timestamp',
]
