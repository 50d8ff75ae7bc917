"""Repair data store.

Single source of truth for customers, technicians, devices and tickets. Every
mutation builds the next ``RepairData`` snapshot, writes the full record to the
injected ``BlobStorage`` under one fixed key, and only then swaps it in, so a
failed write leaves the in-memory state untouched.

Referential integrity is not enforced: tickets may point at customers, devices
or technicians that do not exist, and nothing cascades.
"""
from __future__ import annotations
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Mapping, Optional, Type, TypeVar
from pydantic import ValidationError
from pydantic.alias_generators import to_camel
from repairdesk.models.entities import Customer, Device, RecordModel, RepairData, Technician, Ticket, utc_timestamp
from repairdesk.services.codec import describe_validation_error, dump_snapshot, parse_snapshot
from repairdesk.services.storage import BlobStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = 'crm_local_storage_v1'

# Fields callers may not overwrite through update_ticket.
_TICKET_MANAGED_FIELDS = frozenset({'id', 'created_at', 'updated_at'})
_TICKET_FIELD_NAMES = {to_camel(name): name for name in Ticket.model_fields} | {name: name for name in Ticket.model_fields}

R = TypeVar('R', bound=RecordModel)


class StoreValidationError(ValueError):
    """Raised when fields passed to a store mutation do not form a valid record."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class RepairStore:
    def __init__(
        self,
        storage: BlobStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock
        self._id_factory = id_factory
        self._data = RepairData()
        self._unreadable_record = False

    # -- reads -------------------------------------------------------------

    @property
    def key(self) -> str:
        return self._key

    def snapshot(self) -> RepairData:
        return self._data

    @property
    def customers(self) -> tuple:
        return self._data.customers

    @property
    def technicians(self) -> tuple:
        return self._data.technicians

    @property
    def devices(self) -> tuple:
        return self._data.devices

    @property
    def tickets(self) -> tuple:
        return self._data.tickets

    def is_empty(self) -> bool:
        return self._data.is_empty()

    @property
    def has_unreadable_record(self) -> bool:
        """True while a persisted record exists that ``hydrate`` could not load."""
        return self._unreadable_record

    def get_ticket(self, ticket_id: str) -> Optional[Ticket]:
        return self._data.find_ticket(ticket_id)

    def find_customer(self, customer_id: Optional[str]) -> Optional[Customer]:
        return self._data.find_customer(customer_id)

    def find_device(self, device_id: Optional[str]) -> Optional[Device]:
        return self._data.find_device(device_id)

    def find_technician(self, technician_id: Optional[str]) -> Optional[Technician]:
        return self._data.find_technician(technician_id)

    # -- persistence -------------------------------------------------------

    def hydrate(self) -> bool:
        """Load the persisted record; unreadable data is logged and treated as no data.

        Returns True when a record was loaded. A record that exists but cannot
        be read sets ``has_unreadable_record`` so callers do not overwrite it
        with demo data.
        """
        try:
            raw = self._storage.get(self._key)
        except Exception:
            logger.exception('Failed to read persisted repair data (key=%s)', self._key)
            self._unreadable_record = True
            return False
        if not raw:
            return False
        result = parse_snapshot(raw)
        if not result.ok:
            logger.warning('Failed to hydrate repair data (key=%s): %s', self._key, result.error)
            self._unreadable_record = True
            return False
        self._data = result.snapshot
        self._unreadable_record = False
        logger.info(
            'Hydrated repair data: %d customers, %d technicians, %d devices, %d tickets',
            len(self._data.customers), len(self._data.technicians), len(self._data.devices), len(self._data.tickets),
        )
        return True

    def _commit(self, data: RepairData) -> None:
        self._storage.set(self._key, dump_snapshot(data, indent=None))
        self._data = data
        self._unreadable_record = False

    def export_all(self) -> str:
        return dump_snapshot(self._data, indent=2)

    def import_all(self, json_text: str) -> Optional[str]:
        """Replace all four collections from ``json_text``.

        Returns ``None`` on success, otherwise an error message (state unchanged).
        """
        result = parse_snapshot(json_text)
        if not result.ok:
            logger.info('Rejected import: %s', result.error)
            return result.error
        self._commit(result.snapshot)
        return None

    # -- mutations ---------------------------------------------------------

    def add_customer(self, fields: Mapping[str, Any]) -> Customer:
        customer = self._build(Customer, fields, self._data.customers)
        self._commit(self._data.model_copy(update={'customers': (customer, *self._data.customers)}))
        return customer

    def add_technician(self, fields: Mapping[str, Any]) -> Technician:
        technician = self._build(Technician, fields, self._data.technicians)
        self._commit(self._data.model_copy(update={'technicians': (technician, *self._data.technicians)}))
        return technician

    def add_device(self, fields: Mapping[str, Any]) -> Device:
        device = self._build(Device, fields, self._data.devices)
        self._commit(self._data.model_copy(update={'devices': (device, *self._data.devices)}))
        return device

    def add_ticket(self, fields: Mapping[str, Any]) -> Ticket:
        now = utc_timestamp(self._clock())
        ticket = self._build(Ticket, {**_ticket_updates(fields), 'created_at': now, 'updated_at': now}, self._data.tickets)
        self._commit(self._data.model_copy(update={'tickets': (ticket, *self._data.tickets)}))
        return ticket

    def update_ticket(self, ticket_id: str, updates: Mapping[str, Any]) -> Optional[Ticket]:
        """Merge ``updates`` into the ticket and refresh ``updated_at``.

        Unknown ids leave the collection unchanged and return ``None``.
        """
        changes = _ticket_updates(updates)
        updated: Optional[Ticket] = None
        tickets = []
        for ticket in self._data.tickets:
            if ticket.id == ticket_id:
                merged = {**ticket.model_dump(), **changes, 'updated_at': self._next_timestamp(ticket.updated_at)}
                updated = _validate(Ticket, merged)
                tickets.append(updated)
            else:
                tickets.append(ticket)
        self._commit(self._data.model_copy(update={'tickets': tuple(tickets)}))
        return updated

    def remove_ticket(self, ticket_id: str) -> bool:
        tickets = [t for t in self._data.tickets if t.id != ticket_id]
        removed = len(tickets) != len(self._data.tickets)
        self._commit(self._data.model_copy(update={'tickets': tuple(tickets)}))
        return removed

    # -- helpers -----------------------------------------------------------

    def _build(self, model: Type[R], fields: Mapping[str, Any], existing: Iterable[RecordModel]) -> R:
        taken = {item.id for item in existing}
        new_id = self._id_factory()
        while new_id in taken:
            new_id = self._id_factory()
        return _validate(model, {**fields, 'id': new_id})

    def _next_timestamp(self, previous: datetime) -> datetime:
        now = utc_timestamp(self._clock())
        if now <= previous:
            now = previous + timedelta(milliseconds=1)
        return now


def _validate(model: Type[R], data: Mapping[str, Any]) -> R:
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        raise StoreValidationError(describe_validation_error(e)) from e


def _ticket_updates(updates: Mapping[str, Any]) -> dict:
    out = {}
    for key, value in updates.items():
        name = _TICKET_FIELD_NAMES.get(key)
        if name is None:
            raise StoreValidationError(f'Unknown ticket field {key}')
        if name in _TICKET_MANAGED_FIELDS:
            continue
        out[name] = value
    return out


__all__ = ['RepairStore', 'StoreValidationError', 'DEFAULT_STORAGE_KEY']
