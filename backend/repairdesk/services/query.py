from __future__ import annotations
"""Ticket filtering and display joins.

Pure projections over a ``RepairData`` snapshot, recomputed on every request.
References resolve through the snapshot's id lookups; missing customers,
devices or technicians resolve to ``None``.
"""
from dataclasses import dataclass
from typing import List, Optional, Union
from repairdesk.models.entities import (
    Customer, Device, RepairData, STATUS_FILTER_ALL, Technician, Ticket, TicketStatus,
)


@dataclass(frozen=True)
class TicketRow:
    ticket: Ticket
    customer: Optional[Customer] = None
    device: Optional[Device] = None
    technician: Optional[Technician] = None


def join_ticket(data: RepairData, ticket: Ticket) -> TicketRow:
    return TicketRow(
        ticket=ticket,
        customer=data.find_customer(ticket.customer_id),
        device=data.find_device(ticket.device_id),
        technician=data.find_technician(ticket.technician_id),
    )


def search_text(row: TicketRow) -> str:
    parts = [row.ticket.problem_description]
    if row.customer:
        parts += [row.customer.name, row.customer.phone, row.customer.email]
    if row.device:
        parts += [row.device.brand, row.device.model, row.device.serial]
    if row.technician:
        parts.append(row.technician.name)
    return ' '.join(p for p in parts if p).lower()


def _status_value(status: Union[str, TicketStatus, None]) -> str:
    if status is None or status == '':
        return STATUS_FILTER_ALL
    return status.value if isinstance(status, TicketStatus) else str(status)


def filter_rows(data: RepairData, status: Union[str, TicketStatus, None] = STATUS_FILTER_ALL, search: str = '') -> List[TicketRow]:
    wanted = _status_value(status)
    needle = (search or '').lower()
    rows = []
    for ticket in data.tickets:
        if wanted != STATUS_FILTER_ALL and ticket.status.value != wanted:
            continue
        row = join_ticket(data, ticket)
        if needle and needle not in search_text(row):
            continue
        rows.append(row)
    return rows


def filter_tickets(data: RepairData, status: Union[str, TicketStatus, None] = STATUS_FILTER_ALL, search: str = '') -> List[Ticket]:
    """Tickets passing the status filter ("All" or exact) and the substring search."""
    return [row.ticket for row in filter_rows(data, status, search)]


__all__ = ['TicketRow', 'join_ticket', 'search_text', 'filter_rows', 'filter_tickets']
