from __future__ import annotations
import logging
from repairdesk.models.entities import TicketStatus
from repairdesk.services.store import RepairStore

logger = logging.getLogger(__name__)

DEMO_CUSTOMER = {'name': 'John Doe', 'phone': '555-0100', 'email': 'john@example.com'}
DEMO_TECHNICIAN = {'name': 'Alice'}
DEMO_DEVICE = {'type': 'Laptop', 'brand': 'Dell', 'model': 'XPS 13', 'serial': 'ABC123'}


def seed_demo(store: RepairStore) -> bool:
    """Populate one customer, technician, device and ticket when the store is completely empty.

    A persisted record that could not be loaded is never overwritten.
    Returns True when demo data was written.
    """
    if store.has_unreadable_record:
        logger.warning('Skipping demo seed: persisted record (key=%s) could not be loaded', store.key)
        return False
    if not store.is_empty():
        return False
    customer = store.add_customer(DEMO_CUSTOMER)
    technician = store.add_technician(DEMO_TECHNICIAN)
    device = store.add_device(DEMO_DEVICE)
    store.add_ticket({
        'customer_id': customer.id,
        'device_id': device.id,
        'problem_description': "Won't boot, possible SSD failure",
        'status': TicketStatus.DIAGNOSING,
        'technician_id': technician.id,
        'estimated_cost': 150,
        'notes': 'Run diagnostics, check SSD health',
    })
    logger.info('Seeded demo repair data (key=%s)', store.key)
    return True
