from repairdesk.models.entities import TicketStatus
from repairdesk.services.seed import seed_demo
from repairdesk.services.store import DEFAULT_STORAGE_KEY, RepairStore


def test_seed_populates_empty_store(store):
    assert seed_demo(store) is True
    (customer,) = store.customers
    (technician,) = store.technicians
    (device,) = store.devices
    (ticket,) = store.tickets
    assert customer.name == 'John Doe' and customer.email == 'john@example.com'
    assert technician.name == 'Alice'
    assert (device.type, device.brand, device.serial) == ('Laptop', 'Dell', 'ABC123')
    assert ticket.status is TicketStatus.DIAGNOSING
    assert ticket.customer_id == customer.id
    assert ticket.device_id == device.id
    assert ticket.technician_id == technician.id
    assert ticket.estimated_cost == 150


def test_seed_skips_non_empty_store(store, storage):
    store.add_technician({'name': 'Bob'})
    writes = storage.writes
    assert seed_demo(store) is False
    assert storage.writes == writes
    assert store.tickets == ()


def test_seed_never_overwrites_unreadable_record(storage):
    blob = '{"customers": [{"id": "c1", "name": "Ann"}, {"id": "c2", "name": ""}]}'
    storage.set(DEFAULT_STORAGE_KEY, blob)
    store = RepairStore(storage)
    store.hydrate()
    assert seed_demo(store) is False
    assert storage.get(DEFAULT_STORAGE_KEY) == blob
