import os, sys, pytest
from datetime import datetime, timedelta, timezone
# Ensure backend directory is on path so 'repairdesk' and 'scripts' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from repairdesk import create_app, get_store
from repairdesk.services.storage import MemoryBlobStorage
from repairdesk.services.store import RepairStore


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 5, 15, 4, 5, 123000, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope='session', autouse=True)
def app_instance():
    app = create_app({
        'DATABASE_URL': 'sqlite+pysqlite:///:memory:',
        'SEED_DEMO': False,
        'SECRET_KEY': 'test-secret',
        'TESTING': True,
    })
    yield app

@pytest.fixture(autouse=True)
def clean_store(app_instance):
    # wholesale replace with empty collections so tests start from a blank store
    with app_instance.app_context():
        assert get_store().import_all('{}') is None
    yield

@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()

@pytest.fixture()
def app_store(app_instance):
    with app_instance.app_context():
        yield get_store()

@pytest.fixture()
def clock():
    return FakeClock()

@pytest.fixture()
def storage():
    return MemoryBlobStorage()

@pytest.fixture()
def store(storage, clock):
    return RepairStore(storage, clock=clock)
