import os
import tempfile

# Settings are validated at import time, so they must exist before any
# warehouse module is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="warehouse-tests-")
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("DB_TYPE", "sqlite")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TMP_DIR}/test.db")
os.environ.setdefault("JWT_ACCESS_SECRET_KEY", "test-secret-key")
os.environ.setdefault("INVENTORY_API_URL", "")

import pytest

from warehouse.models.enums.user_role import UserRole
from warehouse.schemas.auth.auth_schemas import Actor
from warehouse.schemas.inventory.inventory_batch_schemas import BatchOut
from warehouse.services.admin.backup_service import BackupSessions

from fakes import FakeStore, FakeGateway, FakeKeyValueStore


@pytest.fixture
def merchant():
    return Actor(id="merchant-1", email="m1@example.com", role=UserRole.merchant)


@pytest.fixture
def other_merchant():
    return Actor(id="merchant-2", email="m2@example.com", role=UserRole.merchant)


@pytest.fixture
def admin():
    return Actor(id="admin-1", email="admin@example.com", role=UserRole.admin)


@pytest.fixture
def make_batch():
    def _make(**overrides):
        values = {
            "id": "inv-1",
            "product_id": "prd-1",
            "merchant_id": "merchant-1",
            "quantity": 10,
            "location": "Rack A",
            "min_stock_level": 0,
            "max_stock_level": 0,
        }
        values.update(overrides)
        return BatchOut(**values)

    return _make


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def linked_gateway(store):
    return FakeGateway(remote=store.batches.items)


@pytest.fixture
def kv():
    return FakeKeyValueStore()


@pytest.fixture
def sessions():
    return BackupSessions()
