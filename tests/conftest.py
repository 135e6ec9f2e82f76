"""Shared test fixtures for the notification test suite."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

from data.entities import EntitySnapshot, InventoryItem, InventoryProfileSlot, Order, ProductPackage, Warranty
from data.provider import StaticSnapshotProvider
from notifications.engine import NotificationEngine
from storage.local_store import ArchiveBackup, LocalReadStateStore, LocalStore, SettingsStore


# ── Database Pool Mock ──


class FakeRecord(dict):
    """Mimics asyncpg.Record: supports both dict-style and attribute access."""
    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(key)


class FakeConnection:
    """Mock asyncpg connection with configurable return values."""

    def __init__(self):
        self.execute_results: list[str] = ["UPDATE 1"]
        self.fetch_results: list[list[dict]] = [[]]
        self.fetchval_result: int | None = 1
        self._execute_calls: list[tuple] = []
        self._executemany_calls: list[tuple] = []
        self._fetch_calls: list[tuple] = []

    async def execute(self, query, *args):
        self._execute_calls.append((query, args))
        return self.execute_results[0] if self.execute_results else "UPDATE 0"

    async def executemany(self, query, records):
        self._executemany_calls.append((query, list(records)))

    async def fetch(self, query, *args):
        self._fetch_calls.append((query, args))
        result = self.fetch_results.pop(0) if self.fetch_results else []
        return [FakeRecord(r) for r in result]

    async def fetchval(self, query, *args):
        return self.fetchval_result

    def transaction(self):
        return FakeTransaction()


class FakeTransaction:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakePool:
    """Mock asyncpg.Pool that yields a FakeConnection."""

    def __init__(self):
        self.conn = FakeConnection()

    def acquire(self):
        return FakePoolContext(self.conn)


class FakePoolContext:
    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, *args):
        pass


@pytest.fixture
def fake_pool():
    """Provide a mock database pool."""
    return FakePool()


@pytest.fixture
def fake_conn(fake_pool):
    """Direct access to the underlying FakeConnection."""
    return fake_pool.conn


# ── Clock ──


NOW = datetime(2026, 3, 10, 14, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed evaluation time (mid-afternoon, so same-day offsets stay on the same date)."""
    return NOW


# ── Entities ──


def make_order(order_id="O1", *, status="PROCESSING", payment="PAID",
               created=None, expiry=None, package_id="P1", code=None):
    return Order(
        id=order_id,
        code=code or f"ORD-{order_id}",
        status=status,
        payment_status=payment,
        created_at=created or NOW - timedelta(minutes=10),
        expiry_date=expiry or NOW + timedelta(days=90),
        package_id=package_id,
    )


def make_inventory(item_id="I1", *, flagged=0, total=5, account_based=True):
    profiles = tuple(
        InventoryProfileSlot(id=f"slot-{i + 1}", label=f"Profile {i + 1}", needs_update=i < flagged)
        for i in range(total)
    )
    return InventoryItem(id=item_id, code=f"INV-{item_id}", is_account_based=account_based, profiles=profiles)


def make_warranty(warranty_id="W1", *, status="PENDING", created=None):
    return Warranty(
        id=warranty_id,
        code=f"BH-{warranty_id}",
        status=status,
        created_at=created or NOW - timedelta(hours=1),
        order_id="O1",
    )


@pytest.fixture
def snapshot():
    """A snapshot that triggers one notification in every category."""
    return EntitySnapshot(
        orders=[
            make_order("O1", status="COMPLETED", expiry=NOW + timedelta(days=2)),
            make_order("O2", payment="UNPAID", created=NOW - timedelta(days=5)),
            make_order("O3", created=NOW - timedelta(minutes=10)),
        ],
        packages=[ProductPackage(id="P1", name="Netflix Premium")],
        inventory=[make_inventory("I1", flagged=2)],
        warranties=[make_warranty("W1")],
    )


@pytest.fixture
def provider(snapshot):
    return StaticSnapshotProvider(snapshot)


# ── Storage ──


@pytest.fixture
def local_store(tmp_path):
    return LocalStore(tmp_path / "notifications.json")


@pytest.fixture
def read_state(local_store):
    return LocalReadStateStore(local_store)


@pytest.fixture
def mock_remote():
    """Mock RemoteMirror with all methods as AsyncMock."""
    remote = MagicMock()
    remote.get_existing_pairs = AsyncMock(return_value=set())
    remote.insert = AsyncMock(side_effect=lambda notifs, employee_id: len(notifs))
    remote.load_all = AsyncMock(return_value=[])
    remote.mark_read = AsyncMock(return_value=None)
    return remote


@pytest.fixture
def engine(provider, read_state, local_store, mock_remote):
    return NotificationEngine(
        provider=provider,
        read_state=read_state,
        remote=mock_remote,
        employee_id="E1",
        settings_store=SettingsStore(local_store),
        archive_backup=ArchiveBackup(local_store),
        clock=lambda: NOW,
    )
