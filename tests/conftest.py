"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from body_monitor.config import Settings
from body_monitor.containers import AppContainer
from body_monitor.domain.errors import (
    RecordExistsError,
    RecordNotFoundError,
    RemoteStoreError,
)
from body_monitor.domain.models import MEASUREMENT_WINDOW, BodyRecord, append_to_window
from body_monitor.services.identity import StaticSession
from body_monitor.services.notifications import NotificationInbox
from body_monitor.services.sessions import SessionRegistry
from body_monitor.services.sync import RecordStore, SyncController

# JWT-shaped so the Supabase client accepts it.
FAKE_SERVICE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJl"
)


@dataclass
class InMemoryRecordStore(RecordStore):
    """In-memory record store for tests.

    Operations listed in ``fail_on`` raise ``RemoteStoreError``. When ``gate``
    is set, writes wait on it before completing; ``read_gate`` does the same for
    reads.
    """

    records: dict[str, BodyRecord] = field(default_factory=dict)
    window: int = MEASUREMENT_WINDOW
    fail_on: set[str] = field(default_factory=set)
    gate: asyncio.Event | None = None
    read_gate: asyncio.Event | None = None
    calls: list[tuple[str, tuple[object, ...]]] = field(default_factory=list)

    async def record_exists(self, account_id: str) -> bool:
        self._record_call("record_exists", account_id)
        if self.read_gate is not None:
            await self.read_gate.wait()
        return account_id in self.records

    async def fetch_record(self, account_id: str) -> BodyRecord:
        self._record_call("fetch_record", account_id)
        if self.read_gate is not None:
            await self.read_gate.wait()
        record = self.records.get(account_id)
        if record is None:
            raise RecordNotFoundError("fetch_record")
        return BodyRecord(
            age=record.age, height=record.height, weights=list(record.weights)
        )

    async def register_record(
        self, account_id: str, age: int, height: int, weight: float
    ) -> None:
        self._record_call("register_record", account_id, age, height, weight)
        await self._wait()
        if account_id in self.records:
            raise RecordExistsError("register_record")
        self.records[account_id] = BodyRecord(age=age, height=height, weights=[weight])

    async def append_weight(self, account_id: str, weight: float) -> None:
        self._record_call("append_weight", account_id, weight)
        await self._wait()
        record = self.records.get(account_id)
        if record is None:
            raise RecordNotFoundError("append_weight")
        append_to_window(record.weights, weight, self.window)

    def call_names(self) -> list[str]:
        return [name for name, _args in self.calls]

    def _record_call(self, name: str, *args: object) -> None:
        self.calls.append((name, args))
        if name in self.fail_on:
            raise RemoteStoreError(name, "network unreachable")

    async def _wait(self) -> None:
        if self.gate is not None:
            await self.gate.wait()


def make_controller(
    store: InMemoryRecordStore,
    account_id: str | None = "alice.testnet",
    window: int = MEASUREMENT_WINDOW,
) -> tuple[SyncController, NotificationInbox]:
    """Build a controller wired to the given store and a fresh inbox."""
    inbox = NotificationInbox()
    controller = SyncController(
        session=StaticSession(account_id),
        store=store,
        notifier=inbox,
        window=window,
    )
    return controller, inbox


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=FAKE_SERVICE_KEY,
    )


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def container(settings: Settings, record_store: InMemoryRecordStore) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        record_store=record_store,
        session_registry=SessionRegistry(
            store=record_store, window=settings.measurement_window
        ),
        close_resources=close_resources,
    )
