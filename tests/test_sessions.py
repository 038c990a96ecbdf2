"""Tests for the session registry."""

import asyncio

from body_monitor.domain.models import BodyRecord
from body_monitor.services.sessions import SessionRegistry
from body_monitor.services.sync import SyncState
from tests.conftest import InMemoryRecordStore


def test_login_starts_controller() -> None:
    store = InMemoryRecordStore(
        records={"alice.testnet": BodyRecord(age=25, height=180, weights=[80.4])}
    )
    registry = SessionRegistry(store=store, window=10)

    handle = asyncio.run(registry.login("alice.testnet"))

    assert handle.controller.state is SyncState.REGISTERED
    assert registry.get("alice.testnet") is handle


def test_login_again_recreates_record() -> None:
    store = InMemoryRecordStore()
    registry = SessionRegistry(store=store, window=10)

    first = asyncio.run(registry.login("alice.testnet"))
    second = asyncio.run(registry.login("alice.testnet"))

    assert first is not second
    assert registry.get("alice.testnet") is second


def test_logout_clears_session() -> None:
    registry = SessionRegistry(store=InMemoryRecordStore(), window=10)
    handle = asyncio.run(registry.login("alice.testnet"))

    assert registry.logout("alice.testnet") is True
    assert registry.logout("alice.testnet") is False
    assert registry.get("alice.testnet") is None
    assert not handle.session.is_authenticated()


def test_login_beyond_capacity_signs_out_oldest() -> None:
    registry = SessionRegistry(store=InMemoryRecordStore(), window=10, max_sessions=2)
    asyncio.run(registry.login("alice.testnet"))
    asyncio.run(registry.login("bob.testnet"))

    asyncio.run(registry.login("alice.testnet"))
    asyncio.run(registry.login("carol.testnet"))

    assert registry.get("bob.testnet") is None
    assert registry.get("alice.testnet") is not None
    assert registry.get("carol.testnet") is not None
