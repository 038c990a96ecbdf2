"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from body_monitor.adapters.supabase_record_store import SupabaseRecordStore
from body_monitor.config import Settings
from body_monitor.services.sessions import SessionRegistry
from body_monitor.services.sync import RecordStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    record_store: RecordStore
    session_registry: SessionRegistry
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    record_store = SupabaseRecordStore(
        client=supabase_client,
        table=resolved_settings.body_records_table,
        window=resolved_settings.measurement_window,
    )
    session_registry = SessionRegistry(
        store=record_store,
        window=resolved_settings.measurement_window,
        max_sessions=resolved_settings.max_sessions,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        record_store=record_store,
        session_registry=session_registry,
        close_resources=close_resources,
    )
