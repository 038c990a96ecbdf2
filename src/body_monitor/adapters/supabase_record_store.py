"""Supabase-backed body record store."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from supabase import Client

from body_monitor.domain.errors import (
    RecordExistsError,
    RecordNotFoundError,
    RemoteStoreError,
)
from body_monitor.domain.models import MEASUREMENT_WINDOW, BodyRecord, append_to_window
from body_monitor.services.sync import RecordStore

_COLUMNS = "account_id, age, height, weights"
_UNIQUE_VIOLATION = "23505"

_T = TypeVar("_T")


@dataclass
class SupabaseRecordStore(RecordStore):
    """Supabase implementation of the record store.

    The Supabase client is blocking, so every call runs in a worker thread.
    """

    client: Client
    table: str = "body_records"
    window: int = MEASUREMENT_WINDOW

    async def record_exists(self, account_id: str) -> bool:
        """Return True when a row exists for the account."""
        row = await self._run("record_exists", self._select_row, account_id)
        return row is not None

    async def fetch_record(self, account_id: str) -> BodyRecord:
        """Return the stored record for the account."""
        row = await self._run("fetch_record", self._select_row, account_id)
        if row is None:
            raise RecordNotFoundError("fetch_record", f"No record for {account_id}")
        try:
            return BodyRecord.from_payload(row)
        except (TypeError, ValueError) as exc:
            raise RemoteStoreError("fetch_record", "Malformed body record") from exc

    async def register_record(
        self, account_id: str, age: int, height: int, weight: float
    ) -> None:
        """Insert a new row seeded with one weight sample."""
        payload = {
            "account_id": account_id,
            "age": age,
            "height": height,
            "weights": [weight],
        }
        await self._run("register_record", self._insert_row, payload)

    async def append_weight(self, account_id: str, weight: float) -> None:
        """Append a sample to the stored window."""
        await self._run("append_weight", self._append_row, account_id, weight)

    async def _run(
        self, operation: str, func: Callable[..., _T], *args: object
    ) -> _T:
        try:
            return await asyncio.to_thread(func, *args)
        except RemoteStoreError:
            raise
        except Exception as exc:
            if _error_code(exc) == _UNIQUE_VIOLATION:
                raise RecordExistsError(operation, "Record already exists") from exc
            raise RemoteStoreError(operation) from exc

    def _select_row(self, account_id: str) -> dict[str, object] | None:
        response = (
            self.client.table(self.table)
            .select(_COLUMNS)
            .eq("account_id", account_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return response.data[0]
        return None

    def _insert_row(self, payload: dict[str, object]) -> None:
        response = self.client.table(self.table).insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create body record in Supabase")

    def _append_row(self, account_id: str, weight: float) -> None:
        row = self._select_row(account_id)
        if row is None:
            raise RecordNotFoundError("append_weight", f"No record for {account_id}")
        weights = [float(value) for value in row.get("weights") or []]
        append_to_window(weights, weight, self.window)
        self.client.table(self.table).update({"weights": weights}).eq(
            "account_id", account_id
        ).execute()


def _error_code(exc: Exception) -> str | None:
    """Extract a Postgres error code from a PostgREST exception, if present."""
    code = getattr(exc, "code", None)
    return str(code) if code is not None else None
