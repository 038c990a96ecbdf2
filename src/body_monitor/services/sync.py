"""Session state machine keeping a body record in sync with the remote store."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Protocol

from body_monitor.domain.errors import InvalidInputError
from body_monitor.domain.intents import (
    AppendWeightIntent,
    RegisterIntent,
    parse_register_form,
    parse_weight_form,
)
from body_monitor.domain.models import MEASUREMENT_WINDOW, BodyRecord, SeriesPoint
from body_monitor.services.identity import AccountSession
from body_monitor.services.notifications import (
    REMOTE_FAILURE_MESSAGE,
    FailureNotice,
    NoticeKind,
    Notifier,
)
from body_monitor.services.series import derive_series, should_plot

_logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Async interface to the authoritative record store."""

    async def record_exists(self, account_id: str) -> bool:
        """Return True when the account has a record."""

    async def fetch_record(self, account_id: str) -> BodyRecord:
        """Return the account's current record."""

    async def register_record(
        self, account_id: str, age: int, height: int, weight: float
    ) -> None:
        """Create a record seeded with a single weight sample."""

    async def append_weight(self, account_id: str, weight: float) -> None:
        """Append one weight sample to the account's record."""


class SyncState(StrEnum):
    """Lifecycle of a signed-in session."""

    UNAUTHENTICATED = "unauthenticated"
    CHECKING = "checking"
    UNREGISTERED = "unregistered"
    REGISTERED = "registered"


class Outcome(StrEnum):
    """Result of handling a user intent."""

    APPLIED = "applied"
    FAILED = "failed"
    BUSY = "busy"
    REJECTED = "rejected"


@dataclass(frozen=True)
class SyncView:
    """Snapshot handed to the presentation layer."""

    state: SyncState
    account_id: str | None
    record: BodyRecord
    series: list[SeriesPoint]
    current_weight: float | None
    show_chart: bool


@dataclass
class _OptimisticAppend:
    """Local window append that can be undone if the store rejects it."""

    record: BodyRecord
    weight: float
    window: int
    _snapshot: list[float] | None = None

    def apply(self) -> None:
        self._snapshot = list(self.record.weights)
        self.record.add_weight(self.weight, self.window)

    def commit(self) -> None:
        self._snapshot = None

    def compensate(self) -> None:
        if self._snapshot is not None:
            self.record.weights[:] = self._snapshot
            self._snapshot = None


@dataclass
class SyncController:
    """Owns the local record and reconciles it with the record store."""

    session: AccountSession
    store: RecordStore
    notifier: Notifier
    window: int = MEASUREMENT_WINDOW
    record: BodyRecord = field(default_factory=BodyRecord.empty)
    state: SyncState = SyncState.UNAUTHENTICATED
    _checking: bool = field(default=False, init=False, repr=False)
    _registering: bool = field(default=False, init=False, repr=False)
    _appending: bool = field(default=False, init=False, repr=False)

    @property
    def series(self) -> list[SeriesPoint]:
        return derive_series(self.record.weights)

    async def start(self) -> SyncState:
        """Read the session signal once and load the remote record if any."""
        self.record = BodyRecord.empty()
        if not self.session.is_authenticated():
            self.state = SyncState.UNAUTHENTICATED
            return self.state
        self.state = SyncState.CHECKING
        await self._check()
        return self.state

    async def refresh(self) -> SyncState:
        """Retry the existence check after a failed load.

        Does nothing while a check or the post-registration load is in flight.
        """
        if self._checking or self._registering:
            return self.state
        if self.state is SyncState.CHECKING:
            await self._check()
        return self.state

    async def submit_registration(self, form: Mapping[str, object]) -> Outcome:
        """Validate raw registration fields, then register."""
        try:
            intent = parse_register_form(form)
        except InvalidInputError as exc:
            self._report_invalid_input(exc)
            return Outcome.REJECTED
        return await self.register(intent)

    async def submit_weight(self, form: Mapping[str, object]) -> Outcome:
        """Validate a raw weight field, then append it."""
        try:
            intent = parse_weight_form(form)
        except InvalidInputError as exc:
            self._report_invalid_input(exc)
            return Outcome.REJECTED
        return await self.append_weight(intent)

    async def register(self, intent: RegisterIntent) -> Outcome:
        """Create the remote record and load its canonical form."""
        if self.state is not SyncState.UNREGISTERED:
            _logger.info("Ignoring registration in state %s", self.state)
            return Outcome.REJECTED
        if self._registering:
            return Outcome.BUSY
        account_id = self._account_id()
        self._registering = True
        try:
            return await self._register(account_id, intent)
        finally:
            self._registering = False

    async def _register(self, account_id: str, intent: RegisterIntent) -> Outcome:
        try:
            await self.store.register_record(
                account_id,
                age=intent.age,
                height=intent.height,
                weight=intent.weight,
            )
        except Exception as exc:
            self._report_remote_failure("register", account_id, exc)
            return Outcome.FAILED
        # The record exists remotely from here on; a failed load is retried
        # through refresh().
        self.state = SyncState.CHECKING
        if not await self._load(account_id):
            return Outcome.FAILED
        return Outcome.APPLIED

    async def append_weight(self, intent: AppendWeightIntent) -> Outcome:
        """Apply a weight sample locally, then write it to the store."""
        if self.state is not SyncState.REGISTERED:
            _logger.info("Ignoring weight update in state %s", self.state)
            return Outcome.REJECTED
        if self._appending:
            return Outcome.BUSY
        account_id = self._account_id()
        self._appending = True
        change = _OptimisticAppend(self.record, intent.weight, self.window)
        change.apply()
        try:
            await self.store.append_weight(account_id, intent.weight)
        except Exception as exc:
            change.compensate()
            self._report_remote_failure("append_weight", account_id, exc)
            return Outcome.FAILED
        finally:
            self._appending = False
        change.commit()
        return Outcome.APPLIED

    def view(self) -> SyncView:
        """Return a copy of the current state for rendering."""
        series = self.series
        return SyncView(
            state=self.state,
            account_id=self.session.account_id,
            record=replace(self.record, weights=list(self.record.weights)),
            series=series,
            current_weight=self.record.current_weight,
            show_chart=should_plot(series),
        )

    async def _check(self) -> None:
        account_id = self._account_id()
        self._checking = True
        try:
            await self._check_and_load(account_id)
        finally:
            self._checking = False

    async def _check_and_load(self, account_id: str) -> None:
        try:
            exists = await self.store.record_exists(account_id)
        except Exception as exc:
            self._report_remote_failure("record_exists", account_id, exc)
            return
        if not exists:
            self.record = BodyRecord.empty()
            self.state = SyncState.UNREGISTERED
            return
        await self._load(account_id)

    async def _load(self, account_id: str) -> bool:
        try:
            record = await self.store.fetch_record(account_id)
        except Exception as exc:
            self._report_remote_failure("fetch_record", account_id, exc)
            return False
        self.record = record
        self.state = SyncState.REGISTERED
        return True

    def _account_id(self) -> str:
        account_id = self.session.account_id
        if not account_id:
            raise RuntimeError("Session has no signed-in account")
        return account_id

    def _report_remote_failure(
        self, operation: str, account_id: str, exc: Exception
    ) -> None:
        _logger.exception(
            "Record store %s failed", operation, extra={"account_id": account_id}
        )
        self.notifier.notify(
            FailureNotice(
                kind=NoticeKind.REMOTE_FAILURE,
                message=REMOTE_FAILURE_MESSAGE,
                cause=exc,
            )
        )

    def _report_invalid_input(self, exc: InvalidInputError) -> None:
        _logger.info("Rejected form input: %s", exc)
        self.notifier.notify(
            FailureNotice(kind=NoticeKind.INVALID_INPUT, message=str(exc), cause=exc)
        )
