"""Registry of signed-in sessions and their sync controllers."""

import logging
from dataclasses import dataclass, field

from body_monitor.services.identity import StaticSession
from body_monitor.services.notifications import NotificationInbox
from body_monitor.services.sync import RecordStore, SyncController

_logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000


@dataclass
class SessionHandle:
    """A signed-in account with its controller and pending notices."""

    session: StaticSession
    controller: SyncController
    inbox: NotificationInbox


@dataclass
class SessionRegistry:
    """Creates one sync controller per signed-in account.

    At most ``max_sessions`` accounts stay signed in; the least recently signed
    in one is signed out to make room.
    """

    store: RecordStore
    window: int
    max_sessions: int = DEFAULT_MAX_SESSIONS
    _handles: dict[str, SessionHandle] = field(default_factory=dict, init=False)

    async def login(self, account_id: str) -> SessionHandle:
        """Sign an account in and load its record.

        Signing in again replaces the previous controller so the record is
        re-created fresh.
        """
        session = StaticSession()
        session.login(account_id)
        inbox = NotificationInbox()
        controller = SyncController(
            session=session,
            store=self.store,
            notifier=inbox,
            window=self.window,
        )
        handle = SessionHandle(session=session, controller=controller, inbox=inbox)
        self._handles.pop(session.account_id, None)
        self._evict_oldest()
        self._handles[session.account_id] = handle
        state = await controller.start()
        _logger.info("Session started: account=%s state=%s", account_id, state)
        return handle

    def get(self, account_id: str) -> SessionHandle | None:
        """Return the handle for a signed-in account, if present."""
        return self._handles.get(account_id)

    def logout(self, account_id: str) -> bool:
        """Sign an account out; return False when it was not signed in."""
        handle = self._handles.pop(account_id, None)
        if handle is None:
            return False
        handle.session.logout()
        return True

    def _evict_oldest(self) -> None:
        while self._handles and len(self._handles) >= self.max_sessions:
            account_id = next(iter(self._handles))
            self.logout(account_id)
            _logger.info("Evicted oldest session: account=%s", account_id)
