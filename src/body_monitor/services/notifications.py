"""User-facing failure notifications."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

REMOTE_FAILURE_MESSAGE = (
    "Something went wrong! "
    "Maybe you need to sign out and back in? "
    "Check the logs for more info."
)


class NoticeKind(StrEnum):
    """Kinds of failures reported to the user."""

    REMOTE_FAILURE = "remote_failure"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class FailureNotice:
    """A single blocking notification for the user."""

    kind: NoticeKind
    message: str
    cause: BaseException | None = None


class Notifier(Protocol):
    """Interface for surfacing failures to the user."""

    def notify(self, notice: FailureNotice) -> None:
        """Show a failure notice."""


@dataclass
class NotificationInbox(Notifier):
    """Collects notices until the presentation layer reads them."""

    pending: list[FailureNotice] = field(default_factory=list)

    def notify(self, notice: FailureNotice) -> None:
        self.pending.append(notice)

    def drain(self) -> list[FailureNotice]:
        """Return and clear pending notices."""
        notices, self.pending = self.pending, []
        return notices
