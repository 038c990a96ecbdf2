"""Account session collaborator."""

from dataclasses import dataclass
from typing import Protocol


class AccountSession(Protocol):
    """Interface for the signed-in account."""

    @property
    def account_id(self) -> str | None:
        """Return the signed-in account id, if any."""

    def is_authenticated(self) -> bool:
        """Return True when an account is signed in."""

    def login(self, account_id: str) -> None:
        """Sign an account in."""

    def logout(self) -> None:
        """Sign the current account out."""


@dataclass
class StaticSession(AccountSession):
    """In-process session holding a single account id."""

    account_id: str | None = None

    def is_authenticated(self) -> bool:
        return bool(self.account_id)

    def login(self, account_id: str) -> None:
        cleaned = account_id.strip()
        if not cleaned:
            raise ValueError("account_id must not be empty")
        self.account_id = cleaned

    def logout(self) -> None:
        self.account_id = None
