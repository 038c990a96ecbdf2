"""Error types raised across the body monitor."""


class BodyMonitorError(Exception):
    """Base class for body monitor errors."""


class RemoteStoreError(BodyMonitorError):
    """Raised when a remote record store operation fails."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        self.operation = operation
        super().__init__(message or f"Record store {operation} failed")


class RecordNotFoundError(RemoteStoreError):
    """Raised when no record exists for the account."""


class RecordExistsError(RemoteStoreError):
    """Raised when registering an account that already has a record."""


class InvalidInputError(BodyMonitorError):
    """Raised when form input fails local validation."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors) or "Invalid input")
