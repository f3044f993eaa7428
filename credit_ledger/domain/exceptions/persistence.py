"""Persistence-related domain exceptions."""

from .base import DomainException


class PersistenceUnavailableException(DomainException):
    """Raised when the ledger document cannot be written to storage."""

    def __init__(self, operation: str, message: str | None = None):
        super().__init__(
            message=message or f"Ledger storage unavailable during {operation}",
            code="PERSISTENCE_UNAVAILABLE",
        )
        self.operation = operation
