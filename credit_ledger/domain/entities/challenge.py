"""Challenge entity for the one-time-code approval handshake."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

from .transaction import utc_now


@dataclass
class Challenge:
    """
    A one-time code issued for a proposed credit, awaiting buyer approval.

    Holds the pending transaction parameters; nothing reaches the ledger
    until the code is verified.
    """

    buyer_id: str
    seller: str
    amount: Decimal
    code: str
    expires_at: datetime
    max_attempts: int
    id: UUID = field(default_factory=uuid4)
    attempts: int = 0
    created_at: datetime = field(default_factory=utc_now)

    @property
    def attempts_remaining(self) -> int:
        return max(self.max_attempts - self.attempts, 0)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    @property
    def ttl(self) -> timedelta:
        return self.expires_at - self.created_at

    def record_attempt(self) -> None:
        self.attempts += 1
