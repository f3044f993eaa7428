"""Transaction entity representing one credit extended to a buyer."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from credit_ledger.domain.exceptions import InvalidInputException


def utc_now() -> datetime:
    """Current instant as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def normalize_amount(value: Any) -> Decimal:
    """
    Coerce a credit amount to a positive Decimal, keeping its exact value.

    Raises:
        InvalidInputException: If the value is not a positive finite number
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInputException("amount must be a positive number")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidInputException(f"amount is not a number: {value!r}")

    if not amount.is_finite():
        raise InvalidInputException("amount must be finite")
    if amount <= 0:
        raise InvalidInputException("amount must be positive")

    return amount


def generate_transaction_id(existing_ids: Iterable[str], now: datetime) -> str:
    """
    Build a time-based transaction id that is unique within a profile.

    The id is the epoch timestamp in milliseconds; a clash with an id
    already in the profile moves forward to the next free millisecond.
    """
    taken = set(existing_ids)
    candidate = int(now.timestamp() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


@dataclass
class Transaction:
    """
    A single credit event recorded against a buyer.

    Attributes:
        id: Time-based identifier, unique within the owning profile
        seller: Name of the seller who extended the credit
        amount: Credit amount, positive, exactly as entered
        date: UTC timestamp when the credit was extended
        paid: Whether the credit has been settled
        date_text: Date exactly as read from storage, written back unchanged
    """

    id: str
    seller: str
    amount: Decimal
    date: datetime = field(default_factory=utc_now)
    paid: bool = False
    date_text: Optional[str] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.id or not str(self.id).strip():
            raise InvalidInputException("transaction id is required")
        self.id = str(self.id).strip()

        if not isinstance(self.seller, str) or not self.seller.strip():
            raise InvalidInputException("seller is required")
        self.seller = self.seller.strip()

        self.amount = normalize_amount(self.amount)

        if self.date.tzinfo is None:
            self.date = self.date.replace(tzinfo=timezone.utc)

    def mark_paid(self) -> None:
        """Flip the paid flag. Callers guard against double settlement."""
        self.paid = True

    def to_dict(self) -> dict:
        """Convert to the stored document representation."""
        amount = self.amount
        return {
            "id": self.id,
            "seller": self.seller,
            "amount": int(amount) if amount == amount.to_integral_value() else float(amount),
            "date": self.date_text or self.date.isoformat(),
            "paid": self.paid,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Rebuild a transaction from its stored representation."""
        date_text = data["date"]
        return cls(
            id=data["id"],
            seller=data["seller"],
            amount=data["amount"],
            date=datetime.fromisoformat(date_text.replace("Z", "+00:00")),
            paid=bool(data.get("paid", False)),
            date_text=date_text,
        )
