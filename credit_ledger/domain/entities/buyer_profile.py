"""Buyer profile aggregate holding a buyer's credit history."""

import copy
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from credit_ledger.domain.exceptions import InvalidInputException

from .transaction import Transaction

MIN_SCORE = 20
MAX_SCORE = 100


def normalize_buyer_id(buyer_id: object) -> str:
    """
    Normalize a buyer identifier (tax ID) to its canonical form.

    Raises:
        InvalidInputException: If the identifier is missing or blank
    """
    if not isinstance(buyer_id, str) or not buyer_id.strip():
        raise InvalidInputException("buyer_id is required")
    return buyer_id.strip().upper()


@dataclass
class BuyerProfile:
    """
    All credit extended to one buyer, with their reward points and score.

    Transactions keep insertion order. Only the paid flag of an existing
    transaction ever changes; transactions are never removed.
    """

    id: str
    transactions: List[Transaction] = field(default_factory=list)
    reward_points: int = 0
    score: int = MAX_SCORE

    def __post_init__(self) -> None:
        self.id = normalize_buyer_id(self.id)

        if isinstance(self.reward_points, bool) or not isinstance(self.reward_points, int):
            raise InvalidInputException("reward_points must be an integer")
        if self.reward_points < 0:
            raise InvalidInputException("reward_points cannot be negative")

        if isinstance(self.score, bool) or not isinstance(self.score, int):
            raise InvalidInputException("score must be an integer")
        if not MIN_SCORE <= self.score <= MAX_SCORE:
            raise InvalidInputException(
                f"score must be between {MIN_SCORE} and {MAX_SCORE}"
            )

        ids = [txn.id for txn in self.transactions]
        if len(ids) != len(set(ids)):
            raise InvalidInputException(f"duplicate transaction id in profile {self.id}")

    @property
    def outstanding(self) -> Decimal:
        """Sum of unpaid transaction amounts."""
        return sum(
            (txn.amount for txn in self.transactions if not txn.paid),
            Decimal("0"),
        )

    @property
    def unpaid_count(self) -> int:
        return sum(1 for txn in self.transactions if not txn.paid)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Return the transaction with the given id, or None."""
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def add_transaction(self, transaction: Transaction) -> None:
        """Append a transaction, keeping ids unique within the profile."""
        if self.find_transaction(transaction.id) is not None:
            raise InvalidInputException(
                f"transaction {transaction.id} already exists for buyer {self.id}"
            )
        self.transactions.append(transaction)

    def add_reward_points(self, points: int) -> None:
        if points < 0:
            raise InvalidInputException("reward points cannot be withdrawn")
        self.reward_points += points

    def clone(self) -> "BuyerProfile":
        """Deep copy, used to stage a mutation before it is persisted."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        """Convert to the stored document representation."""
        return {
            "id": self.id,
            "transactions": [txn.to_dict() for txn in self.transactions],
            "rewardPoints": self.reward_points,
            "score": self.score,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BuyerProfile":
        """Rebuild a profile from its stored representation."""
        return cls(
            id=data["id"],
            transactions=[Transaction.from_dict(t) for t in data.get("transactions", [])],
            reward_points=data.get("rewardPoints", 0),
            score=data.get("score", MAX_SCORE),
        )
