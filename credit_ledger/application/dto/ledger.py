"""Data transfer objects for ledger operations."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Optional

from credit_ledger.domain.entities import (
    BuyerProfile,
    Challenge,
    Transaction,
    normalize_amount,
)
from credit_ledger.domain.exceptions import InvalidInputException


@dataclass(frozen=True)
class CreditRequest:
    """Input data for recording a credit against a buyer."""

    buyer_id: str
    seller: str
    amount: Any

    def validate(self) -> List[str]:
        errors = []

        if not isinstance(self.buyer_id, str) or not self.buyer_id.strip():
            errors.append("buyer_id is required")

        if not isinstance(self.seller, str) or not self.seller.strip():
            errors.append("seller is required")

        try:
            normalize_amount(self.amount)
        except InvalidInputException as e:
            errors.append(e.message)

        return errors


@dataclass(frozen=True)
class ChallengeResponse:
    """A pending approval challenge as returned to the seller."""

    challenge_id: str
    buyer_id: str
    seller: str
    amount: Decimal
    expires_at: str
    attempts_allowed: int
    code: Optional[str] = None

    @classmethod
    def from_entity(cls, challenge: Challenge, expose_code: bool = False) -> "ChallengeResponse":
        return cls(
            challenge_id=str(challenge.id),
            buyer_id=challenge.buyer_id,
            seller=challenge.seller,
            amount=challenge.amount,
            expires_at=challenge.expires_at.isoformat(),
            attempts_allowed=challenge.max_attempts,
            code=challenge.code if expose_code else None,
        )


@dataclass(frozen=True)
class TransactionDTO:
    """Single transaction within a profile response."""

    transaction_id: str
    seller: str
    amount: Decimal
    date: str
    paid: bool

    @classmethod
    def from_entity(cls, txn: Transaction) -> "TransactionDTO":
        return cls(
            transaction_id=txn.id,
            seller=txn.seller,
            amount=txn.amount,
            date=txn.date.isoformat(),
            paid=txn.paid,
        )


@dataclass(frozen=True)
class ProfileResponse:
    """Response data for a buyer profile with its transactions."""

    buyer_id: str
    reward_points: int
    score: int
    outstanding: Decimal
    transactions: List[TransactionDTO]

    @classmethod
    def from_entity(cls, profile: BuyerProfile) -> "ProfileResponse":
        return cls(
            buyer_id=profile.id,
            reward_points=profile.reward_points,
            score=profile.score,
            outstanding=profile.outstanding,
            transactions=[TransactionDTO.from_entity(t) for t in profile.transactions],
        )


@dataclass(frozen=True)
class ProfileSummary:
    """Brief summary of a profile for listings."""

    buyer_id: str
    reward_points: int
    score: int
    outstanding: Decimal
    transaction_count: int
    unpaid_count: int

    @classmethod
    def from_entity(cls, profile: BuyerProfile) -> "ProfileSummary":
        return cls(
            buyer_id=profile.id,
            reward_points=profile.reward_points,
            score=profile.score,
            outstanding=profile.outstanding,
            transaction_count=len(profile.transactions),
            unpaid_count=profile.unpaid_count,
        )


@dataclass(frozen=True)
class CreditRecordedResponse:
    """Result of committing an approved credit."""

    transaction: TransactionDTO
    profile: ProfileSummary
    new_profile: bool

    @property
    def transaction_id(self) -> str:
        return self.transaction.transaction_id


@dataclass(frozen=True)
class SettlementResponse:
    """Result of settling a transaction."""

    transaction_id: str
    points_awarded: int
    profile: ProfileResponse
