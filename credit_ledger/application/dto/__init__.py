"""Data Transfer Objects for application layer."""

from .ledger import (
    ChallengeResponse,
    CreditRecordedResponse,
    CreditRequest,
    ProfileResponse,
    ProfileSummary,
    SettlementResponse,
    TransactionDTO,
)

__all__ = [
    "ChallengeResponse",
    "CreditRecordedResponse",
    "CreditRequest",
    "ProfileResponse",
    "ProfileSummary",
    "SettlementResponse",
    "TransactionDTO",
]
