"""Pydantic schemas for API request/response validation."""

from .buyer import (
    ProfileListResponseSchema,
    ProfileResponseSchema,
    ProfileSummarySchema,
    SettlementResponseSchema,
    TransactionSchema,
)
from .credit import (
    ApproveCreditSchema,
    ChallengeResponseSchema,
    CreditRecordedSchema,
    CreditRequestSchema,
)
from .error import ErrorResponseSchema

__all__ = [
    "ProfileListResponseSchema",
    "ProfileResponseSchema",
    "ProfileSummarySchema",
    "SettlementResponseSchema",
    "TransactionSchema",
    "ApproveCreditSchema",
    "ChallengeResponseSchema",
    "CreditRecordedSchema",
    "CreditRequestSchema",
    "ErrorResponseSchema",
]
