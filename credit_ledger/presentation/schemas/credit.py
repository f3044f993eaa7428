"""Credit-related Pydantic schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .buyer import ProfileSummarySchema, TransactionSchema


class CreditRequestSchema(BaseModel):
    """Schema for POST /v1/credits request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "buyer_id": "ABCDE1234F",
                    "seller": "Sharma Kirana Store",
                    "amount": 500,
                }
            ]
        }
    )
    buyer_id: str = Field(
        ...,
        max_length=64,
        description="Buyer tax ID; normalized to uppercase",
        examples=["ABCDE1234F"],
    )
    seller: str = Field(
        ...,
        max_length=255,
        description="Name of the seller extending the credit",
        examples=["Sharma Kirana Store"],
    )
    amount: Decimal = Field(
        ...,
        description="Credit amount in rupees; must be positive",
        examples=[500],
    )


class ChallengeResponseSchema(BaseModel):
    """Schema for POST /v1/credits response body."""

    challenge_id: str = Field(
        ...,
        description="UUID of the pending approval challenge",
    )
    buyer_id: str = Field(
        ...,
        description="Normalized buyer identifier",
    )
    seller: str = Field(
        ...,
        description="Seller extending the credit",
    )
    amount: float = Field(
        ...,
        gt=0,
        description="Credit amount awaiting approval",
    )
    expires_at: str = Field(
        ...,
        description="ISO 8601 instant after which the code is no longer accepted",
    )
    attempts_allowed: int = Field(
        ...,
        ge=1,
        description="Number of verification attempts allowed",
    )
    code: Optional[str] = Field(
        None,
        description="The one-time code, when simulated local approval is enabled",
        examples=["482913"],
    )


class ApproveCreditSchema(BaseModel):
    """Schema for POST /v1/credits/{challenge_id}/approve request body."""

    code: str = Field(
        ...,
        max_length=32,
        description="One-time code supplied by the buyer",
        examples=["482913"],
    )


class CreditRecordedSchema(BaseModel):
    """Schema for a committed credit."""

    transaction: TransactionSchema = Field(
        ...,
        description="The transaction added to the buyer's ledger",
    )
    profile: ProfileSummarySchema = Field(
        ...,
        description="Buyer profile after the credit",
    )
    new_profile: bool = Field(
        ...,
        description="Whether this credit created the buyer's profile",
    )
