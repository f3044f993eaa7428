"""Buyer profile Pydantic schemas."""

from pydantic import BaseModel, Field

from credit_ledger.application.dto import (
    ProfileResponse,
    ProfileSummary,
    TransactionDTO,
)


class TransactionSchema(BaseModel):
    """Schema for a transaction in profile responses."""

    transaction_id: str = Field(
        ...,
        description="Time-based transaction id, unique within the buyer",
        examples=["1763275800000"],
    )
    seller: str = Field(
        ...,
        description="Seller who extended the credit",
    )
    amount: float = Field(
        ...,
        gt=0,
        description="Credit amount in rupees",
        examples=[500.0],
    )
    date: str = Field(
        ...,
        description="ISO 8601 timestamp of the credit",
        examples=["2025-11-16T06:50:00+00:00"],
    )
    paid: bool = Field(
        ...,
        description="Whether the credit has been settled",
    )

    @classmethod
    def from_dto(cls, dto: TransactionDTO) -> "TransactionSchema":
        return cls(
            transaction_id=dto.transaction_id,
            seller=dto.seller,
            amount=float(dto.amount),
            date=dto.date,
            paid=dto.paid,
        )


class ProfileSummarySchema(BaseModel):
    """Schema for a buyer profile summary."""

    buyer_id: str = Field(
        ...,
        description="Buyer identifier",
    )
    reward_points: int = Field(
        ...,
        ge=0,
        description="Points earned for settling within the financial year",
    )
    score: int = Field(
        ...,
        ge=0,
        le=100,
        description="Creditworthiness score (20-100, higher is better)",
        examples=[98],
    )
    outstanding: float = Field(
        ...,
        ge=0,
        description="Sum of unpaid credit",
        examples=[2000.0],
    )
    transaction_count: int = Field(
        ...,
        ge=0,
        description="Number of credits recorded",
    )
    unpaid_count: int = Field(
        ...,
        ge=0,
        description="Number of credits not yet settled",
    )

    @classmethod
    def from_dto(cls, dto: ProfileSummary) -> "ProfileSummarySchema":
        return cls(
            buyer_id=dto.buyer_id,
            reward_points=dto.reward_points,
            score=dto.score,
            outstanding=float(dto.outstanding),
            transaction_count=dto.transaction_count,
            unpaid_count=dto.unpaid_count,
        )


class ProfileResponseSchema(BaseModel):
    """Schema for GET /v1/buyers/{buyer_id} response."""

    buyer_id: str = Field(
        ...,
        description="Buyer identifier",
    )
    reward_points: int = Field(
        ...,
        ge=0,
        description="Points earned for settling within the financial year",
    )
    score: int = Field(
        ...,
        ge=0,
        le=100,
        description="Creditworthiness score (20-100, higher is better)",
    )
    outstanding: float = Field(
        ...,
        ge=0,
        description="Sum of unpaid credit",
    )
    transactions: list[TransactionSchema] = Field(
        ...,
        description="Credits in the order they were recorded",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "buyer_id": "ABCDE1234F",
                    "reward_points": 10,
                    "score": 98,
                    "outstanding": 2000.0,
                    "transactions": [
                        {
                            "transaction_id": "1763275800000",
                            "seller": "Sharma Kirana Store",
                            "amount": 500.0,
                            "date": "2025-11-16T06:50:00+00:00",
                            "paid": True,
                        },
                        {
                            "transaction_id": "1764576000000",
                            "seller": "Sharma Kirana Store",
                            "amount": 2000.0,
                            "date": "2025-12-01T08:00:00+00:00",
                            "paid": False,
                        },
                    ],
                }
            ]
        }
    }

    @classmethod
    def from_dto(cls, dto: ProfileResponse) -> "ProfileResponseSchema":
        return cls(
            buyer_id=dto.buyer_id,
            reward_points=dto.reward_points,
            score=dto.score,
            outstanding=float(dto.outstanding),
            transactions=[TransactionSchema.from_dto(t) for t in dto.transactions],
        )


class ProfileListResponseSchema(BaseModel):
    """Schema for GET /v1/buyers response."""

    buyers: list[ProfileSummarySchema] = Field(
        ...,
        description="Every buyer profile, in creation order",
    )


class SettlementResponseSchema(BaseModel):
    """Schema for the settle endpoint response."""

    transaction_id: str = Field(
        ...,
        description="The settled transaction",
    )
    points_awarded: int = Field(
        ...,
        ge=0,
        description="Reward points earned by this settlement",
        examples=[10],
    )
    profile: ProfileResponseSchema = Field(
        ...,
        description="Buyer profile after settlement",
    )
