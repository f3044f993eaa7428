"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["BUYER_NOT_FOUND"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Buyer not found: ABCDE1234F"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )
    attempts_remaining: int | None = Field(
        None,
        description="Approval attempts left, for rejected approval codes",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "APPROVAL_REJECTED",
                    "message": "Approval code did not match; 2 attempt(s) remaining",
                    "request_id": "abc123",
                    "attempts_remaining": 2,
                }
            ]
        }
    }
