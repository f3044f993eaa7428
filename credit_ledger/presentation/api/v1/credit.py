"""Credit API endpoints: the two-phase approval flow."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response

from credit_ledger.application.dto import CreditRequest
from credit_ledger.application.services import TransactionRecorder
from credit_ledger.core.dependencies import get_transaction_recorder
from credit_ledger.core.metrics import track_operation_latency
from credit_ledger.presentation.schemas import (
    ApproveCreditSchema,
    ChallengeResponseSchema,
    CreditRecordedSchema,
    CreditRequestSchema,
    ErrorResponseSchema,
    ProfileSummarySchema,
    TransactionSchema,
)

credit_router = APIRouter(
    prefix="/credits",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        503: {"model": ErrorResponseSchema, "description": "Ledger storage unavailable"},
    },
)

ChallengeId = Annotated[UUID, Path(description="UUID of the approval challenge")]


@credit_router.post(
    "",
    response_model=ChallengeResponseSchema,
    status_code=201,
    summary="Propose Credit",
    description="""
    Propose a credit to a buyer and issue a one-time approval code.

    Nothing is written to the ledger until the buyer approves.
    """,
)
async def propose_credit(
    request: CreditRequestSchema,
    recorder: Annotated[TransactionRecorder, Depends(get_transaction_recorder)],
) -> ChallengeResponseSchema:
    dto = CreditRequest(
        buyer_id=request.buyer_id,
        seller=request.seller,
        amount=request.amount,
    )

    with track_operation_latency("begin_credit"):
        response = await recorder.begin_credit(dto)

    return ChallengeResponseSchema(
        challenge_id=response.challenge_id,
        buyer_id=response.buyer_id,
        seller=response.seller,
        amount=float(response.amount),
        expires_at=response.expires_at,
        attempts_allowed=response.attempts_allowed,
        code=response.code,
    )


@credit_router.post(
    "/{challenge_id}/approve",
    response_model=CreditRecordedSchema,
    status_code=201,
    summary="Approve Credit",
    description="""
    Submit the buyer's one-time code and commit the credit.

    A wrong code is rejected and leaves the ledger untouched; the
    challenge stays open until it expires or its attempts run out.
    """,
    responses={
        403: {"model": ErrorResponseSchema, "description": "Approval rejected"},
        404: {"model": ErrorResponseSchema, "description": "Challenge not found"},
    },
)
async def approve_credit(
    challenge_id: ChallengeId,
    body: ApproveCreditSchema,
    recorder: Annotated[TransactionRecorder, Depends(get_transaction_recorder)],
) -> CreditRecordedSchema:
    with track_operation_latency("confirm_credit"):
        response = await recorder.confirm_credit(challenge_id, body.code)

    return CreditRecordedSchema(
        transaction=TransactionSchema.from_dto(response.transaction),
        profile=ProfileSummarySchema.from_dto(response.profile),
        new_profile=response.new_profile,
    )


@credit_router.post(
    "/{challenge_id}/decline",
    status_code=204,
    summary="Decline Credit",
    description="Discard a pending credit the buyer refused.",
    responses={
        403: {"model": ErrorResponseSchema, "description": "Approval code expired"},
        404: {"model": ErrorResponseSchema, "description": "Challenge not found"},
    },
)
async def decline_credit(
    challenge_id: ChallengeId,
    recorder: Annotated[TransactionRecorder, Depends(get_transaction_recorder)],
) -> Response:
    await recorder.decline_credit(challenge_id)
    return Response(status_code=204)
