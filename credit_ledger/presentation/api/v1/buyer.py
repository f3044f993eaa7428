"""Buyer API endpoints: profiles, settlement and admin removal."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response

from credit_ledger.application.services import LedgerQueryService, SettlementEngine
from credit_ledger.core.config import settings
from credit_ledger.core.dependencies import get_ledger_query_service, get_settlement_engine
from credit_ledger.core.metrics import track_operation_latency
from credit_ledger.domain.exceptions import OperationNotPermittedException
from credit_ledger.presentation.schemas import (
    ErrorResponseSchema,
    ProfileListResponseSchema,
    ProfileResponseSchema,
    ProfileSummarySchema,
    SettlementResponseSchema,
)

buyer_router = APIRouter(
    prefix="/buyers",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Buyer or transaction not found"},
    },
)

BuyerId = Annotated[
    str,
    Path(min_length=1, max_length=64, description="Buyer tax ID (case-insensitive)"),
]


@buyer_router.get(
    "",
    response_model=ProfileListResponseSchema,
    summary="List Buyers",
    description="Summaries of every buyer profile in the ledger.",
)
async def list_buyers(
    ledger_service: Annotated[LedgerQueryService, Depends(get_ledger_query_service)],
) -> ProfileListResponseSchema:
    summaries = await ledger_service.list_profiles()

    return ProfileListResponseSchema(
        buyers=[ProfileSummarySchema.from_dto(s) for s in summaries],
    )


@buyer_router.get(
    "/{buyer_id}",
    response_model=ProfileResponseSchema,
    summary="Get Buyer Profile",
    description="""
    Retrieve a buyer's profile by tax ID.

    Returns the outstanding balance, score, reward points and every
    credit in the order it was recorded.
    """,
)
async def get_buyer(
    buyer_id: BuyerId,
    ledger_service: Annotated[LedgerQueryService, Depends(get_ledger_query_service)],
) -> ProfileResponseSchema:
    response = await ledger_service.get_profile(buyer_id)
    return ProfileResponseSchema.from_dto(response)


@buyer_router.post(
    "/{buyer_id}/transactions/{transaction_id}/settle",
    response_model=SettlementResponseSchema,
    summary="Settle Transaction",
    description="""
    Mark a credit as repaid.

    Repaying within the financial year of the credit earns reward
    points. The buyer's score is recomputed from the remaining balance.
    """,
    responses={
        409: {"model": ErrorResponseSchema, "description": "Transaction already settled"},
        503: {"model": ErrorResponseSchema, "description": "Ledger storage unavailable"},
    },
)
async def settle_transaction(
    buyer_id: BuyerId,
    transaction_id: Annotated[str, Path(min_length=1, max_length=64)],
    engine: Annotated[SettlementEngine, Depends(get_settlement_engine)],
) -> SettlementResponseSchema:
    with track_operation_latency("settle"):
        response = await engine.settle(buyer_id, transaction_id)

    return SettlementResponseSchema(
        transaction_id=response.transaction_id,
        points_awarded=response.points_awarded,
        profile=ProfileResponseSchema.from_dto(response.profile),
    )


@buyer_router.delete(
    "/{buyer_id}",
    status_code=204,
    summary="Remove Buyer (admin)",
    description="Delete a buyer profile. Development affordance, disabled by default.",
    responses={
        403: {"model": ErrorResponseSchema, "description": "Removal disabled"},
    },
)
async def remove_buyer(
    buyer_id: BuyerId,
    ledger_service: Annotated[LedgerQueryService, Depends(get_ledger_query_service)],
) -> Response:
    if not settings.admin_removal_enabled:
        raise OperationNotPermittedException("Buyer removal is disabled")

    await ledger_service.remove_profile(buyer_id)
    return Response(status_code=204)
