"""Health check endpoint for service monitoring."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from credit_ledger import __version__
from credit_ledger.application.services import LedgerStore
from credit_ledger.core.dependencies import get_ledger_store

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    storage_degraded: bool = False
    buyers: int = 0


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="""
    Returns the health status of the service.

    Reports "degraded" when the ledger could not be read at startup and
    the service is running on an empty ledger.
    """,
)
async def health_check(
    store: Annotated[LedgerStore, Depends(get_ledger_store)],
) -> HealthResponse:
    return HealthResponse(
        status="degraded" if store.degraded else "healthy",
        version=__version__,
        storage_degraded=store.degraded,
        buyers=len(store.profiles()),
    )
