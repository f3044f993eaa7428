"""
Credit Ledger - Main Application Entry Point

A buyer credit ledger: sellers record credit, buyers approve it with a
one-time code, and the service tracks balances, rewards and scores.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from credit_ledger import __version__
from credit_ledger.application.services import ApprovalHandshake, LedgerStore
from credit_ledger.core.config import settings
from credit_ledger.core.logging import setup_logging
from credit_ledger.core.metrics import get_metrics, get_metrics_content_type
from credit_ledger.domain.interfaces import KeyValueStore
from credit_ledger.infrastructure.database import db_manager
from credit_ledger.infrastructure.repositories import (
    InMemoryKeyValueStore,
    SqlKeyValueStore,
)
from credit_ledger.presentation.api import api_router
from credit_ledger.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)


async def create_key_value_store() -> KeyValueStore:
    """Build the configured storage backend."""
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()

    db_manager.init()
    await db_manager.create_all()
    return SqlKeyValueStore(db_manager)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Set up logging
    - Open the storage backend and load the ledger
    - Create the approval handshake
    - Clean up on shutdown
    """
    setup_logging()
    logger = structlog.get_logger(__name__)

    store = LedgerStore(await create_key_value_store(), settings.storage_key)
    await store.load()
    if store.degraded:
        logger.warning("ledger_started_degraded", storage_key=settings.storage_key)

    app.state.ledger_store = store
    app.state.approval_handshake = ApprovalHandshake(
        code_digits=settings.approval_code_digits,
        ttl_seconds=settings.approval_code_ttl_seconds,
        max_attempts=settings.approval_max_attempts,
    )

    logger.info(
        "application_started",
        app=settings.app_name,
        version=__version__,
        storage_backend=settings.storage_backend,
        buyers=len(store.profiles()),
    )

    yield

    await db_manager.close()
    logger.info("application_stopped")


app = FastAPI(
    title="Credit Ledger",
    description="Buyer Credit Ledger with One-Time-Code Approval",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
    )


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""

    return RedirectResponse(url="/docs")


def run() -> None:
    """Console entry point."""
    uvicorn.run(
        "credit_ledger.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
