"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app wired to an in-memory ledger
- Test client whose ledger storage rejects writes
- SQL key-value store over an in-memory SQLite database
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from credit_ledger.main import app
from credit_ledger.application.services import LedgerStore
from credit_ledger.core.config import settings
from credit_ledger.core.dependencies import get_notification_client
from credit_ledger.infrastructure.database import DatabaseSessionManager
from credit_ledger.infrastructure.repositories import SqlKeyValueStore


# =============================================================================
# App Client Fixtures
# =============================================================================

@asynccontextmanager
async def _client_for(store: LedgerStore, handshake, notifier) -> AsyncIterator[AsyncClient]:
    # ASGITransport does not run the lifespan, so install its state directly
    app.state.ledger_store = store
    app.state.approval_handshake = handshake
    app.dependency_overrides[get_notification_client] = lambda: notifier

    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
        del app.state.ledger_store
        del app.state.approval_handshake


@pytest.fixture(autouse=True)
def expose_codes(monkeypatch):
    """Return approval codes in API responses, as in local mode."""
    monkeypatch.setattr(settings, "approval_expose_code", True)


@pytest_asyncio.fixture
async def client(store, handshake, notifier) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with an in-memory ledger.

    This client:
    - Uses an in-memory key-value store
    - Issues the fixed approval code 123456
    - Records approval codes instead of sending them
    """
    async with _client_for(store, handshake, notifier) as ac:
        yield ac


@pytest_asyncio.fixture
async def client_with_failing_storage(
    flaky_backend,
    handshake,
    notifier,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client whose ledger writes always fail."""
    async with _client_for(LedgerStore(flaky_backend), handshake, notifier) as ac:
        yield ac


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def db() -> AsyncGenerator[DatabaseSessionManager, None]:
    """Session manager over an in-memory SQLite database."""
    manager = DatabaseSessionManager()
    manager.init("sqlite+aiosqlite:///:memory:")
    await manager.create_all()

    yield manager

    await manager.close()


@pytest.fixture
def sql_backend(db: DatabaseSessionManager) -> SqlKeyValueStore:
    return SqlKeyValueStore(db)


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def credit_request() -> dict:
    """Request body for a 2000 rupee credit."""
    return {
        "buyer_id": "abcde1234f",
        "seller": "Sharma Kirana Store",
        "amount": 2000,
    }
