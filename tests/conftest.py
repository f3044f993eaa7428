"""
Shared fixtures for unit and integration tests.

Provides:
- A controllable clock
- Key-value stores that succeed, fail, or hold corrupt data
- A recording notification client
- Wired-up ledger services over an in-memory store
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import pytest

from credit_ledger.application.services import (
    ApprovalHandshake,
    LedgerQueryService,
    LedgerStore,
    SettlementEngine,
    TransactionRecorder,
)
from credit_ledger.domain.interfaces import KeyValueStore, NotificationClient
from credit_ledger.infrastructure.repositories import InMemoryKeyValueStore
from credit_ledger.service.scoring import ScoringSettings


FIXED_CODE = "123456"


# =============================================================================
# Test Doubles
# =============================================================================

class FakeClock:
    """Clock that only moves when a test tells it to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FailingKeyValueStore(KeyValueStore):
    """Backend whose reads and/or writes raise."""

    def __init__(self, fail_get: bool = False, fail_set: bool = True, data: Optional[Dict[str, str]] = None):
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.data: Dict[str, str] = dict(data or {})
        self.set_calls = 0

    async def get(self, key: str) -> Optional[str]:
        if self.fail_get:
            raise ConnectionError("storage unreachable")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.set_calls += 1
        if self.fail_set:
            raise ConnectionError("storage unreachable")
        self.data[key] = value


class RecordingNotificationClient(NotificationClient):
    """Notification client that remembers every code it was asked to send."""

    def __init__(self, delivered: bool = True):
        self.delivered = delivered
        self.sent: List[Tuple[str, str]] = []

    async def send_code(self, destination: str, code: str) -> bool:
        self.sent.append((destination, code))
        return self.delivered


def fixed_code(digits: int) -> str:
    return FIXED_CODE


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def clock() -> FakeClock:
    """Clock set to 2025-11-16 12:00 IST."""
    return FakeClock(datetime(2025, 11, 16, 6, 30, tzinfo=timezone.utc))


@pytest.fixture
def scoring() -> ScoringSettings:
    """Default scoring settings, independent of the environment."""
    return ScoringSettings(
        base_score=100,
        penalty_divisor=1000,
        max_penalty=80,
        reward_points=10,
        financial_year_start_month=4,
        timezone="Asia/Kolkata",
    )


@pytest.fixture
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(backend: InMemoryKeyValueStore) -> LedgerStore:
    return LedgerStore(backend, storage_key="credit_ledger")


@pytest.fixture
def handshake(clock: FakeClock) -> ApprovalHandshake:
    return ApprovalHandshake(
        code_digits=6,
        ttl_seconds=300,
        max_attempts=3,
        clock=clock,
        code_generator=fixed_code,
    )


@pytest.fixture
def notifier() -> RecordingNotificationClient:
    return RecordingNotificationClient()


@pytest.fixture
def recorder(store, handshake, notifier, scoring, clock) -> TransactionRecorder:
    return TransactionRecorder(
        store=store,
        handshake=handshake,
        notifier=notifier,
        scoring=scoring,
        clock=clock,
        expose_code=True,
    )


@pytest.fixture
def engine(store, scoring, clock) -> SettlementEngine:
    return SettlementEngine(store=store, scoring=scoring, clock=clock)


@pytest.fixture
def ledger_service(store) -> LedgerQueryService:
    return LedgerQueryService(store=store)


@pytest.fixture
def flaky_backend() -> FailingKeyValueStore:
    """Backend that reads fine and fails writes until `fail_set` is cleared."""
    return FailingKeyValueStore(fail_get=False, fail_set=True)


@pytest.fixture
def unreadable_backend() -> FailingKeyValueStore:
    return FailingKeyValueStore(fail_get=True, fail_set=True)
