"""Prometheus metrics for the Credit Ledger service.

Metrics are organized into two categories:

Business Metrics (for Product/Finance):
- credit_ledger_credits_recorded_total: Credits committed after approval
- credit_ledger_credit_amount_total: Sum of credit amounts committed
- credit_ledger_approvals_total: Approval handshake outcomes
- credit_ledger_settlements_total: Settlements by reward outcome
- credit_ledger_reward_points_awarded_total: Reward points granted

Technical Metrics (for Engineering/SRE):
- credit_ledger_operation_latency_seconds: Ledger operation latency
- credit_ledger_persistence_failures_total: Storage read/write failures
- credit_ledger_notifications_total: Approval code deliveries
- credit_ledger_pending_challenges: Challenges awaiting a response
- credit_ledger_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from decimal import Decimal
from typing import Generator

from prometheus_client import Counter, Histogram, Gauge, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product/Finance dashboards)
# =============================================================================

credits_recorded_total = Counter(
    "credit_ledger_credits_recorded_total",
    "Total number of credits committed to the ledger",
    ["profile"],  # new, existing
)

credit_amount_total = Counter(
    "credit_ledger_credit_amount_total",
    "Sum of committed credit amounts",
)

approvals_total = Counter(
    "credit_ledger_approvals_total",
    "Approval handshake outcomes",
    ["outcome"],  # approved, rejected, expired, exhausted, declined
)

settlements_total = Counter(
    "credit_ledger_settlements_total",
    "Total number of settlements",
    ["reward"],  # rewarded, unrewarded
)

reward_points_awarded_total = Counter(
    "credit_ledger_reward_points_awarded_total",
    "Total reward points granted for timely settlement",
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

operation_latency = Histogram(
    "credit_ledger_operation_latency_seconds",
    "Ledger operation latency in seconds",
    ["operation"],  # begin_credit, confirm_credit, settle
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

persistence_failures_total = Counter(
    "credit_ledger_persistence_failures_total",
    "Total number of ledger storage failures",
    ["operation"],  # load, save
)

notifications_total = Counter(
    "credit_ledger_notifications_total",
    "Approval code deliveries by status",
    ["status"],  # delivered, failed
)

pending_challenges_gauge = Gauge(
    "credit_ledger_pending_challenges",
    "Approval challenges currently awaiting a response",
)

http_requests_total = Counter(
    "credit_ledger_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "credit_ledger_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_credit(amount: Decimal, new_profile: bool) -> None:
    """Record a committed credit."""
    credits_recorded_total.labels(profile="new" if new_profile else "existing").inc()
    credit_amount_total.inc(float(amount))


def record_approval(outcome: str) -> None:
    """Record an approval handshake outcome."""
    approvals_total.labels(outcome=outcome).inc()


def record_settlement(points_awarded: int) -> None:
    """Record a settlement and any reward points it earned."""
    reward = "rewarded" if points_awarded > 0 else "unrewarded"
    settlements_total.labels(reward=reward).inc()
    if points_awarded > 0:
        reward_points_awarded_total.inc(points_awarded)


def record_persistence_failure(operation: str) -> None:
    """Record a storage failure."""
    persistence_failures_total.labels(operation=operation).inc()


def record_notification(delivered: bool) -> None:
    """Record an approval code delivery attempt."""
    notifications_total.labels(status="delivered" if delivered else "failed").inc()


def set_pending_challenges(count: int) -> None:
    pending_challenges_gauge.set(count)


@contextmanager
def track_operation_latency(operation: str) -> Generator[None, None, None]:
    """Context manager to track ledger operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        operation_latency.labels(operation=operation).observe(duration)


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
