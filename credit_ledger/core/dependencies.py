"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends, Request

from credit_ledger.core.config import settings
from credit_ledger.domain.interfaces import NotificationClient
from credit_ledger.infrastructure.clients import (
    HttpNotificationClient,
    LocalNotificationClient,
)
from credit_ledger.application.services import (
    ApprovalHandshake,
    LedgerQueryService,
    LedgerStore,
    SettlementEngine,
    TransactionRecorder,
)


# Application state dependencies
def get_ledger_store(request: Request) -> LedgerStore:
    """Get the LedgerStore owned by the running application."""
    return request.app.state.ledger_store


def get_approval_handshake(request: Request) -> ApprovalHandshake:
    """Get the ApprovalHandshake holding pending challenges."""
    return request.app.state.approval_handshake


# External client dependencies
def get_notification_client() -> NotificationClient:
    """Get a NotificationClient instance."""
    if settings.notification_gateway_url:
        return HttpNotificationClient()
    return LocalNotificationClient()


# Service dependencies
def get_transaction_recorder(
    store: Annotated[LedgerStore, Depends(get_ledger_store)],
    handshake: Annotated[ApprovalHandshake, Depends(get_approval_handshake)],
    notifier: Annotated[NotificationClient, Depends(get_notification_client)],
) -> TransactionRecorder:
    """Get a TransactionRecorder instance with all dependencies."""
    return TransactionRecorder(
        store=store,
        handshake=handshake,
        notifier=notifier,
        expose_code=settings.approval_expose_code,
    )


def get_settlement_engine(
    store: Annotated[LedgerStore, Depends(get_ledger_store)],
) -> SettlementEngine:
    """Get a SettlementEngine instance."""
    return SettlementEngine(store=store)


def get_ledger_query_service(
    store: Annotated[LedgerStore, Depends(get_ledger_store)],
) -> LedgerQueryService:
    """Get a LedgerQueryService instance."""
    return LedgerQueryService(store=store)
