"""Application services (use cases)."""

from .ledger_store import LedgerStore
from .approval_service import ApprovalHandshake, generate_code
from .recorder_service import TransactionRecorder
from .settlement_service import SettlementEngine
from .ledger_service import LedgerQueryService

__all__ = [
    "LedgerStore",
    "ApprovalHandshake",
    "generate_code",
    "TransactionRecorder",
    "SettlementEngine",
    "LedgerQueryService",
]
