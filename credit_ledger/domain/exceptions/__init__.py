"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .ledger import (
    AlreadySettledException,
    BuyerNotFoundException,
    InvalidInputException,
    NotFoundException,
    OperationNotPermittedException,
    TransactionNotFoundException,
)
from .approval import (
    ApprovalAttemptsExhaustedException,
    ApprovalDeclinedException,
    ApprovalExpiredException,
    ApprovalRejectedException,
    ChallengeNotFoundException,
)
from .persistence import PersistenceUnavailableException

__all__ = [
    "DomainException",
    "AlreadySettledException",
    "BuyerNotFoundException",
    "InvalidInputException",
    "NotFoundException",
    "OperationNotPermittedException",
    "TransactionNotFoundException",
    "ApprovalAttemptsExhaustedException",
    "ApprovalDeclinedException",
    "ApprovalExpiredException",
    "ApprovalRejectedException",
    "ChallengeNotFoundException",
    "PersistenceUnavailableException",
]
