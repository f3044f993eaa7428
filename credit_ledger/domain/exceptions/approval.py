"""Approval handshake domain exceptions."""

from .base import DomainException
from .ledger import NotFoundException


class ApprovalRejectedException(DomainException):
    """Raised when a buyer's approval response does not authorize the credit."""

    def __init__(
        self,
        message: str = "Approval code did not match",
        code: str = "APPROVAL_REJECTED",
        attempts_remaining: int = 0,
    ):
        super().__init__(message=message, code=code)
        self.attempts_remaining = attempts_remaining


class ApprovalExpiredException(ApprovalRejectedException):
    """Raised when the challenge outlived its time-to-live."""

    def __init__(self, challenge_id: str):
        super().__init__(
            message=f"Approval code for challenge {challenge_id} has expired",
            code="APPROVAL_EXPIRED",
        )
        self.challenge_id = challenge_id


class ApprovalAttemptsExhaustedException(ApprovalRejectedException):
    """Raised when the last allowed verification attempt fails."""

    def __init__(self, challenge_id: str):
        super().__init__(
            message=f"No approval attempts left for challenge {challenge_id}",
            code="APPROVAL_ATTEMPTS_EXHAUSTED",
        )
        self.challenge_id = challenge_id


class ApprovalDeclinedException(ApprovalRejectedException):
    """Raised when the buyer declines the credit."""

    def __init__(self, challenge_id: str):
        super().__init__(
            message=f"Credit declined for challenge {challenge_id}",
            code="APPROVAL_DECLINED",
        )
        self.challenge_id = challenge_id


class ChallengeNotFoundException(NotFoundException):
    """Raised when a challenge id is unknown, consumed or discarded."""

    def __init__(self, challenge_id: str):
        super().__init__(
            message=f"Challenge not found: {challenge_id}",
            code="CHALLENGE_NOT_FOUND",
        )
        self.challenge_id = challenge_id
