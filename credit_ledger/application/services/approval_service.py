"""Approval handshake - one-time codes guarding credit creation."""

import hmac
import secrets
from collections import OrderedDict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Dict, Optional
from uuid import UUID

import structlog

from credit_ledger.core.metrics import record_approval, set_pending_challenges
from credit_ledger.domain.entities import Challenge, utc_now
from credit_ledger.domain.exceptions import (
    ApprovalAttemptsExhaustedException,
    ApprovalExpiredException,
    ApprovalRejectedException,
    ChallengeNotFoundException,
)

logger = structlog.get_logger(__name__)


def generate_code(digits: int = 6) -> str:
    """
    Draw a uniformly random numeric code of fixed width.

    With 6 digits the code is in 100000-999999.
    """
    low = 10 ** (digits - 1)
    high = 10 ** digits
    return str(low + secrets.randbelow(high - low))


class ApprovalHandshake:
    """
    Two-phase approval protocol: initiate a challenge, then verify the
    buyer's response.

    Pending challenges live in memory only. A challenge expires after
    `ttl_seconds` and allows `max_attempts` verification attempts. The
    ids of the last `expired_memory` expired challenges are remembered so
    a late answer is reported as expired rather than unknown.
    """

    def __init__(
        self,
        code_digits: int = 6,
        ttl_seconds: int = 300,
        max_attempts: int = 3,
        expired_memory: int = 1024,
        clock: Callable[[], datetime] = utc_now,
        code_generator: Optional[Callable[[int], str]] = None,
    ):
        self._code_digits = code_digits
        self._ttl = timedelta(seconds=ttl_seconds)
        self._max_attempts = max_attempts
        self._clock = clock
        self._generate_code = code_generator or generate_code
        self._pending: Dict[UUID, Challenge] = {}
        self._expired: "OrderedDict[UUID, None]" = OrderedDict()
        self._expired_memory = expired_memory

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def initiate(self, buyer_id: str, amount: Decimal, seller: str) -> Challenge:
        """
        Issue a one-time code for a proposed credit.

        Args:
            buyer_id: Normalized buyer identifier
            amount: Validated credit amount
            seller: Validated seller name

        Returns:
            The pending challenge, carrying the code to deliver
        """
        self._purge_expired()

        now = self._clock()
        challenge = Challenge(
            buyer_id=buyer_id,
            seller=seller,
            amount=amount,
            code=self._generate_code(self._code_digits),
            expires_at=now + self._ttl,
            max_attempts=self._max_attempts,
            created_at=now,
        )
        self._pending[challenge.id] = challenge
        set_pending_challenges(len(self._pending))

        logger.info(
            "approval_challenge_issued",
            challenge_id=str(challenge.id),
            buyer_id=buyer_id,
            expires_at=challenge.expires_at.isoformat(),
        )
        return challenge

    def get(self, challenge_id: UUID) -> Challenge:
        """
        Look up a pending challenge.

        Raises:
            ChallengeNotFoundException: If unknown, consumed or discarded
            ApprovalExpiredException: If it expired and was purged
        """
        challenge = self._pending.get(challenge_id)
        if challenge is None:
            if challenge_id in self._expired:
                raise ApprovalExpiredException(str(challenge_id))
            raise ChallengeNotFoundException(str(challenge_id))
        return challenge

    def verify(self, challenge_id: UUID, response: str) -> bool:
        """
        Check the buyer's response against the challenge code.

        A match consumes the challenge. A mismatch leaves no side effect
        beyond counting the attempt; the last failed attempt, or any
        attempt after expiry, discards the challenge.

        Args:
            challenge_id: Id of the pending challenge
            response: Code supplied by the buyer

        Returns:
            True when the response matches

        Raises:
            ChallengeNotFoundException: If the challenge is not pending
            ApprovalExpiredException: If the challenge has expired
            ApprovalAttemptsExhaustedException: If the last attempt failed
            ApprovalRejectedException: If the code does not match
        """
        challenge = self.get(challenge_id)
        log = logger.bind(challenge_id=str(challenge_id), buyer_id=challenge.buyer_id)

        if challenge.is_expired(self._clock()):
            self._expire(challenge_id)
            record_approval("expired")
            log.warning("approval_challenge_expired")
            raise ApprovalExpiredException(str(challenge_id))

        challenge.record_attempt()
        supplied = (response or "").strip()

        if hmac.compare_digest(supplied.encode(), challenge.code.encode()):
            self.discard(challenge_id)
            record_approval("approved")
            log.info("approval_granted", attempts=challenge.attempts)
            return True

        if challenge.attempts_remaining == 0:
            self.discard(challenge_id)
            record_approval("exhausted")
            log.warning("approval_attempts_exhausted", attempts=challenge.attempts)
            raise ApprovalAttemptsExhaustedException(str(challenge_id))

        record_approval("rejected")
        log.warning(
            "approval_code_mismatch",
            attempts_remaining=challenge.attempts_remaining,
        )
        raise ApprovalRejectedException(
            message=(
                "Approval code did not match; "
                f"{challenge.attempts_remaining} attempt(s) remaining"
            ),
            attempts_remaining=challenge.attempts_remaining,
        )

    def decline(self, challenge_id: UUID) -> Challenge:
        """
        Discard a challenge because the buyer declined.

        Raises:
            ChallengeNotFoundException: If the challenge is not pending
            ApprovalExpiredException: If the challenge has expired
        """
        challenge = self.get(challenge_id)
        if challenge.is_expired(self._clock()):
            self._expire(challenge_id)
            record_approval("expired")
            raise ApprovalExpiredException(str(challenge_id))

        self.discard(challenge_id, outcome="declined")
        return challenge

    def discard(self, challenge_id: UUID, outcome: Optional[str] = None) -> Optional[Challenge]:
        """
        Drop a challenge if it is still pending; never raises.

        Args:
            challenge_id: Id of the challenge
            outcome: Approval outcome to count when a challenge was dropped

        Returns:
            The dropped challenge, or None if it was no longer pending
        """
        challenge = self._pending.pop(challenge_id, None)
        set_pending_challenges(len(self._pending))
        if challenge is not None and outcome is not None:
            record_approval(outcome)
            logger.info(
                f"approval_{outcome}",
                challenge_id=str(challenge_id),
                buyer_id=challenge.buyer_id,
            )
        return challenge

    def _expire(self, challenge_id: UUID) -> None:
        self._pending.pop(challenge_id, None)
        self._expired[challenge_id] = None
        while len(self._expired) > self._expired_memory:
            self._expired.popitem(last=False)
        set_pending_challenges(len(self._pending))

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [cid for cid, c in self._pending.items() if c.is_expired(now)]
        for cid in expired:
            self._expire(cid)
        if expired:
            logger.debug("approval_challenges_purged", count=len(expired))
