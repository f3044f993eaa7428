"""Transaction recorder - orchestrates the approved-credit use case."""

from datetime import datetime
from typing import Awaitable, Callable, Optional
from uuid import UUID

import structlog

from credit_ledger.core.metrics import record_credit, record_notification
from credit_ledger.domain.entities import (
    BuyerProfile,
    Challenge,
    Transaction,
    generate_transaction_id,
    normalize_amount,
    normalize_buyer_id,
    utc_now,
)
from credit_ledger.domain.exceptions import (
    ApprovalDeclinedException,
    InvalidInputException,
)
from credit_ledger.domain.interfaces import NotificationClient
from credit_ledger.application.dto import (
    ChallengeResponse,
    CreditRecordedResponse,
    CreditRequest,
    ProfileSummary,
    TransactionDTO,
)
from credit_ledger.service.scoring import ScoringSettings, calculate_score, scoring_settings

from .approval_service import ApprovalHandshake
from .ledger_store import LedgerStore

logger = structlog.get_logger(__name__)

# Receives the pending challenge, returns the buyer's code or None to decline
Approver = Callable[[ChallengeResponse], Awaitable[Optional[str]]]


class TransactionRecorder:
    """
    Application service for recording credit extended to a buyer.

    A credit reaches the ledger only after the buyer approves it through
    the approval handshake; a rejected or declined credit leaves no trace.
    """

    def __init__(
        self,
        store: LedgerStore,
        handshake: ApprovalHandshake,
        notifier: NotificationClient,
        scoring: ScoringSettings = scoring_settings,
        clock: Callable[[], datetime] = utc_now,
        expose_code: bool = False,
    ):
        self._store = store
        self._handshake = handshake
        self._notifier = notifier
        self._scoring = scoring
        self._clock = clock
        self._expose_code = expose_code

    async def begin_credit(self, request: CreditRequest) -> ChallengeResponse:
        """
        Validate a proposed credit and issue its approval challenge.

        Args:
            request: Buyer id, seller and amount of the proposed credit

        Returns:
            ChallengeResponse describing the pending approval

        Raises:
            InvalidInputException: If a field is empty or the amount invalid
        """
        errors = request.validate()
        if errors:
            raise InvalidInputException("; ".join(errors))

        buyer_id = normalize_buyer_id(request.buyer_id)
        seller = request.seller.strip()
        amount = normalize_amount(request.amount)

        challenge = self._handshake.initiate(buyer_id, amount, seller)

        delivered = await self._notifier.send_code(buyer_id, challenge.code)
        record_notification(delivered)
        if not delivered:
            logger.warning(
                "approval_code_not_delivered",
                challenge_id=str(challenge.id),
                buyer_id=buyer_id,
            )

        return ChallengeResponse.from_entity(challenge, expose_code=self._expose_code)

    async def confirm_credit(self, challenge_id: UUID, code: str) -> CreditRecordedResponse:
        """
        Verify the buyer's code and commit the credit.

        Args:
            challenge_id: Id of the pending challenge
            code: Code supplied by the buyer

        Returns:
            CreditRecordedResponse with the new transaction

        Raises:
            ChallengeNotFoundException: If the challenge is not pending
            ApprovalRejectedException: If the code does not approve the credit
            PersistenceUnavailableException: If the ledger cannot be saved
        """
        challenge = self._handshake.get(challenge_id)
        self._handshake.verify(challenge_id, code)
        return await self._commit(challenge)

    async def decline_credit(self, challenge_id: UUID) -> None:
        """Discard a pending credit the buyer declined."""
        self._handshake.decline(challenge_id)

    async def record_credit(
        self,
        buyer_id: str,
        seller: str,
        amount,
        approver: Approver,
    ) -> str:
        """
        Run the whole credit flow: validate, challenge, await approval, commit.

        Args:
            buyer_id: Buyer identifier (tax ID)
            seller: Seller name
            amount: Credit amount
            approver: Awaited for the buyer's code; returning None declines

        Returns:
            Id of the committed transaction

        Raises:
            InvalidInputException: If a field is empty or the amount invalid
            ApprovalRejectedException: If the buyer declines or the code fails
        """
        pending = await self.begin_credit(CreditRequest(buyer_id, seller, amount))
        challenge_id = UUID(pending.challenge_id)

        try:
            code = await approver(pending)
        except BaseException:
            self._handshake.discard(challenge_id)
            raise

        if code is None:
            self._handshake.discard(challenge_id, outcome="declined")
            raise ApprovalDeclinedException(pending.challenge_id)

        result = await self.confirm_credit(challenge_id, code)
        return result.transaction_id

    async def _commit(self, challenge: Challenge) -> CreditRecordedResponse:
        log = logger.bind(buyer_id=challenge.buyer_id, challenge_id=str(challenge.id))

        async with self._store.lock(challenge.buyer_id):
            current = self._store.get(challenge.buyer_id)
            new_profile = current is None
            profile = BuyerProfile(id=challenge.buyer_id) if new_profile else current.clone()

            now = self._clock()
            transaction = Transaction(
                id=generate_transaction_id((t.id for t in profile.transactions), now),
                seller=challenge.seller,
                amount=challenge.amount,
                date=now,
            )
            profile.add_transaction(transaction)
            profile.score = calculate_score(profile, self._scoring)

            await self._store.put(profile)

        record_credit(transaction.amount, new_profile)
        log.info(
            "credit_recorded",
            transaction_id=transaction.id,
            amount=str(transaction.amount),
            new_profile=new_profile,
            score=profile.score,
        )

        return CreditRecordedResponse(
            transaction=TransactionDTO.from_entity(transaction),
            profile=ProfileSummary.from_entity(profile),
            new_profile=new_profile,
        )
