"""Settlement engine - marks credits paid and applies reward/score rules."""

from datetime import datetime
from typing import Callable

import structlog

from credit_ledger.core.metrics import record_settlement
from credit_ledger.domain.entities import normalize_buyer_id, utc_now
from credit_ledger.domain.exceptions import (
    AlreadySettledException,
    BuyerNotFoundException,
    TransactionNotFoundException,
)
from credit_ledger.application.dto import ProfileResponse, SettlementResponse
from credit_ledger.service.scoring import (
    ScoringSettings,
    calculate_score,
    financial_year_label,
    scoring_settings,
    settlement_reward,
)

from .ledger_store import LedgerStore

logger = structlog.get_logger(__name__)


class SettlementEngine:
    """
    Application service for settling a buyer's credit.

    Settling touches exactly one transaction's paid flag plus the
    profile's reward points and score. A second settlement of the same
    transaction is refused rather than re-applied.
    """

    def __init__(
        self,
        store: LedgerStore,
        scoring: ScoringSettings = scoring_settings,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._scoring = scoring
        self._clock = clock

    async def settle(self, buyer_id: str, transaction_id: str) -> SettlementResponse:
        """
        Mark a transaction as paid.

        Args:
            buyer_id: The buyer's identifier
            transaction_id: Id of the transaction within the buyer's profile

        Returns:
            SettlementResponse with points awarded and the updated profile

        Raises:
            BuyerNotFoundException: If the buyer has no profile
            TransactionNotFoundException: If the transaction does not exist
            AlreadySettledException: If the transaction is already paid
            PersistenceUnavailableException: If the ledger cannot be saved
        """
        buyer_id = normalize_buyer_id(buyer_id)
        log = logger.bind(buyer_id=buyer_id, transaction_id=transaction_id)

        async with self._store.lock(buyer_id):
            current = self._store.get(buyer_id)
            if current is None:
                log.warning("settlement_buyer_not_found")
                raise BuyerNotFoundException(buyer_id)

            if current.find_transaction(transaction_id) is None:
                log.warning("settlement_transaction_not_found")
                raise TransactionNotFoundException(buyer_id, transaction_id)

            profile = current.clone()
            transaction = profile.find_transaction(transaction_id)

            if transaction.paid:
                log.info("settlement_already_settled")
                raise AlreadySettledException(buyer_id, transaction_id)

            settled_at = self._clock()
            transaction.mark_paid()

            points = settlement_reward(transaction, settled_at, self._scoring)
            profile.add_reward_points(points)
            profile.score = calculate_score(profile, self._scoring)

            await self._store.put(profile)

        record_settlement(points)
        log.info(
            "transaction_settled",
            points_awarded=points,
            credit_year=financial_year_label(transaction.date, self._scoring),
            settlement_year=financial_year_label(settled_at, self._scoring),
            reward_points=profile.reward_points,
            score=profile.score,
        )

        return SettlementResponse(
            transaction_id=transaction.id,
            points_awarded=points,
            profile=ProfileResponse.from_entity(profile),
        )
