"""Ledger service - handles profile retrieval and administrative removal."""

import structlog

from credit_ledger.domain.entities import normalize_buyer_id
from credit_ledger.domain.exceptions import BuyerNotFoundException
from credit_ledger.application.dto import ProfileResponse, ProfileSummary

from .ledger_store import LedgerStore

logger = structlog.get_logger(__name__)


class LedgerQueryService:
    """
    Application service for reading buyer profiles.

    Also carries the administrative removal used during development.
    """

    def __init__(self, store: LedgerStore):
        self._store = store

    async def get_profile(self, buyer_id: str) -> ProfileResponse:
        """
        Retrieve a buyer profile with its transactions.

        Args:
            buyer_id: The buyer's identifier (case-insensitive)

        Returns:
            ProfileResponse with balance, score and transactions

        Raises:
            BuyerNotFoundException: If the buyer has no profile
        """
        buyer_id = normalize_buyer_id(buyer_id)
        profile = self._store.get(buyer_id)

        if profile is None:
            logger.warning("profile_not_found", buyer_id=buyer_id)
            raise BuyerNotFoundException(buyer_id)

        logger.info(
            "profile_retrieved",
            buyer_id=buyer_id,
            num_transactions=len(profile.transactions),
        )

        return ProfileResponse.from_entity(profile)

    async def list_profiles(self) -> list[ProfileSummary]:
        """Summaries of every buyer profile, in creation order."""
        profiles = self._store.profiles()

        logger.info("profiles_listed", count=len(profiles))

        return [ProfileSummary.from_entity(p) for p in profiles]

    async def remove_profile(self, buyer_id: str) -> None:
        """
        Delete a buyer profile and all its transactions.

        Raises:
            BuyerNotFoundException: If the buyer has no profile
        """
        buyer_id = normalize_buyer_id(buyer_id)

        async with self._store.lock(buyer_id):
            removed = await self._store.remove(buyer_id)

        if removed is None:
            raise BuyerNotFoundException(buyer_id)

        logger.warning(
            "profile_removed",
            buyer_id=buyer_id,
            num_transactions=len(removed.transactions),
        )
