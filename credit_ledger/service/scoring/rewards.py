"""Repayment reward rule for the Credit Ledger."""

from datetime import datetime

from credit_ledger.domain.entities import Transaction

from .financial_year import same_financial_year
from .settings import ScoringSettings, scoring_settings


def settlement_reward(
    transaction: Transaction,
    settled_at: datetime,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Points earned by settling a transaction at a given instant.

    A credit repaid within the financial year it was extended in earns
    the reward unit; one carried into a later financial year earns nothing.

    Args:
        transaction: The transaction being settled
        settled_at: The settlement instant
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Points to add to the buyer's reward balance
    """
    if same_financial_year(transaction.date, settled_at, settings):
        return settings.reward_points
    return 0
