"""
Creditworthiness Score for the Credit Ledger.

The score starts at the base (100) and loses one point per
`penalty_divisor` of outstanding balance, capped at `max_penalty` points,
so it always lands in [20, 100] with the default settings.

Rounding is round-half-up on exact decimal arithmetic: an outstanding
balance of 1500 gives 100 - 1.5 = 98.5, which scores 99.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from credit_ledger.domain.entities import BuyerProfile, Transaction

from .settings import ScoringSettings, scoring_settings


def outstanding_balance(transactions: Iterable[Transaction]) -> Decimal:
    """
    Sum the amounts of unpaid transactions.

    Args:
        transactions: Transactions of one buyer

    Returns:
        Outstanding balance, never negative
    """
    return sum((t.amount for t in transactions if not t.paid), Decimal("0"))


def score_outstanding(
    outstanding: Decimal,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Map an outstanding balance to a score.

    Args:
        outstanding: Sum of unpaid amounts
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Integer score between settings.min_score and settings.base_score
    """
    outstanding = Decimal(outstanding)
    if outstanding <= 0:
        return settings.base_score

    penalty = outstanding / settings.penalty_divisor
    penalty = min(max(penalty, Decimal("0")), Decimal(settings.max_penalty))

    raw = Decimal(settings.base_score) - penalty
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_score(
    profile: BuyerProfile,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Score a buyer profile from its current transactions.

    Pure and deterministic: the same transaction set always gives the
    same integer.
    """
    return score_outstanding(outstanding_balance(profile.transactions), settings)
