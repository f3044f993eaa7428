"""
Score & Reward Policy for the Credit Ledger
"""

from .settings import ScoringSettings, scoring_settings
from .score import calculate_score, outstanding_balance, score_outstanding
from .financial_year import (
    financial_year_label,
    financial_year_start,
    same_financial_year,
)
from .rewards import settlement_reward

__all__ = [
    # Settings
    "ScoringSettings",
    "scoring_settings",
    # Score
    "calculate_score",
    "outstanding_balance",
    "score_outstanding",
    # Financial Year
    "financial_year_label",
    "financial_year_start",
    "same_financial_year",
    # Rewards
    "settlement_reward",
]
