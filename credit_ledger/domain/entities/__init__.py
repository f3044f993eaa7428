"""Domain Entities - Core business objects."""

from .transaction import (
    Transaction,
    generate_transaction_id,
    normalize_amount,
    utc_now,
)
from .buyer_profile import (
    BuyerProfile,
    MAX_SCORE,
    MIN_SCORE,
    normalize_buyer_id,
)
from .challenge import Challenge

__all__ = [
    "Transaction",
    "generate_transaction_id",
    "normalize_amount",
    "utc_now",
    "BuyerProfile",
    "MAX_SCORE",
    "MIN_SCORE",
    "normalize_buyer_id",
    "Challenge",
]
