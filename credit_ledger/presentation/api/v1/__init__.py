"""Version 1 of the ledger API."""

from .router import router

__all__ = ["router"]
