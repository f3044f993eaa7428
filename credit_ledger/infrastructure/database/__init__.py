"""Database infrastructure."""

from .connection import DatabaseSessionManager, db_manager
from .models import Base, KeyValueModel

__all__ = [
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "KeyValueModel",
]
