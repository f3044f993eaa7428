"""Key-value store implementations for the ledger document."""

from typing import Dict, Optional

from sqlalchemy import select

from credit_ledger.domain.interfaces import KeyValueStore
from credit_ledger.infrastructure.database import DatabaseSessionManager, KeyValueModel


class SqlKeyValueStore(KeyValueStore):
    """
    SQL-backed key-value store.

    Uses one short transaction per call through the session manager,
    so it can outlive any single request.
    """

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def get(self, key: str) -> Optional[str]:
        async with self._db.session() as session:
            stmt = select(KeyValueModel.value).where(KeyValueModel.key == key)
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        async with self._db.session() as session:
            model = await session.get(KeyValueModel, key)
            if model is None:
                session.add(KeyValueModel(key=key, value=value))
            else:
                model.value = value
            await session.flush()


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local key-value store for development and tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value
