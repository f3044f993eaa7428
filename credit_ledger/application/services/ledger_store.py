"""Ledger store - in-memory buyer profiles backed by a key-value document."""

import asyncio
import json
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

import structlog

from credit_ledger.core.metrics import record_persistence_failure
from credit_ledger.domain.entities import BuyerProfile, normalize_buyer_id
from credit_ledger.domain.exceptions import (
    InvalidInputException,
    PersistenceUnavailableException,
)
from credit_ledger.domain.interfaces import KeyValueStore

logger = structlog.get_logger(__name__)


class LedgerStore:
    """
    Holds every buyer profile, keyed by buyer identifier.

    The whole ledger is one JSON document stored under a fixed key.
    This object is the single in-process writer of that document:
    mutations of one buyer are serialized by that buyer's lock, and
    writes of the document are serialized by the document lock.
    """

    def __init__(self, backend: KeyValueStore, storage_key: str = "credit_ledger"):
        self._backend = backend
        self._storage_key = storage_key
        self._profiles: Dict[str, BuyerProfile] = {}
        self._buyer_locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        self._write_lock = asyncio.Lock()
        self.degraded = False

    @property
    def storage_key(self) -> str:
        return self._storage_key

    async def load(self) -> Dict[str, BuyerProfile]:
        """
        Read the ledger document into memory.

        Missing, unreadable or corrupt data yields an empty ledger; the
        store is then flagged as degraded so the condition stays visible.

        Returns:
            Mapping of buyer id to profile
        """
        log = logger.bind(storage_key=self._storage_key)

        try:
            raw = await self._backend.get(self._storage_key)
        except Exception as e:
            record_persistence_failure("load")
            log.error("ledger_load_failed", error=str(e), error_type=type(e).__name__)
            return self._reset(degraded=True)

        if raw is None:
            log.info("ledger_load_empty")
            return self._reset(degraded=False)

        try:
            profiles = self.decode(raw)
        except (ValueError, KeyError, TypeError, AttributeError, InvalidInputException) as e:
            record_persistence_failure("load")
            log.warning("ledger_document_corrupt", error=str(e))
            return self._reset(degraded=True)

        self._profiles = profiles
        self.degraded = False
        log.info("ledger_loaded", buyers=len(profiles))
        return dict(self._profiles)

    async def save(self, profiles: Optional[Dict[str, BuyerProfile]] = None) -> None:
        """
        Write the whole ledger document (last writer wins).

        Args:
            profiles: Mapping to store; defaults to the in-memory ledger,
                and replaces it when given

        Raises:
            PersistenceUnavailableException: If the backend write fails
        """
        async with self._write_lock:
            previous = self._profiles
            if profiles is not None:
                self._profiles = dict(profiles)
            try:
                await self._write()
            except PersistenceUnavailableException:
                self._profiles = previous
                raise

    @asynccontextmanager
    async def lock(self, buyer_id: str) -> AsyncIterator[None]:
        """
        Serialize read-modify-write sequences on one buyer.

        A buyer's lock exists only while someone holds or awaits it.
        """
        key = normalize_buyer_id(buyer_id)
        buyer_lock = self._buyer_locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with buyer_lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._buyer_locks[key]

    def get(self, buyer_id: str) -> Optional[BuyerProfile]:
        """Return the live profile for a buyer, or None."""
        return self._profiles.get(normalize_buyer_id(buyer_id))

    def profiles(self) -> List[BuyerProfile]:
        """All profiles in insertion order."""
        return list(self._profiles.values())

    async def put(self, profile: BuyerProfile) -> None:
        """
        Install a profile and persist the ledger.

        When the write fails, the previous profile is restored so memory
        never holds a mutation storage does not.

        Raises:
            PersistenceUnavailableException: If the backend write fails
        """
        async with self._write_lock:
            previous = self._profiles.get(profile.id)
            self._profiles[profile.id] = profile
            try:
                await self._write()
            except PersistenceUnavailableException:
                self._restore(profile.id, previous)
                raise

    async def remove(self, buyer_id: str) -> Optional[BuyerProfile]:
        """
        Drop a profile and persist the ledger.

        Returns:
            The removed profile, or None if there was none
        """
        key = normalize_buyer_id(buyer_id)
        async with self._write_lock:
            previous = self._profiles.pop(key, None)
            if previous is None:
                return None
            try:
                await self._write()
            except PersistenceUnavailableException:
                self._restore(key, previous)
                raise
        return previous

    async def _write(self) -> None:
        document = self.encode(self._profiles)
        try:
            await self._backend.set(self._storage_key, document)
        except Exception as e:
            record_persistence_failure("save")
            logger.error(
                "ledger_save_failed",
                storage_key=self._storage_key,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise PersistenceUnavailableException("save") from e

        logger.debug("ledger_saved", buyers=len(self._profiles))

    def _restore(self, buyer_id: str, previous: Optional[BuyerProfile]) -> None:
        if previous is None:
            self._profiles.pop(buyer_id, None)
        else:
            self._profiles[buyer_id] = previous

    def _reset(self, degraded: bool) -> Dict[str, BuyerProfile]:
        self._profiles = {}
        self.degraded = degraded
        return {}

    @staticmethod
    def encode(profiles: Dict[str, BuyerProfile]) -> str:
        """Serialize profiles to the stored JSON document."""
        return json.dumps(
            {buyer_id: profile.to_dict() for buyer_id, profile in profiles.items()},
            separators=(",", ":"),
            ensure_ascii=False,
        )

    @staticmethod
    def decode(raw: str) -> Dict[str, BuyerProfile]:
        """
        Parse a stored JSON document into profiles.

        Raises:
            ValueError: If the document is not a JSON object of profiles
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("ledger document must be a JSON object")

        profiles: Dict[str, BuyerProfile] = {}
        for key, value in data.items():
            if not isinstance(value, dict):
                raise ValueError(f"profile {key!r} is not an object")
            profile = BuyerProfile.from_dict(value)
            if profile.id in profiles:
                raise ValueError(f"duplicate buyer id {profile.id!r}")
            profiles[profile.id] = profile
        return profiles
