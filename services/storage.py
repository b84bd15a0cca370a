"""
services/storage.py
────────────────────────────────────────────────────────────────────────
Storage capability shared by every backend, plus the factory that
resolves the configured backend once at startup.

The instance is created in the app lifespan and passed around
explicitly (see `api.v1.deps.get_storage`).
"""
from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING

from config import StorageBackend
from core.models.account import Account
from core.models.entry import DailyEntry
from core.models.settings import GoalSettings

if TYPE_CHECKING:  # pragma: no cover
    from config import _Settings

_LOG = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """A backend could not read or persist user data."""


class DataStorage(abc.ABC):
    async def startup(self) -> None:
        """Acquire connections / create schema. No-op by default."""

    async def shutdown(self) -> None:
        """Release whatever `startup` acquired. No-op by default."""

    @abc.abstractmethod
    async def get_settings(self, user_id: str) -> GoalSettings | None: ...

    @abc.abstractmethod
    async def save_settings(self, user_id: str, settings: GoalSettings) -> None: ...

    @abc.abstractmethod
    async def get_entries(self, user_id: str) -> list[DailyEntry]: ...

    @abc.abstractmethod
    async def save_entries(self, user_id: str, entries: list[DailyEntry]) -> None: ...

    async def upsert_entry(self, user_id: str, entry: DailyEntry) -> DailyEntry:
        """
        Store `entry` as the one entry for its date.  An existing entry on
        that date keeps its id.  Backends that can write one row override
        this read-modify-write.
        """
        entries = await self.get_entries(user_id)
        existing = next((e for e in entries if e.date == entry.date), None)
        if existing is not None:
            entry = entry.model_copy(update={"id": existing.id})
        kept = [e for e in entries if e.date != entry.date]
        await self.save_entries(user_id, sorted([*kept, entry], key=lambda e: e.date))
        return entry

    async def delete_entry(self, user_id: str, entry_id: str) -> bool:
        """False when the user has no entry with `entry_id`."""
        entries = await self.get_entries(user_id)
        remaining = [e for e in entries if e.id != entry_id]
        if len(remaining) == len(entries):
            return False
        await self.save_entries(user_id, remaining)
        return True

    # ───────────────────────── accounts ─────────────────────────
    @abc.abstractmethod
    async def get_account(self, email: str) -> Account | None: ...

    @abc.abstractmethod
    async def create_account(self, account: Account) -> bool:
        """False when the email is already registered."""


def build_storage(cfg: _Settings) -> DataStorage:
    if cfg.storage_backend is StorageBackend.relational:
        # lazy import: SQLAlchemy engine only when this backend is used
        from services.db import RelationalStorage

        if not cfg.database_url:
            raise RuntimeError("STORAGE_BACKEND=relational requires DATABASE_URL")
        _LOG.info("storage: relational")
        return RelationalStorage(cfg.database_url)

    from services.kv_storage import KeyValueStorage

    _LOG.info("storage: key-value (%s)", cfg.kv_path or "in-memory")
    return KeyValueStorage(cfg.kv_path)
