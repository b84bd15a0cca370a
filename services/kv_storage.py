"""
Key-value backend: one JSON document mapping
`body-track-{user_id}-{settings|entries}` (and
`body-track-account-{email}`) → serialized value.

With a path the document lives on disk and is rewritten on every save;
without one it stays in memory (tests, throwaway demos).

A document that cannot be parsed is moved aside to `<path>.corrupt` at
startup, so the next save cannot overwrite other users' data with it.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.models.account import Account
from core.models.entry import DailyEntry
from core.models.settings import GoalSettings
from services.storage import DataStorage, StorageError

_LOG = logging.getLogger(__name__)


def _key(user_id: str, kind: str) -> str:
    return f"body-track-{user_id}-{kind}"


def _account_key(email: str) -> str:
    return f"body-track-account-{email}"


class KeyValueStorage(DataStorage):
    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path else None
        self._doc: dict[str, Any] = {}

    async def startup(self) -> None:
        if self._path is None or not self._path.exists():
            return
        try:
            doc = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(doc, dict):
                raise ValueError(f"expected a JSON object, got {type(doc).__name__}")
        except (UnicodeDecodeError, ValueError) as exc:
            # the next save rewrites the whole file; keep the bad one for recovery
            self._quarantine(exc)
            return
        except OSError as exc:
            _LOG.error("failed to read %s: %s", self._path, exc)
            raise StorageError(f"could not read {self._path}") from exc
        self._doc = doc

    # ───────────────────────── settings ─────────────────────────
    async def get_settings(self, user_id: str) -> GoalSettings | None:
        raw = self._doc.get(_key(user_id, "settings"))
        if raw is None:
            return None
        try:
            return GoalSettings.model_validate(raw)
        except ValidationError as exc:
            _LOG.error("unreadable settings for %s: %s", user_id, exc)
            return None

    async def save_settings(self, user_id: str, settings: GoalSettings) -> None:
        self._put(_key(user_id, "settings"), settings.model_dump(mode="json"))

    # ───────────────────────── entries ──────────────────────────
    async def get_entries(self, user_id: str) -> list[DailyEntry]:
        raw = self._doc.get(_key(user_id, "entries")) or []
        try:
            return [DailyEntry.model_validate(r) for r in raw]
        except (TypeError, ValidationError) as exc:
            # an empty list here would be saved back over the stored entries
            _LOG.error("unreadable entries for %s: %s", user_id, exc)
            raise StorageError("could not load entries") from exc

    async def save_entries(self, user_id: str, entries: list[DailyEntry]) -> None:
        self._put(
            _key(user_id, "entries"),
            [e.model_dump(mode="json") for e in entries],
        )

    # ───────────────────────── accounts ─────────────────────────
    async def get_account(self, email: str) -> Account | None:
        raw = self._doc.get(_account_key(email))
        if raw is None:
            return None
        try:
            return Account.model_validate(raw)
        except ValidationError as exc:
            _LOG.error("unreadable account %s: %s", email, exc)
            raise StorageError("could not load account") from exc

    async def create_account(self, account: Account) -> bool:
        key = _account_key(account.email)
        if key in self._doc:
            return False
        self._put(key, account.model_dump(mode="json"))
        return True

    # ───────────────────────── helpers ──────────────────────────
    def _quarantine(self, exc: Exception) -> None:
        aside = self._path.with_suffix(self._path.suffix + ".corrupt")
        try:
            self._path.replace(aside)
        except OSError as move_exc:
            _LOG.error("cannot move corrupt %s aside: %s", self._path, move_exc)
            raise StorageError(f"{self._path} is corrupt and could not be moved") from exc
        _LOG.error("corrupt %s moved to %s, starting empty: %s", self._path, aside, exc)
        self._doc = {}

    def _put(self, key: str, value: Any) -> None:
        previous = self._doc.get(key)
        self._doc[key] = value
        if self._path is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(json.dumps(self._doc), encoding="utf-8")
            tmp.replace(self._path)
        except OSError as exc:
            # keep memory consistent with disk
            if previous is None:
                self._doc.pop(key, None)
            else:
                self._doc[key] = previous
            _LOG.error("failed to write %s: %s", self._path, exc)
            raise StorageError(f"could not save {key}") from exc
