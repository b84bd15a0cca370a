"""
Centralised settings loader (pydantic-settings).

Every value can be overridden by an env var of the same name
(case-insensitive) or through a local `.env` file.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageBackend(str, Enum):
    key_value = "key_value"      # JSON document (file or in-memory)
    relational = "relational"    # async SQLAlchemy on DATABASE_URL


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime ─────────────────────────────────────────────────────
    env_name: str = "local"
    log_level: str = "INFO"

    # ─── storage ─────────────────────────────────────────────────────
    storage_backend: StorageBackend = StorageBackend.key_value
    database_url: str | None = None
    kv_path: str | None = None        # unset → in-memory document

    # ─── auth ────────────────────────────────────────────────────────
    jwt_secret: str = "changeme"
    token_ttl_minutes: int = Field(60 * 24, gt=0)

    # ─── simulation ──────────────────────────────────────────────────
    simulation_days: int = Field(90, ge=1, le=365)

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        extra="ignore", env_file=".env", env_file_encoding="utf-8"
    )


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()


settings: _Settings = _cached()
