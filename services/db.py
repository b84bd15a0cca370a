"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* Models for the `settings`, `entries` and `accounts` tables
* `RelationalStorage` – the DataStorage backend built on them
"""
from __future__ import annotations

import datetime as dt
import logging
import uuid

from sqlalchemy import (
    Date,
    DateTime,
    Float,
    Integer,
    String,
    UniqueConstraint,
    delete,
    func,
    select,
)
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from core.models.account import Account
from core.models.entry import DailyEntry
from core.models.settings import Gender, GoalSettings
from services.storage import DataStorage, StorageError

_LOG = logging.getLogger(__name__)

# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class SettingsRow(Base):
    __tablename__ = "settings"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    current_weight: Mapped[float] = mapped_column(Float)
    current_body_fat: Mapped[float] = mapped_column(Float)
    goal_weight: Mapped[float] = mapped_column(Float)
    goal_body_fat: Mapped[float] = mapped_column(Float)
    target_date: Mapped[dt.date] = mapped_column(Date)
    gender: Mapped[str] = mapped_column(String(8))
    age: Mapped[int] = mapped_column(Integer)
    height: Mapped[float] = mapped_column(Float)
    gym_session_hours: Mapped[float] = mapped_column(Float)
    gym_sessions_per_week: Mapped[int] = mapped_column(Integer)
    maintenance_kcal: Mapped[int] = mapped_column(Integer)
    gym_day_target_kcal: Mapped[int] = mapped_column(Integer)
    rest_day_target_kcal: Mapped[int] = mapped_column(Integer)
    baseline_date: Mapped[dt.date | None] = mapped_column(Date)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )


class EntryRow(Base):
    __tablename__ = "entries"
    __table_args__ = (UniqueConstraint("user_id", "date"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    calories: Mapped[float] = mapped_column(Float)
    gym_hours: Mapped[float] = mapped_column(Float, default=0)
    weight: Mapped[float | None] = mapped_column(Float)
    body_fat: Mapped[float | None] = mapped_column(Float)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )


class AccountRow(Base):
    __tablename__ = "accounts"

    email: Mapped[str] = mapped_column(String(254), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), unique=True)
    salt: Mapped[str] = mapped_column(String(64))
    password_hash: Mapped[str] = mapped_column(String(128))
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, server_default=func.now())


# ───────── row ⇄ domain ──────────────────────────────────────────────
_SETTINGS_FIELDS = tuple(GoalSettings.model_fields)


def _settings_out(row: SettingsRow) -> GoalSettings:
    data = {f: getattr(row, f) for f in _SETTINGS_FIELDS}
    data["gender"] = Gender(row.gender)
    return GoalSettings.model_validate(data)


def _settings_in(user_id: str, s: GoalSettings) -> SettingsRow:
    data = s.model_dump()
    data["gender"] = s.gender.value
    return SettingsRow(user_id=user_id, **data)


def _entry_out(row: EntryRow) -> DailyEntry:
    return DailyEntry(
        id=row.id,
        date=row.date,
        calories=row.calories,
        gym_hours=row.gym_hours,
        weight=row.weight,
        body_fat=row.body_fat,
    )


def _entry_in(user_id: str, e: DailyEntry) -> EntryRow:
    return EntryRow(
        id=e.id or str(uuid.uuid4()),
        user_id=user_id,
        date=e.date,
        calories=e.calories,
        gym_hours=e.gym_hours,
        weight=e.weight,
        body_fat=e.body_fat,
    )


# dialects with INSERT … ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}

# ───────── backend ───────────────────────────────────────────────────
class RelationalStorage(DataStorage):
    def __init__(self, database_url: str) -> None:
        self._engine: AsyncEngine = create_async_engine(database_url, pool_pre_ping=True)
        self._sessions = async_sessionmaker(self._engine, expire_on_commit=False)

    async def startup(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def shutdown(self) -> None:
        await self._engine.dispose()

    # ───────────────────────── settings ─────────────────────────
    async def get_settings(self, user_id: str) -> GoalSettings | None:
        try:
            async with self._sessions() as db:
                row = await db.get(SettingsRow, user_id)
        except SQLAlchemyError as exc:
            _LOG.error("settings read failed for %s: %s", user_id, exc)
            raise StorageError("could not load settings") from exc
        return _settings_out(row) if row else None

    async def save_settings(self, user_id: str, settings: GoalSettings) -> None:
        try:
            async with self._sessions() as db:
                await db.merge(_settings_in(user_id, settings))
                await db.commit()
        except SQLAlchemyError as exc:
            _LOG.error("settings write failed for %s: %s", user_id, exc)
            raise StorageError("could not save settings") from exc

    # ───────────────────────── entries ──────────────────────────
    async def get_entries(self, user_id: str) -> list[DailyEntry]:
        try:
            async with self._sessions() as db:
                rows = (
                    await db.execute(
                        select(EntryRow)
                        .where(EntryRow.user_id == user_id)
                        .order_by(EntryRow.date)
                    )
                ).scalars().all()
        except SQLAlchemyError as exc:
            _LOG.error("entries read failed for %s: %s", user_id, exc)
            raise StorageError("could not load entries") from exc
        return [_entry_out(r) for r in rows]

    async def save_entries(self, user_id: str, entries: list[DailyEntry]) -> None:
        """Replace the user's rows with `entries` in one transaction."""
        try:
            async with self._sessions() as db:
                await db.execute(delete(EntryRow).where(EntryRow.user_id == user_id))
                db.add_all([_entry_in(user_id, e) for e in entries])
                await db.commit()
        except SQLAlchemyError as exc:
            _LOG.error("entries write failed for %s: %s", user_id, exc)
            raise StorageError("could not save entries") from exc

    async def upsert_entry(self, user_id: str, entry: DailyEntry) -> DailyEntry:
        """Single-row upsert on (user_id, date); the stored id survives."""
        insert = _UPSERT_INSERTS.get(self._engine.dialect.name)
        if insert is None:
            return await super().upsert_entry(user_id, entry)

        stmt = insert(EntryRow).values(
            id=entry.id,
            user_id=user_id,
            date=entry.date,
            calories=entry.calories,
            gym_hours=entry.gym_hours,
            weight=entry.weight,
            body_fat=entry.body_fat,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "date"],
            set_={
                "calories": stmt.excluded.calories,
                "gym_hours": stmt.excluded.gym_hours,
                "weight": stmt.excluded.weight,
                "body_fat": stmt.excluded.body_fat,
                "updated_at": func.now(),
            },
        )
        try:
            async with self._sessions() as db:
                await db.execute(stmt)
                row = (
                    await db.execute(
                        select(EntryRow).where(
                            EntryRow.user_id == user_id, EntryRow.date == entry.date
                        )
                    )
                ).scalar_one()
                await db.commit()
        except SQLAlchemyError as exc:
            _LOG.error("entry upsert failed for %s on %s: %s", user_id, entry.date, exc)
            raise StorageError("could not save entry") from exc
        return _entry_out(row)

    async def delete_entry(self, user_id: str, entry_id: str) -> bool:
        try:
            async with self._sessions() as db:
                result = await db.execute(
                    delete(EntryRow).where(
                        EntryRow.user_id == user_id, EntryRow.id == entry_id
                    )
                )
                await db.commit()
        except SQLAlchemyError as exc:
            _LOG.error("entry delete failed for %s: %s", user_id, exc)
            raise StorageError("could not delete entry") from exc
        return result.rowcount > 0

    # ───────────────────────── accounts ─────────────────────────
    async def get_account(self, email: str) -> Account | None:
        try:
            async with self._sessions() as db:
                row = await db.get(AccountRow, email)
        except SQLAlchemyError as exc:
            _LOG.error("account read failed for %s: %s", email, exc)
            raise StorageError("could not load account") from exc
        if row is None:
            return None
        return Account(
            email=row.email,
            user_id=row.user_id,
            salt=row.salt,
            password_hash=row.password_hash,
        )

    async def create_account(self, account: Account) -> bool:
        try:
            async with self._sessions() as db:
                db.add(AccountRow(**account.model_dump()))
                await db.commit()
        except IntegrityError:
            return False
        except SQLAlchemyError as exc:
            _LOG.error("account write failed for %s: %s", account.email, exc)
            raise StorageError("could not save account") from exc
        return True
