# api/v1/entries.py
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.v1.deps import current_user, get_storage
from api.v1.schemas import EntryIn
from core.models.entry import DailyEntry
from services.storage import DataStorage

router = APIRouter()


@router.get("", response_model=list[DailyEntry])
async def list_entries(
    user_id: str = Depends(current_user),
    storage: DataStorage = Depends(get_storage),
) -> list[DailyEntry]:
    entries = await storage.get_entries(user_id)
    return sorted(entries, key=lambda e: e.date)


@router.put(
    "/{entry_date}",
    response_model=DailyEntry,
    summary="Create or overwrite the entry for a calendar date",
)
async def upsert_entry(
    entry_date: date,
    body: EntryIn,
    user_id: str = Depends(current_user),
    storage: DataStorage = Depends(get_storage),
) -> DailyEntry:
    # fresh id; the backend keeps the stored one when the date already exists
    entry = DailyEntry(id=str(uuid.uuid4()), date=entry_date, **body.model_dump())
    return await storage.upsert_entry(user_id, entry)


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an entry by its ID",
)
async def delete_entry(
    entry_id: str,
    user_id: str = Depends(current_user),
    storage: DataStorage = Depends(get_storage),
) -> Response:
    if not await storage.delete_entry(user_id, entry_id):
        raise HTTPException(status_code=404, detail="Entry not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
