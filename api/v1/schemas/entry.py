from __future__ import annotations

from pydantic import BaseModel, Field


class EntryIn(BaseModel):
    calories: float = Field(..., ge=0, le=10000)
    gym_hours: float = Field(0, ge=0, le=24)
    weight: float | None = Field(None, gt=0, le=300)
    body_fat: float | None = Field(None, ge=0, le=100)
