from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from core.models.settings import Gender, GoalSettings


class GoalIn(BaseModel):
    """Goal form; the cached kcal targets are derived server-side."""

    current_weight: float = Field(..., gt=0, le=300)
    current_body_fat: float = Field(..., ge=0, le=100)
    goal_weight: float = Field(..., gt=0, le=300)
    goal_body_fat: float = Field(..., ge=0, le=100)
    target_date: dt.date
    gender: Gender
    age: int = Field(..., ge=1, le=120)
    height: float = Field(..., ge=100, le=250, description="cm")
    gym_session_hours: float = Field(..., ge=0, le=24)
    gym_sessions_per_week: int = Field(..., ge=0, le=7)


class SettingsSaved(BaseModel):
    settings: GoalSettings
    bmr: int
    delta_e_day: float
    warnings: list[str] = []
