from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict


class ComparisonOut(BaseModel):
    actual_progress: float
    planned_progress: float
    is_on_schedule: bool
    days_behind: int | None = None

    model_config = ConfigDict(from_attributes=True)


class ProgressOut(BaseModel):
    current_score: float
    comparison: ComparisonOut


class ChartPointOut(BaseModel):
    date: dt.date
    simulated_score: float
    planned_score: float
    actual_score: float | None = None
    simulated_weight: float
    planned_weight: float
    actual_weight: float | None = None
    simulated_body_fat: float
    planned_body_fat: float
    actual_body_fat: float | None = None
    has_prediction: bool

    model_config = ConfigDict(from_attributes=True)
