# api/v1/progress.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from api.v1.deps import current_user, get_storage, get_today
from api.v1.schemas import ChartPointOut, ComparisonOut, ProgressOut
from config import settings as app_settings
from core.models.settings import GoalSettings
from core.score import calculate_progress_rate, compare_with_plan, current_state
from core.simulation import build_simulation_data
from services.storage import DataStorage

router = APIRouter()


async def _require_settings(storage: DataStorage, user_id: str) -> GoalSettings:
    goal = await storage.get_settings(user_id)
    if goal is None:
        raise HTTPException(404, "settings not set – save a goal first")
    return goal


@router.get("/progress", response_model=ProgressOut)
async def progress(
    user_id: str = Depends(current_user),
    storage: DataStorage = Depends(get_storage),
    today: date = Depends(get_today),
) -> ProgressOut:
    goal = await _require_settings(storage, user_id)
    entries = await storage.get_entries(user_id)

    weight, body_fat = current_state(goal, entries)
    current = calculate_progress_rate(
        weight,
        body_fat,
        goal.goal_weight,
        goal.goal_body_fat,
        goal.current_weight,
        goal.current_body_fat,
    )
    comparison = compare_with_plan(goal, entries, today=today)
    return ProgressOut(
        current_score=current,
        comparison=ComparisonOut.model_validate(comparison, from_attributes=True),
    )


@router.get("/simulation", response_model=list[ChartPointOut])
async def simulation(
    days: int | None = Query(None, ge=1, le=365),
    user_id: str = Depends(current_user),
    storage: DataStorage = Depends(get_storage),
    today: date = Depends(get_today),
) -> list[ChartPointOut]:
    goal = await _require_settings(storage, user_id)
    entries = await storage.get_entries(user_id)
    points = build_simulation_data(
        goal, entries, days or app_settings.simulation_days, today=today
    )
    return [ChartPointOut.model_validate(p, from_attributes=True) for p in points]
