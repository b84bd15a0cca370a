from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status

from api.v1.deps import current_user, get_storage, get_today
from api.v1.schemas import GoalIn, SettingsSaved
from core.calorie_plan import PlanInput, compute_calorie_plan
from core.models.settings import GoalSettings
from services.storage import DataStorage

router = APIRouter()
_LOG = logging.getLogger(__name__)


# ───────────────────────── read ─────────────────────────────
@router.get("", response_model=GoalSettings)
async def get_settings(
    user_id: str = Depends(current_user),
    storage: DataStorage = Depends(get_storage),
) -> GoalSettings:
    stored = await storage.get_settings(user_id)
    if stored is None:
        raise HTTPException(404, "settings not set")
    return stored


# ───────────────────────── save ─────────────────────────────
@router.put("", response_model=SettingsSaved, status_code=status.HTTP_200_OK)
async def save_settings(
    body: GoalIn,
    user_id: str = Depends(current_user),
    storage: DataStorage = Depends(get_storage),
    today: date = Depends(get_today),
) -> SettingsSaved:
    # every save re-derives the cached targets and resets the baseline date
    plan = compute_calorie_plan(PlanInput.from_goal(body), today=today)
    goal = GoalSettings(
        **body.model_dump(),
        maintenance_kcal=plan.maintenance_kcal,
        gym_day_target_kcal=plan.gym_day_target_kcal,
        rest_day_target_kcal=plan.rest_day_target_kcal,
        baseline_date=today,
    )
    await storage.save_settings(user_id, goal)
    if plan.warnings:
        _LOG.info("user %s saved a plan with %d warning(s)", user_id, len(plan.warnings))

    return SettingsSaved(
        settings=goal,
        bmr=plan.bmr,
        delta_e_day=plan.delta_e_day,
        warnings=plan.warnings,
    )
