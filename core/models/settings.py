from __future__ import annotations

from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:  # pragma: no cover
    from core.calorie_plan import CaloriePlan


class Gender(str, Enum):
    male = "male"
    female = "female"


class GoalSettings(BaseModel):
    """One goal per user; the three *_kcal fields are cached plan outputs."""

    current_weight: float
    current_body_fat: float
    goal_weight: float
    goal_body_fat: float
    target_date: date
    gender: Gender
    age: int
    height: float                  # cm
    gym_session_hours: float
    gym_sessions_per_week: int
    maintenance_kcal: int
    gym_day_target_kcal: int
    rest_day_target_kcal: int
    baseline_date: date | None = None   # day the goal was saved

    def with_plan(self, plan: CaloriePlan) -> GoalSettings:
        return self.model_copy(
            update={
                "maintenance_kcal": plan.maintenance_kcal,
                "gym_day_target_kcal": plan.gym_day_target_kcal,
                "rest_day_target_kcal": plan.rest_day_target_kcal,
            }
        )
