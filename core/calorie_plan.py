"""
core/calorie_plan.py
────────────────────────────────────────────────────────────────────────
Energy-balance calorie planner:

1. Horizon N (days until the target date, floor 1)
2. Required daily weight change  ΔW_day → energy delta ΔE_day (× 7700)
3. BMR  (Mifflin–St Jeor)
4. Rest-day maintenance  = BMR × 1.3
5. Gym-day maintenance   = rest maintenance + MET-6 session expenditure
6. Targets = maintenance + ΔE_day, never below BMR × 1.1
7. Advisory warnings for aggressive pace / deficit / surplus
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

from core.models.settings import Gender

_LOG = logging.getLogger(__name__)

KCAL_PER_KG = 7700           # ≈ energy content of 1 kg adipose tissue
REST_DAY_FACTOR = 1.3        # non-gym daily expenditure multiplier on BMR
GYM_MET = 6
SAFETY_FLOOR_FACTOR = 1.1    # minimum intake, as a multiple of BMR

# ──────────────────────────────────────────────────────────────────────
#  Warning messages (thresholds live in _warnings)
# ──────────────────────────────────────────────────────────────────────
LOSS_PACE_STRONG = (
    "Weight-loss pace is very steep (over 1 kg/week). Consider a later "
    "target date or a less ambitious goal weight."
)
LOSS_PACE_MODERATE = (
    "Weight-loss pace is on the hard side (0.8–1 kg/week). Keep an eye on "
    "how you feel and ease off if needed."
)
GAIN_PACE_STRONG = (
    "Weight-gain pace is very fast (over 0.5 kg/week). Expect a large "
    "share of the gain to be fat."
)
GAIN_PACE_MODERATE = (
    "Weight-gain pace is on the fast side (0.3–0.5 kg/week). Watch how "
    "your body-fat trends."
)
DEFICIT_STRONG = (
    "Daily calorie deficit exceeds 1000 kcal. This is a very hard setting; "
    "consider extending the target date or relaxing the goal."
)
DEFICIT_MODERATE = (
    "Daily calorie deficit exceeds 800 kcal. Relax the goal a little if it "
    "feels hard to sustain."
)
SURPLUS_STRONG = (
    "Daily calorie surplus exceeds 600 kcal. Fat gain may be significant; "
    "consider revisiting the goal."
)
SURPLUS_MODERATE = (
    "Daily calorie surplus exceeds 400 kcal. The gain pace is fast, so "
    "track body-fat as you go."
)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def round_half_up(value: float) -> int:
    """Nearest integer with .5 going up (round() would go to even)."""
    return int(math.floor(value + 0.5))


# ──────────────────────────────────────────────────────────────────────
#  Input / output
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class PlanInput:
    current_weight: float      # kg
    goal_weight: float         # kg
    target_date: date
    gender: Gender
    age: int
    height: float              # cm
    gym_session_hours: float
    gym_sessions_per_week: int

    @classmethod
    def from_goal(cls, goal: Any) -> PlanInput:
        """Build from anything carrying the goal attributes (settings, API body)."""
        return cls(
            current_weight=goal.current_weight,
            goal_weight=goal.goal_weight,
            target_date=goal.target_date,
            gender=Gender(goal.gender),
            age=goal.age,
            height=goal.height,
            gym_session_hours=goal.gym_session_hours,
            gym_sessions_per_week=goal.gym_sessions_per_week,
        )


@dataclass(frozen=True)
class CaloriePlan:
    maintenance_kcal: int
    gym_day_target_kcal: int
    rest_day_target_kcal: int
    bmr: int
    delta_e_day: float
    warnings: list[str] = field(default_factory=list)


# ──────────────────────────────────────────────────────────────────────
#  Calculator
# ──────────────────────────────────────────────────────────────────────
def calculate_bmr(weight: float, height: float, age: int, gender: Gender | str) -> float:
    """Mifflin–St Jeor (kcal/day)."""
    base = 10 * weight + 6.25 * height - 5 * age
    return base + (5 if Gender(gender) is Gender.male else -161)


def horizon_days(target_date: date, today: date | None = None) -> int:
    """Days until `target_date`; a date today or in the past counts as 1."""
    today = today or utc_today()
    return max(1, (target_date - today).days)


def compute_calorie_plan(inp: PlanInput, today: date | None = None) -> CaloriePlan:
    n = horizon_days(inp.target_date, today)

    delta_w = inp.goal_weight - inp.current_weight
    # multiply before dividing so exact boundaries (1.0 kg/week) stay exact
    weekly_delta_w = delta_w * 7 / n
    delta_e_day = delta_w * KCAL_PER_KG / n

    bmr = calculate_bmr(inp.current_weight, inp.height, inp.age, inp.gender)
    rest_maint = bmr * REST_DAY_FACTOR
    gym_energy = GYM_MET * inp.current_weight * inp.gym_session_hours
    gym_maint = rest_maint + gym_energy

    min_intake = bmr * SAFETY_FLOOR_FACTOR
    rest_target = max(rest_maint + delta_e_day, min_intake)
    gym_target = max(gym_maint + delta_e_day, min_intake)

    _LOG.debug(
        "plan: N=%d ΔE/day=%.1f bmr=%.1f rest=%.1f gym=%.1f",
        n, delta_e_day, bmr, rest_target, gym_target,
    )

    return CaloriePlan(
        maintenance_kcal=round_half_up(rest_maint),
        gym_day_target_kcal=round_half_up(gym_target),
        rest_day_target_kcal=round_half_up(rest_target),
        bmr=round_half_up(bmr),
        delta_e_day=delta_e_day,
        warnings=_warnings(weekly_delta_w, delta_e_day),
    )


def _warnings(weekly_delta_w: float, delta_e_day: float) -> list[str]:
    out: list[str] = []

    if weekly_delta_w < -1:
        out.append(LOSS_PACE_STRONG)
    elif weekly_delta_w < -0.8:
        out.append(LOSS_PACE_MODERATE)

    if weekly_delta_w > 0.5:
        out.append(GAIN_PACE_STRONG)
    elif weekly_delta_w > 0.3:
        out.append(GAIN_PACE_MODERATE)

    if delta_e_day < -1000:
        out.append(DEFICIT_STRONG)
    elif delta_e_day < -800:
        out.append(DEFICIT_MODERATE)

    if delta_e_day > 600:
        out.append(SURPLUS_STRONG)
    elif delta_e_day > 400:
        out.append(SURPLUS_MODERATE)

    return out
