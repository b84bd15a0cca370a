"""
core/score.py
────────────────────────────────────────────────────────────────────────
Progress score on a 0–100 scale:

  baseline (state when the goal was set) → 50
  goal                                   → 100
  regression past the baseline           → below 50, floored at 0

Body-fat counts 1.5× as much as weight.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from core.calorie_plan import utc_today
from core.models.entry import DailyEntry
from core.models.settings import GoalSettings

BASELINE_SCORE = 50.0
BODY_FAT_WEIGHT = 1.5
ON_SCHEDULE_TOLERANCE = 2.5


def clamp_score(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def _axis_score(value: float, goal: float, initial: float) -> float:
    if initial == goal:
        return BASELINE_SCORE
    return BASELINE_SCORE + 50 * (initial - value) / (initial - goal)


def calculate_score(
    weight: float,
    body_fat: float,
    goal_weight: float,
    goal_body_fat: float,
    initial_weight: float,
    initial_body_fat: float,
) -> float:
    weight_score = _axis_score(weight, goal_weight, initial_weight)
    body_fat_score = _axis_score(body_fat, goal_body_fat, initial_body_fat)
    total = (weight_score + BODY_FAT_WEIGHT * body_fat_score) / (1 + BODY_FAT_WEIGHT)
    return clamp_score(total)


# same metric, named for the summary widgets
calculate_progress_rate = calculate_score


def score_for(settings: GoalSettings, weight: float, body_fat: float) -> float:
    """Score a body state against the goal and baseline stored in `settings`."""
    return calculate_score(
        weight,
        body_fat,
        settings.goal_weight,
        settings.goal_body_fat,
        settings.current_weight,
        settings.current_body_fat,
    )


def latest_measurement(entries: Iterable[DailyEntry]) -> DailyEntry | None:
    measured = [e for e in entries if e.has_measurement]
    if not measured:
        return None
    return max(measured, key=lambda e: e.date)


def current_state(settings: GoalSettings, entries: Iterable[DailyEntry]) -> tuple[float, float]:
    """
    (weight, body_fat) from the latest measured entry.  A field missing on
    that entry falls back to the baseline, not to an older entry.
    """
    latest = latest_measurement(entries)
    if latest is None:
        return settings.current_weight, settings.current_body_fat
    weight = latest.weight if latest.weight is not None else settings.current_weight
    body_fat = latest.body_fat if latest.body_fat is not None else settings.current_body_fat
    return weight, body_fat


# ──────────────────────────────────────────────────────────────────────
#  Plan comparison
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class ProgressComparison:
    actual_progress: float
    planned_progress: float
    is_on_schedule: bool
    days_behind: int | None = None


def compare_with_plan(
    settings: GoalSettings,
    entries: Iterable[DailyEntry],
    today: date | None = None,
) -> ProgressComparison:
    """
    Latest measured state vs. a straight time-elapsed plan line running
    from `baseline_date` (50) to `target_date` (100).
    """
    today = today or utc_today()
    start = settings.baseline_date or today
    total_days = (settings.target_date - start).days
    elapsed = max(0, (today - start).days)

    if total_days > 0:
        planned = BASELINE_SCORE + elapsed / total_days * 50
    else:
        planned = BASELINE_SCORE

    weight, body_fat = current_state(settings, entries)
    actual = calculate_progress_rate(
        weight,
        body_fat,
        settings.goal_weight,
        settings.goal_body_fat,
        settings.current_weight,
        settings.current_body_fat,
    )

    on_schedule = actual >= planned - ON_SCHEDULE_TOLERANCE
    days_behind = None
    if not on_schedule and total_days > 0:
        days_behind = math.ceil((planned - actual) / 50 * total_days)

    return ProgressComparison(
        actual_progress=actual,
        planned_progress=planned,
        is_on_schedule=on_schedule,
        days_behind=days_behind,
    )
