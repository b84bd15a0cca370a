"""
core/simulation.py
────────────────────────────────────────────────────────────────────────
Day-by-day trajectory for the progress chart.  Three tracks per day:

  • planned    – straight line from baseline to goal over the goal horizon
  • actual     – logged measurements only (sparse)
  • simulated  – running body state driven by calories:
                   logged kcal  →  recent 7-day trend  →  plan target
                 reset to ground truth whenever a measurement exists

`build_simulation_data()` is a pure fold over settings + entries; the
only clock dependency is `today`, which callers may pass explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

import pandas as pd

from core.calorie_plan import KCAL_PER_KG, utc_today
from core.models.entry import DailyEntry
from core.models.settings import GoalSettings
from core.score import BASELINE_SCORE, clamp_score, current_state, score_for

_LOG = logging.getLogger(__name__)

TREND_WINDOW_DAYS = 7
FAT_SHARE_OF_LOSS = 0.8      # share of lost mass attributed to fat


@dataclass(frozen=True)
class ChartPoint:
    date: date
    simulated_score: float
    planned_score: float
    simulated_weight: float
    planned_weight: float
    simulated_body_fat: float
    planned_body_fat: float
    actual_score: float | None = None
    actual_weight: float | None = None
    actual_body_fat: float | None = None
    has_prediction: bool = False


# ──────────────────────────────────────────────────────────────────────
#  Helpers
# ──────────────────────────────────────────────────────────────────────
def recent_average_delta(entries: list[DailyEntry], maintenance: float) -> float | None:
    """
    Average `calories - maintenance` over the 7 days ending at the latest
    logged date.  Only returned when every one of those days is logged.
    """
    if not entries or maintenance <= 0:
        return None

    df = pd.DataFrame(
        {"date": [pd.Timestamp(e.date) for e in entries],
         "calories": [e.calories for e in entries]}
    )
    df = df.drop_duplicates(subset="date", keep="last")
    latest = df["date"].max()
    window = df[df["date"] >= latest - pd.Timedelta(days=TREND_WINDOW_DAYS - 1)]
    if len(window) < TREND_WINDOW_DAYS:
        return None
    return float((window["calories"] - maintenance).mean())


def is_gym_day(day_index: int, sessions_per_week: int) -> bool:
    """Coarse weekly spread: every round(7 / sessions)-th day is a gym day."""
    if sessions_per_week <= 0:
        return False
    step = max(1, round(7 / sessions_per_week))
    return day_index % step == 0


def planned_score(day_index: int, total_days: int) -> float:
    if total_days <= 0:
        return BASELINE_SCORE
    return BASELINE_SCORE + min(50.0, day_index / total_days * 50)


def _planned_value(start: float, goal: float, day_index: int, total_days: int) -> float:
    if total_days <= 0:
        return start
    return start + (goal - start) * min(1.0, day_index / total_days)


# ──────────────────────────────────────────────────────────────────────
#  Simulator
# ──────────────────────────────────────────────────────────────────────
def build_simulation_data(
    settings: GoalSettings,
    entries: Iterable[DailyEntry],
    horizon_days: int = 90,
    today: date | None = None,
) -> list[ChartPoint]:
    today = today or utc_today()
    ordered = sorted(entries, key=lambda e: e.date)
    by_date = {e.date: e for e in ordered}

    total_days = (settings.target_date - today).days
    maintenance = settings.maintenance_kcal

    avg_delta = recent_average_delta(ordered, maintenance)
    can_predict = avg_delta is not None

    measured = [e for e in ordered if e.has_measurement]
    # score of the most recent measurement overall, even outside the horizon
    last_measured_score = score_for(settings, *current_state(settings, measured))

    _LOG.debug(
        "simulating %d days (total_days=%d, entries=%d, trend=%s)",
        horizon_days, total_days, len(ordered), avg_delta,
    )

    weight = settings.current_weight
    body_fat = settings.current_body_fat
    last_measured_day = -1
    points: list[ChartPoint] = []

    for i in range(horizon_days):
        day = today + timedelta(days=i)
        entry = by_date.get(day)

        actual_weight: float | None = None
        actual_body_fat: float | None = None
        logged_kcal: float | None = None

        # 1) ground truth wins
        if entry is not None:
            logged_kcal = entry.calories
            if entry.weight is not None:
                actual_weight = weight = entry.weight
            if entry.body_fat is not None:
                actual_body_fat = body_fat = entry.body_fat
        if actual_weight is not None or actual_body_fat is not None:
            last_measured_day = i

        # 2) calories driving today's projection
        if is_gym_day(i, settings.gym_sessions_per_week):
            planned_kcal = settings.gym_day_target_kcal
        else:
            planned_kcal = settings.rest_day_target_kcal

        is_future = day > today
        if logged_kcal is not None:
            used_kcal = logged_kcal
        elif is_future and can_predict:
            used_kcal = maintenance + avg_delta
        else:
            used_kcal = planned_kcal

        # 3) energy balance → weight; losses shift composition toward lean
        # a logged 0 kcal day is treated as "nothing recorded": no weight change
        if maintenance > 0 and used_kcal:
            delta_w = (used_kcal - maintenance) / KCAL_PER_KG
            weight += delta_w
            if delta_w < 0:
                fat_mass = weight * body_fat / 100
                fat_mass = max(0.0, fat_mass - abs(delta_w) * FAT_SHARE_OF_LOSS)
                body_fat = fat_mass / weight * 100

        # 4) scores
        plan_score = planned_score(i, total_days)
        sim_score = score_for(settings, weight, body_fat)

        if not measured:
            sim_score = plan_score
        elif last_measured_day >= 0 and i > last_measured_day:
            remaining = total_days - i
            if remaining > 0:
                deviation = last_measured_score - planned_score(last_measured_day, total_days)
                sim_score += deviation / remaining * (i - last_measured_day)
        elif last_measured_day < 0:
            sim_score = plan_score

        actual_score: float | None = None
        if actual_weight is not None:
            actual_score = score_for(
                settings,
                actual_weight,
                actual_body_fat if actual_body_fat is not None else body_fat,
            )

        points.append(
            ChartPoint(
                date=day,
                simulated_score=clamp_score(sim_score),
                planned_score=clamp_score(plan_score),
                simulated_weight=weight,
                planned_weight=_planned_value(
                    settings.current_weight, settings.goal_weight, i, total_days
                ),
                simulated_body_fat=body_fat,
                planned_body_fat=_planned_value(
                    settings.current_body_fat, settings.goal_body_fat, i, total_days
                ),
                actual_score=actual_score,
                actual_weight=actual_weight,
                actual_body_fat=actual_body_fat,
                has_prediction=is_future and can_predict,
            )
        )

    return points
