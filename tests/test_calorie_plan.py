# tests/test_calorie_plan.py
from __future__ import annotations

import math
from datetime import date, timedelta

import pytest

from core.calorie_plan import (
    DEFICIT_STRONG,
    GAIN_PACE_STRONG,
    LOSS_PACE_MODERATE,
    LOSS_PACE_STRONG,
    SURPLUS_STRONG,
    PlanInput,
    calculate_bmr,
    compute_calorie_plan,
    horizon_days,
    round_half_up,
)
from core.models.settings import Gender

TODAY = date(2025, 3, 1)


def _input(**kw) -> PlanInput:
    base = dict(
        current_weight=80,
        goal_weight=70,
        target_date=TODAY + timedelta(days=70),
        gender=Gender.male,
        age=30,
        height=175,
        gym_session_hours=1,
        gym_sessions_per_week=3,
    )
    base.update(kw)
    return PlanInput(**base)


# ── BMR ──────────────────────────────────────────────────────────────
def test_bmr_mifflin_male():
    expected = 10 * 80 + 6.25 * 175 - 5 * 30 + 5   # 1748.75
    assert math.isclose(calculate_bmr(80, 175, 30, Gender.male), expected)


def test_bmr_mifflin_female():
    expected = 10 * 60 + 6.25 * 165 - 5 * 25 - 161
    assert math.isclose(calculate_bmr(60, 165, 25, "female"), expected)


# ── horizon ──────────────────────────────────────────────────────────
def test_horizon_floors_at_one_day():
    assert horizon_days(TODAY, TODAY) == 1
    assert horizon_days(TODAY - timedelta(days=3), TODAY) == 1
    assert horizon_days(TODAY + timedelta(days=30), TODAY) == 30


def test_past_target_dates_clamp_to_same_plan():
    yesterday = compute_calorie_plan(
        _input(target_date=TODAY - timedelta(days=1)), today=TODAY
    )
    ten_ago = compute_calorie_plan(
        _input(target_date=TODAY - timedelta(days=10)), today=TODAY
    )
    assert yesterday == ten_ago


# ── targets ──────────────────────────────────────────────────────────
def test_mild_cut_targets():
    # -2 kg over 100 days → ΔE = -154 kcal/day
    plan = compute_calorie_plan(
        _input(goal_weight=78, target_date=TODAY + timedelta(days=100)), today=TODAY
    )
    assert plan.bmr == 1749
    assert plan.maintenance_kcal == 2273            # 1748.75 × 1.3
    assert plan.rest_day_target_kcal == 2119        # 2273.375 − 154
    assert plan.gym_day_target_kcal == 2599         # + 6 × 80 × 1h
    assert math.isclose(plan.delta_e_day, -154)
    assert plan.warnings == []


def test_aggressive_cut_hits_safety_floor():
    plan = compute_calorie_plan(_input(), today=TODAY)
    floor = round_half_up(1748.75 * 1.1)
    assert plan.rest_day_target_kcal == floor
    assert plan.gym_day_target_kcal == floor


@pytest.mark.parametrize(
    "goal_weight, days, hours",
    [(60, 20, 0), (79, 200, 2), (90, 30, 1.5), (75, 1, 0.5), (40, 365, 0)],
)
def test_targets_never_below_floor(goal_weight, days, hours):
    plan = compute_calorie_plan(
        _input(goal_weight=goal_weight, target_date=TODAY + timedelta(days=days),
               gym_session_hours=hours),
        today=TODAY,
    )
    floor = round_half_up(calculate_bmr(80, 175, 30, Gender.male) * 1.1)
    assert plan.rest_day_target_kcal >= floor
    assert plan.gym_day_target_kcal >= floor


# ── warnings ─────────────────────────────────────────────────────────
def test_exactly_one_kg_per_week_is_moderate_pace():
    # 80 → 70 kg in 70 days: weekly change is exactly -1.0
    plan = compute_calorie_plan(_input(), today=TODAY)
    assert LOSS_PACE_STRONG not in plan.warnings
    assert LOSS_PACE_MODERATE in plan.warnings
    # ΔE/day = -1100 trips the deficit check on its own
    assert plan.warnings == [LOSS_PACE_MODERATE, DEFICIT_STRONG]


def test_fast_gain_warnings():
    plan = compute_calorie_plan(
        _input(current_weight=60, goal_weight=65, target_date=TODAY + timedelta(days=50),
               gender=Gender.female, age=25, height=165),
        today=TODAY,
    )
    # +0.7 kg/week, +770 kcal/day
    assert plan.warnings == [GAIN_PACE_STRONG, SURPLUS_STRONG]


# ── rounding ─────────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "value, expected",
    [(0.5, 1), (1.5, 2), (2.5, 3), (1742.5, 1743), (2.49, 2), (-0.5, 0), (-1.5, -1)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_half_kcal_bmr_rounds_up():
    # 174 cm → raw BMR 1742.5
    plan = compute_calorie_plan(
        _input(height=174, target_date=TODAY + timedelta(days=100)), today=TODAY
    )
    assert calculate_bmr(80, 174, 30, Gender.male) == 1742.5
    assert plan.bmr == 1743
    assert plan.maintenance_kcal == 2265            # 1742.5 × 1.3 = 2265.25
