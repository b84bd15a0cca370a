from __future__ import annotations

import math
from datetime import timedelta

import pytest

from core.models.entry import DailyEntry
from core.score import calculate_progress_rate, calculate_score, compare_with_plan

BASE = dict(goal_weight=70, goal_body_fat=18, initial_weight=80, initial_body_fat=25)


# ── anchoring ────────────────────────────────────────────────────────
def test_baseline_scores_fifty():
    assert calculate_score(80, 25, **BASE) == 50


def test_goal_scores_hundred():
    assert calculate_score(70, 18, **BASE) == 100


def test_halfway_scores_seventy_five():
    assert math.isclose(calculate_score(75, 21.5, **BASE), 75)


def test_body_fat_weighs_more_than_weight():
    only_weight = calculate_score(70, 25, **BASE)      # (100 + 1.5·50) / 2.5
    only_fat = calculate_score(80, 18, **BASE)         # (50 + 1.5·100) / 2.5
    assert math.isclose(only_weight, 70)
    assert math.isclose(only_fat, 80)


def test_goal_equal_to_baseline_pins_axis_at_fifty():
    # weight goal unchanged → weight axis stays 50 whatever the weight
    s = calculate_score(95, 18, goal_weight=80, goal_body_fat=18,
                        initial_weight=80, initial_body_fat=25)
    assert math.isclose(s, (50 + 1.5 * 100) / 2.5)
    assert calculate_score(80, 25, 80, 25, 80, 25) == 50


# ── clamping ─────────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "weight, body_fat",
    [(90, 32), (120, 45), (60, 10), (40, 2), (80, 0), (200, 60)],
)
def test_score_is_clamped(weight, body_fat):
    assert 0 <= calculate_score(weight, body_fat, **BASE) <= 100


def test_full_regression_floors_at_zero():
    assert calculate_score(90, 32, **BASE) == 0
    assert calculate_score(100, 40, **BASE) == 0


def test_progress_rate_matches_score():
    assert calculate_progress_rate(76, 22, **BASE) == calculate_score(76, 22, **BASE)


# ── compare_with_plan ────────────────────────────────────────────────
def _entry(day, **kw):
    return DailyEntry(id=str(day), date=day, calories=2000, **kw)


def test_fresh_goal_is_on_schedule(goal, today):
    cmp = compare_with_plan(goal, [], today=today)
    assert cmp.planned_progress == 50
    assert cmp.actual_progress == 50
    assert cmp.is_on_schedule
    assert cmp.days_behind is None


def test_behind_schedule_counts_days(goal, today):
    # halfway through a 90-day plan but still at the baseline
    goal = goal.model_copy(update={
        "baseline_date": today - timedelta(days=45),
        "target_date": today + timedelta(days=45),
    })
    entries = [_entry(today - timedelta(days=1), weight=80, body_fat=25)]

    cmp = compare_with_plan(goal, entries, today=today)
    assert cmp.planned_progress == 75
    assert cmp.actual_progress == 50
    assert not cmp.is_on_schedule
    assert cmp.days_behind == 45


def test_on_track_progress(goal, today):
    goal = goal.model_copy(update={
        "baseline_date": today - timedelta(days=45),
        "target_date": today + timedelta(days=45),
    })
    entries = [_entry(today, weight=75, body_fat=21.5)]
    cmp = compare_with_plan(goal, entries, today=today)
    assert cmp.is_on_schedule
    assert cmp.days_behind is None


def test_latest_entry_missing_weight_falls_back_to_baseline(goal, today):
    entries = [
        _entry(today - timedelta(days=2), weight=75, body_fat=21.5),
        _entry(today - timedelta(days=1), body_fat=21.5),
        _entry(today),                                  # calories only
    ]
    cmp = compare_with_plan(goal, entries, today=today)
    # weight axis back at baseline (50), body-fat axis at 75
    assert math.isclose(cmp.actual_progress, (50 + 1.5 * 75) / 2.5)


def test_past_target_keeps_plan_at_fifty(goal, today):
    goal = goal.model_copy(update={
        "baseline_date": today - timedelta(days=10),
        "target_date": today - timedelta(days=20),
    })
    cmp = compare_with_plan(goal, [_entry(today, weight=90, body_fat=32)], today=today)
    assert cmp.planned_progress == 50
    assert not cmp.is_on_schedule
    assert cmp.days_behind is None
