"""
Weekly refresh of the cached kcal targets (scripts/recompute_plans.py).
"""
from __future__ import annotations

import asyncio
from datetime import timedelta

from core.calorie_plan import PlanInput, compute_calorie_plan
from scripts.recompute_plans import refresh
from services.kv_storage import KeyValueStorage


def test_refresh_updates_known_users(goal, today, capsys):
    store = KeyValueStorage()
    asyncio.run(store.save_settings("u1", goal))

    later = today + timedelta(days=30)
    assert asyncio.run(refresh(store, ["u1", "ghost"], today=later)) == 1

    updated = asyncio.run(store.get_settings("u1"))
    plan = compute_calorie_plan(PlanInput.from_goal(goal), today=later)
    assert updated.maintenance_kcal == plan.maintenance_kcal
    assert updated.gym_day_target_kcal == plan.gym_day_target_kcal
    assert updated.rest_day_target_kcal == plan.rest_day_target_kcal

    # baseline untouched
    assert updated.current_weight == goal.current_weight
    assert updated.baseline_date == goal.baseline_date

    out = capsys.readouterr().out
    assert "skip ghost" in out
    assert "✓ u1" in out
