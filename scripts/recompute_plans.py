"""
scripts/recompute_plans.py
────────────────────────────────────────────────────────────────────────
Refresh the cached kcal targets stored with each user's goal.  The
targets depend on the days left until the target date, so running this
weekly (cron / Cloud Scheduler) keeps them in step with the calendar:

    python -m scripts.recompute_plans --user alice --user bob

The baseline weight / body-fat are left untouched.
"""
from __future__ import annotations

import asyncio
from argparse import ArgumentParser
from datetime import date

from dotenv import load_dotenv
load_dotenv()

from config import settings
from core.calorie_plan import PlanInput, compute_calorie_plan, utc_today
from services.storage import DataStorage, build_storage


async def _refresh_user(storage: DataStorage, user_id: str, today: date) -> bool:
    goal = await storage.get_settings(user_id)
    if goal is None:
        print(f"· skip {user_id} – no goal saved")
        return False

    plan = compute_calorie_plan(PlanInput.from_goal(goal), today=today)
    await storage.save_settings(user_id, goal.with_plan(plan))
    print(
        f"✓ {user_id}: maintenance {plan.maintenance_kcal} · "
        f"gym {plan.gym_day_target_kcal} · rest {plan.rest_day_target_kcal}"
    )
    for w in plan.warnings:
        print(f"  ! {w}")
    return True


async def refresh(storage: DataStorage, user_ids: list[str], today: date | None = None) -> int:
    """Recompute every listed user; returns how many were updated."""
    today = today or utc_today()
    updated = 0
    for uid in user_ids:
        if await _refresh_user(storage, uid, today):
            updated += 1
    return updated


async def _async_main() -> None:
    ap = ArgumentParser()
    ap.add_argument("--user", action="append", required=True, help="user id (repeatable)")
    args = ap.parse_args()

    storage = build_storage(settings)
    await storage.startup()
    try:
        await refresh(storage, args.user)
    finally:
        await storage.shutdown()


if __name__ == "__main__":  # pragma: no cover
    asyncio.run(_async_main())
