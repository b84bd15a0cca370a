from __future__ import annotations

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from api.v1.deps import get_today
from core.models.settings import Gender, GoalSettings
from main import create_app
from services.kv_storage import KeyValueStorage

TODAY = date(2025, 3, 1)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def goal() -> GoalSettings:
    """80 kg / 25 % → 70 kg / 18 % over 90 days, plan targets already cached."""
    return GoalSettings(
        current_weight=80,
        current_body_fat=25,
        goal_weight=70,
        goal_body_fat=18,
        target_date=TODAY + timedelta(days=90),
        gender=Gender.male,
        age=30,
        height=175,
        gym_session_hours=1,
        gym_sessions_per_week=3,
        maintenance_kcal=2300,
        gym_day_target_kcal=2200,
        rest_day_target_kcal=1800,
    )


@pytest.fixture
def storage() -> KeyValueStorage:
    return KeyValueStorage()


@pytest.fixture
def client(storage):
    """App wired to an in-memory store with "today" pinned to TODAY."""
    app = create_app(storage)
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth(client):
    """Bearer header for a freshly signed-up `alice@example.com`."""
    r = client.post(
        "/api/v1/session/signup",
        json={"email": "alice@example.com", "password": "secret123"},
    )
    assert r.status_code == 201
    return {"Authorization": f"Bearer {r.json()['access_token']}"}
