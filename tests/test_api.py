"""Tests for the HTTP API."""

from datetime import timedelta

from fastapi.testclient import TestClient

from glucose_analytics.api.app import create_app
from glucose_analytics.domain.readings import GlucoseStatus
from tests.conftest import NOW, meal, reading


def test_health(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/health").json() == {"status": "ok"}


def test_window_options(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/analytics/windows")

    assert response.json() == {"options": [7, 14, 30, 90], "default": 7}


def test_analytics_returns_every_view(container) -> None:
    gateway = container.gateway
    lunch = meal(50, NOW - timedelta(days=1), name="lunch")
    gateway.meals = [lunch, meal(20, NOW - timedelta(hours=2), name="snack")]
    gateway.observations = [
        reading(160, lunch.consumed_at + timedelta(hours=1)),
        reading(260, lunch.consumed_at + timedelta(hours=2), GlucoseStatus.HIGH),
        reading(90, NOW - timedelta(days=20)),
    ]
    client = TestClient(create_app(container))

    response = client.get("/analytics", params={"days": 7})

    assert response.status_code == 200
    data = response.json()
    assert data["window_days"] == 7
    assert data["reading_count"] == 2
    assert [point["y"] for point in data["trend"]["points"]] == [160, 260]
    assert data["trend"]["points"][1]["category"] == "out_of_range"
    assert data["daily_averages"]["points"] == [
        {"x": "2024-05-19", "y": 210.0, "count": 2}
    ]
    assert data["correlation"]["points"] == [{"x": 50.0, "y": 210.0, "label": "lunch"}]
    assert [item["name"] for item in data["correlation"]["unmatched_meals"]] == [
        "snack"
    ]
    assert [bar["label"] for bar in data["time_in_range"]["points"]] == [
        "In Range",
        "High",
        "Low",
        "Critical",
    ]
    assert data["summary"]["health_score"] == 82


def test_analytics_upstream_failure_returns_generic_error(container) -> None:
    container.gateway.failing = {"summary"}
    client = TestClient(create_app(container))

    response = client.get("/analytics")

    assert response.status_code == 502
    assert response.json() == {"detail": "Failed to load analytics data"}


def test_analytics_rejects_non_positive_window(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/analytics", params={"days": 0}).status_code == 422


def test_refresh_then_current(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/analytics/current").status_code == 404
    refreshed = client.post("/analytics/refresh", params={"days": 14})
    current = client.get("/analytics/current")

    assert refreshed.status_code == 200
    assert refreshed.json()["token"] == 1
    assert current.json()["window_days"] == 14
    assert current.json()["status"] == "ok"


def test_failed_refresh_replaces_current(container) -> None:
    client = TestClient(create_app(container))
    client.post("/analytics/refresh", params={"days": 7})
    container.gateway.failing = {"meals"}

    response = client.post("/analytics/refresh", params={"days": 30})
    current = client.get("/analytics/current").json()

    assert response.status_code == 502
    assert current == {
        "token": 2,
        "status": "error",
        "window_days": 30,
        "error": "Failed to load analytics data",
    }


def test_analytics_accepts_very_large_window(container) -> None:
    container.gateway.observations = [
        reading(100, NOW - timedelta(days=3)),
        reading(120, NOW - timedelta(days=4000)),
    ]
    client = TestClient(create_app(container))

    response = client.get("/analytics", params={"days": 800000})

    assert response.status_code == 200
    assert response.json()["reading_count"] == 2


def test_analytics_flags_empty_and_insufficient_data(container) -> None:
    container.gateway.meals = [meal(40, NOW - timedelta(hours=5), name="toast")]
    client = TestClient(create_app(container))

    data = client.get("/analytics").json()

    assert data["trend"]["empty"] is True
    assert data["daily_averages"]["empty"] is True
    assert data["correlation"]["empty"] is True
    assert data["correlation"]["insufficient_data"] is True
    assert data["time_in_range"]["empty"] is False
