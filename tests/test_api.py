"""Tests for the calendar layout API."""

import sqlite3

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.routes import calendar as calendar_routes
from core import config
from scripts.init_db import create_database

API_KEY = "test-key"


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "db" / "calendar-api.db"
    create_database(path)
    monkeypatch.setattr(config, "DB_PATH", path)
    return path


@pytest.fixture
def client(db_path, monkeypatch):
    monkeypatch.setattr(config, "CALENDAR_API_KEY", API_KEY)
    return TestClient(app)


def post(client, path, body, key=API_KEY):
    return client.post(path, json=body, headers={"X-API-Key": key})


def event(event_id, start, end=None, title="Event", type=None):
    return {"id": event_id, "title": title, "start_date": start, "end_date": end, "type": type}


# =============================================================================
# HEALTH
# =============================================================================


def test_health_ok(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["log_store_available"] is True


def test_health_unhealthy_without_db(client, tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_PATH", tmp_path / "missing.db")
    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


# =============================================================================
# AUTH
# =============================================================================


def test_missing_api_key(client):
    response = client.post("/v1/calendar/layout", json={"year": 2025, "month": 11})
    assert response.status_code == 422


def test_invalid_api_key(client):
    response = post(client, "/v1/calendar/layout", {"year": 2025, "month": 11}, key="wrong")

    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "UNAUTHORIZED"


def test_api_key_not_configured(client, monkeypatch):
    monkeypatch.setattr(config, "CALENDAR_API_KEY", "")
    response = post(client, "/v1/calendar/layout", {"year": 2025, "month": 11})

    assert response.status_code == 500
    assert response.json()["detail"]["code"] == "INTERNAL_ERROR"


# =============================================================================
# LAYOUT
# =============================================================================


def test_layout_for_month(client):
    body = {
        "year": 2025,
        "month": 11,
        "events": [
            event("single", "2025-11-05"),
            event("multi", "2025-11-03", "2025-11-07"),
        ],
    }
    response = post(client, "/v1/calendar/layout", body)
    data = response.json()

    assert response.status_code == 200
    assert data["window"] == {"start": "2025-11-01", "end": "2025-11-30", "days": 30}
    assert data["lane_count"] == 2

    layouts = {layout["event_id"]: layout for layout in data["layouts"]}
    assert layouts["multi"]["lane"] == 0
    assert layouts["multi"]["occupied_days"] == [3, 4, 5, 6, 7]
    assert layouts["multi"]["multi_day"] is True
    assert layouts["single"]["lane"] == 1

    assert len(data["render_plans"]) == 30
    assert data["render_plans"][4]["visible_events"] == ["multi", "single"]


def test_layout_with_explicit_window(client):
    body = {
        "window_start": "2025-11-24",
        "window_end": "2025-11-30",
        "events": [event("a", "2025-11-20T10:00:00Z", "2025-11-25T10:00:00Z")],
    }
    data = post(client, "/v1/calendar/layout", body).json()

    assert data["layouts"][0]["occupied_days"] == [1, 2]
    assert data["layouts"][0]["continues_before"] is True
    assert [plan["day"] for plan in data["render_plans"]] == list(range(1, 8))


def test_layout_overflow(client):
    body = {
        "year": 2025,
        "month": 11,
        "max_visible": 2,
        "events": [event(f"e{i}", "2025-11-12") for i in range(4)],
    }
    plan = post(client, "/v1/calendar/layout", body).json()["render_plans"][11]

    assert plan["visible_events"] == ["e0", "e1"]
    assert plan["overflow_count"] == 2


def test_degenerate_window_returns_empty(client):
    body = {"window_start": "2025-11-10", "window_end": "2025-11-01", "events": [event("a", "2025-11-05")]}
    data = post(client, "/v1/calendar/layout", body).json()

    assert data["layouts"] == []
    assert data["render_plans"] == []
    assert data["lane_count"] == 0


@pytest.mark.parametrize(
    "body",
    [
        {"events": []},
        {"year": 2025, "month": 11, "window_start": "2025-11-01", "window_end": "2025-11-30"},
        {"year": 2025, "month": 13},
        {"year": 2025, "month": 11, "max_visible": -1},
        {"year": 2025, "month": 11, "events": [event("a", "2025-11-05", type="webinar")]},
    ],
)
def test_invalid_layout_requests(client, body):
    assert post(client, "/v1/calendar/layout", body).status_code == 422


def test_window_longer_than_limit_rejected(client, db_path):
    body = {"window_start": "0001-01-01", "window_end": "9999-12-31", "events": [event("a", "2025-11-05")]}
    response = post(client, "/v1/calendar/layout", body)

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "INVALID_REQUEST"

    conn = sqlite3.connect(db_path)
    try:
        row = conn.execute("SELECT status_code, error_code FROM api_requests").fetchone()
    finally:
        conn.close()
    assert row == (400, "INVALID_REQUEST")


def test_window_at_limit_accepted(client, monkeypatch):
    monkeypatch.setattr(calendar_routes, "MAX_WINDOW_DAYS", 7)
    body = {"window_start": "2025-11-01", "window_end": "2025-11-07"}
    assert post(client, "/v1/calendar/layout", body).status_code == 200

    body["window_end"] = "2025-11-08"
    assert post(client, "/v1/calendar/layout", body).status_code == 400


def test_too_many_events(client, monkeypatch):
    monkeypatch.setattr(calendar_routes, "MAX_EVENTS_PER_REQUEST", 2)
    body = {"year": 2025, "month": 11, "events": [event(f"e{i}", "2025-11-05") for i in range(3)]}
    response = post(client, "/v1/calendar/layout", body)

    assert response.status_code == 413
    assert response.json()["detail"]["code"] == "TOO_MANY_EVENTS"


def test_requests_are_logged(client, db_path):
    post(client, "/v1/calendar/layout", {"year": 2025, "month": 11, "events": [event("a", "2025-11-05")]})
    post(client, "/v1/calendar/layout", {"year": 2025, "month": 11}, key="wrong")

    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute(
            "SELECT endpoint, status_code, event_count, lane_count, window_start FROM api_requests ORDER BY id"
        ).fetchall()
    finally:
        conn.close()

    # the rejected request never reaches the endpoint
    assert rows == [("/v1/calendar/layout", 200, 1, 1, "2025-11-01")]


def test_logging_failure_does_not_fail_request(client, tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_PATH", tmp_path / "no-tables.db")
    response = post(client, "/v1/calendar/layout", {"year": 2025, "month": 11})
    assert response.status_code == 200


# =============================================================================
# MONTH VIEW
# =============================================================================


def test_month_view(client):
    body = {
        "year": 2025,
        "month": 11,
        "today": "2025-11-10",
        "events": [
            event("sale", "2025-11-28", "2025-12-01", title="Black Friday"),
            event("old", "2025-11-02", title="Kickoff"),
            event("launch", "2025-11-12T18:00:00Z", title="App launch"),
        ],
    }
    response = post(client, "/v1/calendar/month", body)
    data = response.json()

    assert response.status_code == 200
    assert data["grid"][:7] == [None] * 6 + [1]
    assert data["layouts"][0]["continues_after"] is True
    assert [item["id"] for item in data["upcoming"]] == ["launch", "sale"]
    assert data["upcoming"][0]["type"] == "launch"
    assert data["upcoming"][0]["start_date"] == "2025-11-12"
    assert data["upcoming"][1]["color"] == "#ef4444"
    assert data["today"] == 10
    assert data["previous_month"] == {"year": 2025, "month": 10}
    assert data["next_month"] == {"year": 2025, "month": 12}
