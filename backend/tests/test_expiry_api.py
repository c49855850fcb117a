from datetime import timedelta

from api.main import get_policy, utc_now
from common.expiry import ExpiryPolicy
from conftest import AUTH_HEADERS


def test_health_reports_ok(call_api):
    response = call_api("GET", "/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


def test_expiry_requires_bearer_token(call_api):
    body = {"due_time": "2026-01-05T08:00:00", "created_at": "2026-01-01T08:00:00"}
    response = call_api("POST", "/v1/expiry", json=body)
    assert response.status_code == 401

    response = call_api("POST", "/v1/expiry", json=body, headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


def test_expiry_returns_bracket_and_display(call_api):
    created_at = utc_now().replace(microsecond=0)
    due_time = created_at + timedelta(hours=60)
    body = {"task_id": "tsk_1", "due_time": due_time.isoformat(), "created_at": created_at.isoformat()}
    response = call_api("POST", "/v1/expiry", json=body, headers=AUTH_HEADERS)
    assert response.status_code == 200
    data = response.json()
    expected = created_at + timedelta(hours=16)
    assert data["task_id"] == "tsk_1"
    assert data["bracket"] == "short"
    assert data["gap_hours"] == 60
    assert data["expires_at"] == expected.isoformat()
    assert data["expires_at_display"] == expected.strftime("%Y-%m-%d %H:%M:%S")


def test_expiry_rejects_unparseable_timestamp(call_api):
    body = {"due_time": "soon", "created_at": "2026-01-01T08:00:00"}
    response = call_api("POST", "/v1/expiry", json=body, headers=AUTH_HEADERS)
    assert response.status_code == 422
    assert "Unparseable timestamp" in response.json()["detail"]


def test_expiry_rejects_mixed_timezone_awareness(call_api):
    body = {"due_time": "2026-01-05T08:00:00+00:00", "created_at": "2026-01-01T08:00:00"}
    response = call_api("POST", "/v1/expiry", json=body, headers=AUTH_HEADERS)
    assert response.status_code == 422


def test_expiry_uses_injected_policy(asgi_app, call_api):
    asgi_app.dependency_overrides[get_policy] = lambda: ExpiryPolicy(due_max_hours=120)
    body = {"due_time": "2026-01-05T12:00:00", "created_at": "2026-01-01T08:00:00"}
    response = call_api("POST", "/v1/expiry", json=body, headers=AUTH_HEADERS)
    assert response.status_code == 200
    data = response.json()
    assert data["bracket"] == "due"
    assert data["expires_at_display"] == "2026-01-05 12:00:00"
