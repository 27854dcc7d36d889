from datetime import date, timedelta
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from shiftbook.core.database import get_db
from shiftbook.main import app
from shiftbook.routers.auth import create_access_token

SOON = (date.today() + timedelta(days=3)).isoformat()
MORNING = {"name": "Morning", "start_time": "06:00", "end_time": "14:00", "shift_type": "morning"}


@pytest.fixture
def admin_user(make_profile):
    return make_profile(role="admin", email="admin@example.com", full_name="Ada Admin")

@pytest.fixture
def worker_a(make_profile):
    return make_profile(role=None, email="a@example.com", full_name="Worker A")

@pytest.fixture
def worker_b(make_profile):
    return make_profile(role="worker", email="b@example.com", full_name="Worker B")


@pytest.fixture
def morning(client, auth_headers, admin_user):
    res = client.post("/shifts", json=MORNING, headers=auth_headers(admin_user))
    assert res.status_code == 201
    return res.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_requests_without_token_are_rejected(client):
    assert client.get("/shifts").status_code == 401


def test_bad_tokens_are_rejected(client, worker_a):
    res = client.get("/shifts", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401

    stranger = create_access_token({"sub": str(uuid4())})
    res = client.get("/shifts", headers={"Authorization": f"Bearer {stranger}"})
    assert res.status_code == 401


def test_me_resolves_missing_role_to_worker(client, auth_headers, worker_a):
    res = client.get("/profiles/me", headers=auth_headers(worker_a))
    assert res.status_code == 200
    assert res.json()["role"] == "worker"
    assert res.json()["email"] == "a@example.com"


def test_admin_creates_template(client, morning):
    assert morning["duration_hours"] == 8
    assert morning["shift_type"] == "morning"
    assert morning["is_active"] is True


def test_worker_gets_access_denied_for_admin_actions(client, auth_headers, worker_a, morning):
    res = client.post("/shifts", json=MORNING, headers=auth_headers(worker_a))
    assert res.status_code == 403
    assert res.json()["error"] == "access_denied"

    res = client.delete(f"/shifts/{morning['shift_template_id']}", headers=auth_headers(worker_a))
    assert res.status_code == 403

    res = client.get("/dashboard/counts", headers=auth_headers(worker_a))
    assert res.status_code == 403


def test_validation_errors_are_typed(client, auth_headers, admin_user):
    res = client.post(
        "/shifts",
        json={"name": "Flat", "start_time": "09:00", "end_time": "09:00"},
        headers=auth_headers(admin_user),
    )
    assert res.status_code == 422
    assert res.json() == {
        "error": "validation_error",
        "detail": "start_time and end_time must differ",
        "retryable": False,
    }


def test_update_toggle_and_list(client, auth_headers, admin_user, worker_a, morning):
    shift_id = morning["shift_template_id"]
    headers = auth_headers(admin_user)

    res = client.patch(f"/shifts/{shift_id}", json={"start_time": "22:00", "end_time": "06:00"}, headers=headers)
    assert res.status_code == 200
    assert res.json()["duration_hours"] == 8

    res = client.put(f"/shifts/{shift_id}/active", json={"is_active": False}, headers=headers)
    assert res.json()["is_active"] is False

    assert client.get("/shifts", headers=auth_headers(worker_a)).json() == []
    everything = client.get("/shifts", params={"active_only": False}, headers=headers).json()
    assert [s["shift_template_id"] for s in everything] == [shift_id]

    res = client.patch(f"/shifts/{uuid4()}", json={"name": "x"}, headers=headers)
    assert res.status_code == 404
    assert res.json()["error"] == "not_found"


def test_booking_flow(client, auth_headers, admin_user, worker_a, worker_b, morning):
    body = {"shift_template_id": morning["shift_template_id"], "shift_date": SOON}

    res = client.post("/bookings", json=body, headers=auth_headers(worker_a))
    assert res.status_code == 201
    booking = res.json()
    assert booking["status"] == "booked"
    assert booking["shift"]["name"] == "Morning"

    res = client.post("/bookings", json=body, headers=auth_headers(worker_b))
    assert res.status_code == 409
    assert res.json()["error"] == "conflict"

    res = client.delete(f"/bookings/{booking['booking_id']}", headers=auth_headers(worker_b))
    assert res.status_code == 403

    res = client.delete(f"/bookings/{booking['booking_id']}", headers=auth_headers(worker_a))
    assert res.status_code == 200
    assert res.json()["status"] == "cancelled"

    res = client.post("/bookings", json=body, headers=auth_headers(worker_b))
    assert res.status_code == 201

    mine = client.get("/bookings", params={"when": "upcoming"}, headers=auth_headers(worker_b)).json()
    assert [b["user_id"] for b in mine] == [str(worker_b.user_id)]
    assert client.get("/bookings", params={"when": "past"}, headers=auth_headers(worker_b)).json() == []

    everyone = client.get("/bookings", params={"include_cancelled": True}, headers=auth_headers(admin_user)).json()
    assert sorted(b["user_email"] for b in everyone) == ["a@example.com", "b@example.com"]


def test_past_dates_cannot_be_booked(client, auth_headers, worker_a, morning):
    body = {
        "shift_template_id": morning["shift_template_id"],
        "shift_date": (date.today() - timedelta(days=1)).isoformat(),
    }
    res = client.post("/bookings", json=body, headers=auth_headers(worker_a))
    assert res.status_code == 422
    assert res.json()["error"] == "invalid_date"


def test_workers_cannot_list_other_peoples_bookings(client, auth_headers, worker_a, worker_b):
    res = client.get("/bookings", params={"user_id": str(worker_b.user_id)}, headers=auth_headers(worker_a))
    assert res.status_code == 403


def test_delete_template_removes_its_bookings(client, auth_headers, admin_user, worker_a, morning):
    body = {"shift_template_id": morning["shift_template_id"], "shift_date": SOON}
    assert client.post("/bookings", json=body, headers=auth_headers(worker_a)).status_code == 201

    res = client.delete(f"/shifts/{morning['shift_template_id']}", headers=auth_headers(admin_user))
    assert res.status_code == 200
    assert res.json()["bookings_removed"] == 1

    assert client.get("/bookings", headers=auth_headers(worker_a)).json() == []


def test_dashboard_counts(client, auth_headers, admin_user, worker_a, morning):
    body = {"shift_template_id": morning["shift_template_id"], "shift_date": SOON}
    client.post("/bookings", json=body, headers=auth_headers(worker_a))

    counts = client.get("/dashboard/counts", headers=auth_headers(admin_user)).json()
    assert counts["total_templates"] == 1
    assert counts["active_templates"] == 1
    assert counts["total_bookings"] == 1
    assert counts["recent_bookings"] == 0  # booked for the future


def test_super_admin_changes_roles(client, auth_headers, make_profile, worker_a, admin_user):
    boss = make_profile(role="super_admin", email="boss@example.com")

    res = client.put(f"/profiles/{worker_a.user_id}/role", json={"role": "admin"}, headers=auth_headers(admin_user))
    assert res.status_code == 403

    res = client.put(f"/profiles/{worker_a.user_id}/role", json={"role": "admin"}, headers=auth_headers(boss))
    assert res.status_code == 200
    assert res.json()["role"] == "admin"

    # the new role applies on the next request
    assert client.get("/dashboard/counts", headers=auth_headers(worker_a)).status_code == 200


def test_malformed_requests_get_the_typed_error_shape(client, auth_headers, admin_user, worker_a):
    bad_type = dict(MORNING, shift_type="graveyard")
    res = client.post("/shifts", json=bad_type, headers=auth_headers(admin_user))
    assert res.status_code == 422
    body = res.json()
    assert body["error"] == "validation_error"
    assert body["retryable"] is False
    assert "shift_type" in body["detail"]

    res = client.post("/shifts", json=dict(MORNING, start_time="25:00"), headers=auth_headers(admin_user))
    assert res.status_code == 422
    assert res.json()["error"] == "validation_error"

    res = client.delete("/bookings/not-a-uuid", headers=auth_headers(worker_a))
    assert res.status_code == 422
    assert res.json()["error"] == "validation_error"

    res = client.get("/bookings", params={"when": "someday"}, headers=auth_headers(worker_a))
    assert res.status_code == 422
    assert res.json()["error"] == "validation_error"


def test_store_outage_while_resolving_caller_is_retryable(client, auth_headers, session_factory, worker_a):
    def _unreachable(*args, **kwargs):
        raise OperationalError("SELECT profiles", {}, Exception("server closed the connection"))

    def _get_db():
        session = session_factory()
        session.get = _unreachable
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    res = client.get("/shifts", headers=auth_headers(worker_a))

    assert res.status_code == 503
    assert res.json() == {
        "error": "transient_store_error",
        "detail": "Store unavailable while trying to resolve caller",
        "retryable": True,
    }
