from __future__ import annotations

import pytest

from attendance_tracker.core.enums import Role
from attendance_tracker.core.exceptions import ServiceUnavailableError


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_token(client, admin):
    resp = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "admin123"})
    assert resp.status_code == 200
    return resp.get_json()["token"]


def test_full_registration_scenario(client, admin_token, make_submission):
    resp = client.post("/api/auth/register", json=make_submission())
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "pending"
    request_id = body["requestId"]

    resp = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert resp.status_code == 401
    assert "pending" in resp.get_json()["error"]

    listed = client.get("/api/auth/registration-requests?status=pending", headers=_auth(admin_token)).get_json()
    assert [r["id"] for r in listed["requests"]] == [request_id]
    assert "password_hash" not in listed["requests"][0]

    resp = client.post(f"/api/auth/approve-registration/{request_id}", headers=_auth(admin_token))
    assert resp.status_code == 200
    assert resp.get_json()["user"]["employeeId"] == "EMP0001"

    resp = client.post(f"/api/auth/approve-registration/{request_id}", headers=_auth(admin_token))
    assert resp.status_code == 400

    resp = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert resp.status_code == 200
    login = resp.get_json()
    assert "password" not in login["user"] and "password_hash" not in login["user"]

    profile = client.get("/api/auth/profile", headers=_auth(login["token"]))
    assert profile.status_code == 200
    assert profile.get_json()["email"] == "a@x.com"

    wrong = client.post("/api/auth/login", json={"email": "a@x.com", "password": "wrongpw"})
    unknown = client.post("/api/auth/login", json={"email": "nobody@x.com", "password": "wrongpw"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.get_json() == unknown.get_json()


def test_register_validation_errors(client, make_submission):
    resp = client.post("/api/auth/register", json=make_submission(adminCode="nope"))
    assert resp.status_code == 400
    assert "admin verification code" in resp.get_json()["error"]

    resp = client.post("/api/auth/register", json={"email": "a@x.com"})
    assert resp.status_code == 400

    resp = client.post("/api/auth/register", data="not json", content_type="text/plain")
    assert resp.status_code == 400


def test_register_rejects_non_string_role(client, make_submission):
    resp = client.post("/api/auth/register", json=make_submission(role=5))
    assert resp.status_code == 400
    assert "Role" in resp.get_json()["error"]


@pytest.mark.parametrize(
    "path",
    ["/api/auth/register", "/api/auth/login", "/api/auth/forgot-password", "/api/auth/reset-password"],
)
def test_json_body_must_be_an_object(client, path):
    resp = client.post(path, json=["a@x.com", "secret1"])
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Request body must be a JSON object"}


def test_reject_with_non_object_body_is_400(client, admin_token, make_submission):
    request_id = client.post("/api/auth/register", json=make_submission()).get_json()["requestId"]
    resp = client.post(
        f"/api/auth/reject-registration/{request_id}", json=["spam"], headers=_auth(admin_token)
    )
    assert resp.status_code == 400


def test_register_survives_notification_timeout(client, notifications, monkeypatch, make_submission):
    def timed_out(**kwargs):
        raise ServiceUnavailableError("Database operation timed out. Please try again later.")

    monkeypatch.setattr(notifications, "create", timed_out)
    resp = client.post("/api/auth/register", json=make_submission())
    assert resp.status_code == 201
    assert resp.get_json()["status"] == "pending"


def test_duplicate_registration_is_rejected(client, make_submission):
    assert client.post("/api/auth/register", json=make_submission()).status_code == 201
    resp = client.post("/api/auth/register", json=make_submission())
    assert resp.status_code == 400
    assert "pending" in resp.get_json()["error"]


def test_reject_then_login_reports_rejection(client, admin_token, make_submission):
    request_id = client.post("/api/auth/register", json=make_submission()).get_json()["requestId"]

    resp = client.post(
        f"/api/auth/reject-registration/{request_id}",
        json={"reason": "Not an employee"},
        headers=_auth(admin_token),
    )
    assert resp.status_code == 200
    assert resp.get_json()["reason"] == "Not an employee"

    resp = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert resp.status_code == 401
    assert "rejected" in resp.get_json()["error"]


def test_decision_on_unknown_request_is_404(client, admin_token):
    assert client.post("/api/auth/approve-registration/999", headers=_auth(admin_token)).status_code == 404
    assert client.post("/api/auth/reject-registration/999", headers=_auth(admin_token)).status_code == 404


def test_admin_routes_require_token_and_role(client, users):
    assert client.get("/api/auth/registration-stats").status_code == 401
    assert client.get("/api/auth/registration-stats", headers=_auth("garbage")).status_code == 401

    users.add(email="emp@x.com", password="secret1", role=Role.EMPLOYEE)
    token = client.post("/api/auth/login", json={"email": "emp@x.com", "password": "secret1"}).get_json()["token"]
    assert client.get("/api/auth/registration-stats", headers=_auth(token)).status_code == 403


def test_hr_can_review(client, users, make_submission):
    users.add(email="hr@x.com", password="secret1", role=Role.HR, employee_id="HR0001")
    token = client.post("/api/auth/login", json={"email": "hr@x.com", "password": "secret1"}).get_json()["token"]
    client.post("/api/auth/register", json=make_submission())

    stats = client.get("/api/auth/registration-stats", headers=_auth(token))
    assert stats.status_code == 200
    assert stats.get_json() == {"pending": 1, "approved": 0, "rejected": 0, "total": 1}


def test_deactivated_user_token_is_refused_for_admin_routes(client, admin, admin_token, users):
    users.set_active(admin.user_id, is_active=False)
    assert client.get("/api/auth/registration-requests", headers=_auth(admin_token)).status_code == 403


def test_registration_requests_validates_query(client, admin_token):
    assert client.get("/api/auth/registration-requests?status=bogus", headers=_auth(admin_token)).status_code == 400
    assert client.get("/api/auth/registration-requests?page=0", headers=_auth(admin_token)).status_code == 400

    body = client.get("/api/auth/registration-requests?limit=1000", headers=_auth(admin_token)).get_json()
    assert body == {"requests": [], "totalPages": 0, "currentPage": 1, "total": 0}


def test_forgot_and_reset_password_flow(client, users, mailer):
    user = users.add(email="alice@x.com", password="secret1")

    unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@x.com"})
    known = client.post("/api/auth/forgot-password", json={"email": "alice@x.com"})
    assert unknown.status_code == known.status_code == 200
    assert unknown.get_json() == known.get_json()

    token = users.get_by_id(user.user_id).reset_token
    resp = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "brand-new"})
    assert resp.status_code == 200

    again = client.post("/api/auth/reset-password", json={"token": token, "newPassword": "brand-new"})
    assert again.status_code == 400

    assert client.post("/api/auth/login", json={"email": "alice@x.com", "password": "brand-new"}).status_code == 200


def test_forgot_password_without_mail_configuration(client, mailer):
    mailer.configured = False
    resp = client.post("/api/auth/forgot-password", json={"email": "ghost@x.com"})
    assert resp.status_code == 500
    assert client.post("/api/auth/forgot-password", json={}).status_code == 400


def test_profile_for_missing_user_is_404(client, tokens):
    resp = client.get("/api/auth/profile", headers=_auth(tokens.issue(4242)))
    assert resp.status_code == 404


def test_notifications_endpoints(client, admin_token, make_submission):
    client.post("/api/auth/register", json=make_submission())

    feed = client.get("/api/auth/notifications", headers=_auth(admin_token))
    assert feed.status_code == 200
    items = feed.get_json()
    assert len(items) == 1 and items[0]["type"] == "registration_request"

    nid = items[0]["id"]
    assert client.put(f"/api/auth/notifications/{nid}/read", headers=_auth(admin_token)).status_code == 200
    assert client.get("/api/auth/notifications", headers=_auth(admin_token)).get_json() == []
    assert client.put("/api/auth/notifications/999/read", headers=_auth(admin_token)).status_code == 404


def test_health_reflects_database_readiness(client, conn):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["database"] == "connected"

    conn.ready = False
    resp = client.get("/api/health")
    assert resp.status_code == 503
    assert resp.get_json()["database"] == "disconnected"


def test_unknown_route_returns_json_404(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["path"] == "/api/nope"


def test_unexpected_errors_are_hidden(client, container, monkeypatch):
    def boom(payload):
        raise RuntimeError("db password is hunter2")

    monkeypatch.setattr(container.auth_service, "login", boom)
    resp = client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}
