from __future__ import annotations

from datetime import datetime, timedelta, timezone
import smtplib

import pytest
from sqlalchemy import select

from leave_desk.core.security import hash_reset_token, verify_password
from leave_desk.models import MailLog, User
from leave_desk.services import auth_service, mail_service

from conftest import ADMIN_EMAIL, PASSWORD


def signup_payload(**overrides):
    payload = {
        "fullName": "Ravi Kumar",
        "email": "ravi@college.edu",
        "phoneNo": "9123456780",
        "age": 35,
        "gender": "male",
        "department": "cse",
        "subjects": ["Data Structures", "Algorithms"],
        "password": "Secur3!pass",
    }
    payload.update(overrides)
    return payload


def test_signup_stores_only_a_hash_and_sets_cookie(client, db):
    res = client.post("/signup", json=signup_payload())

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["user"]["email"] == "ravi@college.edu"
    assert body["user"]["fullName"] == "Ravi Kumar"
    assert "password" not in body["user"] and "passwordHash" not in body["user"]
    assert "token" in res.cookies

    user = db.scalar(select(User).where(User.email == "ravi@college.edu"))
    assert user.password_hash != "Secur3!pass"
    assert verify_password("Secur3!pass", user.password_hash)


def test_signup_missing_field_reports_it(client):
    payload = signup_payload()
    del payload["fullName"]

    res = client.post("/signup", json=payload)

    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "fullName is required"}


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"password": "weakpass"}, "Password must be strong"),
        ({"phoneNo": "12345"}, "Invalid phone number format"),
        ({"age": 16}, "Age must be between 18 and 100"),
        ({"gender": "unknown"}, "Gender must be male, female, or others"),
        ({"subjects": []}, "At least one subject must be provided"),
        ({"fullName": "Al"}, "Full name must be 3-50 characters long"),
        ({"email": "not-an-email"}, "Invalid email format"),
        ({"department": "mech"}, "Department must be one of"),
    ],
)
def test_signup_rejects_malformed_fields(client, overrides, message):
    res = client.post("/signup", json=signup_payload(**overrides))

    assert res.status_code == 400
    assert res.json()["success"] is False
    assert message in res.json()["message"]


def test_signup_duplicate_email_conflicts(client):
    assert client.post("/signup", json=signup_payload()).status_code == 201
    client.cookies.clear()

    res = client.post("/signup", json=signup_payload(email="RAVI@college.edu"))

    assert res.status_code == 409
    assert res.json()["message"] == "Email already registered"


def test_wrong_password_fails_the_same_way_for_known_and_unknown_email(client, faculty):
    known = client.post("/login", json={"email": faculty.email, "password": "Wr0ng!pass"})
    unknown = client.post("/login", json={"email": "ghost@college.edu", "password": "Wr0ng!pass"})

    assert known.status_code == unknown.status_code == 401
    assert known.json() == unknown.json() == {"success": False, "message": "Invalid credentials"}


def test_login_sets_cookie_and_returns_token(client, faculty):
    res = client.post("/login", json={"email": faculty.email, "password": PASSWORD})

    assert res.status_code == 200
    body = res.json()
    assert body["isAdmin"] is False
    assert body["token"]
    assert res.cookies.get("token") == body["token"]


def test_admin_login_requires_admin_email(client, faculty, admin):
    refused = client.post("/login", json={"email": faculty.email, "password": PASSWORD, "role": "admin"})
    assert refused.status_code == 403
    assert refused.json()["message"] == "You are not authorized as admin"
    assert "token" not in refused.cookies

    accepted = client.post("/login", json={"email": ADMIN_EMAIL, "password": PASSWORD, "role": "admin"})
    assert accepted.status_code == 200
    assert accepted.json()["isAdmin"] is True


def test_admin_role_check_runs_after_credentials(client, faculty):
    res = client.post("/login", json={"email": faculty.email, "password": "Wr0ng!pass", "role": "admin"})

    assert res.status_code == 401


def test_current_user_requires_a_valid_token(client, faculty, faculty_headers):
    assert client.get("/user").status_code == 401
    assert client.get("/user", headers={"Authorization": "Bearer garbage"}).status_code == 401

    res = client.get("/user", headers=faculty_headers)
    assert res.status_code == 200
    assert res.json()["user"]["id"] == faculty.id
    assert res.json()["isAdmin"] is False


def test_token_for_deleted_user_is_rejected(client, db, faculty, faculty_headers):
    db.delete(db.get(User, faculty.id))
    db.commit()

    res = client.get("/user", headers=faculty_headers)

    assert res.status_code == 401
    assert res.json()["success"] is False


def test_cookie_token_wins_over_header(client, admin, faculty, faculty_headers):
    client.post("/login", json={"email": ADMIN_EMAIL, "password": PASSWORD})

    res = client.get("/user", headers=faculty_headers)

    assert res.json()["user"]["email"] == ADMIN_EMAIL
    assert res.json()["isAdmin"] is True


def test_logout_drops_the_cookie(client, faculty):
    client.post("/login", json={"email": faculty.email, "password": PASSWORD})
    assert client.get("/user").status_code == 200

    res = client.post("/logout")

    assert res.json() == {"success": True, "message": "Logout successful"}
    assert client.get("/user").status_code == 401


def test_profile_update_and_change_password(client, faculty, faculty_headers):
    res = client.patch("/user", headers=faculty_headers, json={"fullName": "Asha R", "department": "IT"})
    assert res.status_code == 200
    assert res.json()["user"]["fullName"] == "Asha R"
    assert res.json()["user"]["department"] == "it"

    bad = client.post(
        "/user/change-password",
        headers=faculty_headers,
        json={"currentPassword": "Wr0ng!pass", "newPassword": "N3w!Password"},
    )
    assert bad.status_code == 401

    ok = client.post(
        "/user/change-password",
        headers=faculty_headers,
        json={"currentPassword": PASSWORD, "newPassword": "N3w!Password"},
    )
    assert ok.status_code == 200
    login = client.post("/login", json={"email": faculty.email, "password": "N3w!Password"})
    assert login.status_code == 200


@pytest.fixture
def captured_reset(monkeypatch):
    sent: dict[str, str] = {}

    def _capture(session, settings, user, raw_token):
        sent["email"] = user.email
        sent["token"] = raw_token
        return "sent"

    monkeypatch.setattr(auth_service, "notify_password_reset", _capture)
    return sent


def test_forgot_password_is_generic_for_unknown_email(client, captured_reset):
    res = client.post("/forgot-password", json={"email": "ghost@college.edu"})

    assert res.status_code == 200
    assert res.json()["success"] is True
    assert captured_reset == {}


def test_reset_password_flow_is_single_use(client, db, faculty, captured_reset):
    res = client.post("/forgot-password", json={"email": faculty.email})
    assert res.status_code == 200
    raw = captured_reset["token"]
    assert len(raw) == 64

    stored = db.get(User, faculty.id)
    assert stored.reset_password_token == hash_reset_token(raw)
    assert stored.reset_password_token != raw
    assert stored.reset_password_expires is not None

    reset = client.post(f"/reset-password/{raw}", json={"password": "Br4nd!New"})
    assert reset.status_code == 200
    assert client.post("/login", json={"email": faculty.email, "password": "Br4nd!New"}).status_code == 200

    again = client.post(f"/reset-password/{raw}", json={"password": "An0ther!One"})
    assert again.status_code == 401
    assert again.json()["message"] == "Invalid or expired token"


def test_expired_reset_token_is_rejected(client, db, faculty, captured_reset):
    client.post("/forgot-password", json={"email": faculty.email})
    user = db.get(User, faculty.id)
    user.reset_password_expires = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    res = client.post(f"/reset-password/{captured_reset['token']}", json={"password": "Br4nd!New"})

    assert res.status_code == 401


def test_reset_mail_is_logged_as_skipped_without_smtp(client, db, faculty):
    res = client.post("/forgot-password", json={"email": faculty.email})

    assert res.status_code == 200
    log = db.scalar(select(MailLog))
    assert log.status == "skipped"
    assert log.event_type == "password_reset"
    assert "http://frontend.test/reset-password/" in log.body_text


def test_mail_failure_keeps_the_stored_token(client, db, settings, faculty, monkeypatch):
    settings.smtp_host = "smtp.college.edu"
    settings.smtp_from = "noreply@college.edu"

    def _boom(settings, payload):
        raise smtplib.SMTPException("relay down")

    monkeypatch.setattr(mail_service, "_send_message", _boom)

    res = client.post("/forgot-password", json={"email": faculty.email})

    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Error sending email"}
    assert db.get(User, faculty.id).reset_password_token is not None
    assert db.scalar(select(MailLog)).status == "failed"
