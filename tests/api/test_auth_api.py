from __future__ import annotations

from src.attendance_tracker.attendance_tracker.core.enums import SessionAction


def test_health_check(client):
    res = client.get("/api/test")
    assert res.status_code == 200
    assert res.get_json() == {"message": "API is working"}


def test_login_returns_profile_and_token_and_logs_session(client, repos, people):
    res = client.post(
        "/api/auth/login",
        json={"username": "ana", "password": "2024-0001"},
        headers={"User-Agent": "pytest-browser"},
    )

    body = res.get_json()
    assert res.status_code == 200
    assert body["userId"] == "2024-0001"
    assert body["role"] == "student"
    assert "password_hash" not in body and "passwordHash" not in body
    assert body["token"]

    [row] = repos.sessions.rows.values()
    assert row.action == SessionAction.LOGIN
    assert row.device_info == "pytest-browser"


def test_login_rejects_bad_password(client, people):
    res = client.post("/api/auth/login", json={"username": "ana", "password": "wrong"})
    assert res.status_code == 401
    assert res.get_json() == {"message": "Invalid credentials"}


def test_me_requires_token(client, auth):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer junk"}).status_code == 401

    res = client.get("/api/auth/me", headers=auth("instructor"))
    assert res.get_json()["username"] == "tina"


def test_logout_closes_session(client, repos, people):
    token = client.post("/api/auth/login", json={"username": "ana", "password": "2024-0001"}).get_json()["token"]

    res = client.post("/api/auth/logout", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 200
    assert len(repos.sessions.rows) == 2
    assert {r.status.value for r in repos.sessions.rows.values()} == {"completed"}


def test_change_password_then_login(client, auth):
    res = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "2024-0001", "newPassword": "better-secret"},
        headers=auth("student"),
    )
    assert res.status_code == 200

    ok = client.post("/api/auth/login", json={"username": "ana", "password": "better-secret"})
    assert ok.status_code == 200


def test_user_admin_routes(client, auth):
    created = client.post(
        "/api/users",
        json={"username": "cy", "email": "cy@school.test", "role": "student", "userId": "2024-0003"},
        headers=auth("admin"),
    )
    assert created.status_code == 201
    account_id = created.get_json()["id"]

    dup = client.post(
        "/api/users",
        json={"username": "cy", "email": "other@school.test", "role": "student", "userId": "2024-0004"},
        headers=auth("admin"),
    )
    assert dup.status_code == 400
    assert dup.get_json()["duplicates"] == ["username"]

    updated = client.put(f"/api/users/{account_id}", json={"email": "cy@new.test"}, headers=auth("admin"))
    assert updated.get_json()["email"] == "cy@new.test"

    assert client.get("/api/users", headers=auth("instructor")).status_code == 403
    assert client.delete(f"/api/users/{account_id}", headers=auth("admin")).status_code == 200
    assert client.get(f"/api/users/{account_id}", headers=auth("admin")).status_code == 404


def test_bad_user_code_format_is_400(client, auth):
    res = client.post(
        "/api/users",
        json={"username": "x", "email": "x@school.test", "role": "instructor", "userId": "2024-0009"},
        headers=auth("admin"),
    )
    assert res.status_code == 400
    assert "T-YYYY" in res.get_json()["message"]
