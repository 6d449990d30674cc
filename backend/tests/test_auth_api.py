"""
Tests for registration, login sessions and authentication dependencies
"""
from datetime import datetime, timedelta

import pytest

from app.core.config import get_settings
from app.models.user import Session as UserSession
from app.services.auth_service import AuthService

EMAIL = "admin@example.com"
PASSWORD = "correct-horse-battery"


@pytest.fixture
def registered(client):
    response = client.post("/api/auth/register", json={"email": EMAIL, "password": PASSWORD})
    assert response.status_code == 201
    return response.json()


def _login(client, email=EMAIL, password=PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_register(registered):
    assert registered["email"] == EMAIL
    assert registered["is_active"] is True
    assert "password_hash" not in registered


def test_register_duplicate_email(client, registered):
    response = client.post("/api/auth/register", json={"email": EMAIL.upper(), "password": PASSWORD})

    assert response.status_code == 409


def test_register_short_password(client):
    response = client.post("/api/auth/register", json={"email": EMAIL, "password": "short"})

    assert response.status_code == 400


def test_login_sets_session_cookie(client, registered):
    response = _login(client)

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == registered["id"]
    assert response.cookies.get(get_settings().session_cookie_name) == body["token"]


def test_login_with_wrong_password(client, registered):
    response = _login(client, password="wrong-password")

    assert response.status_code == 401


def test_me_with_cookie_session(client, registered):
    _login(client)

    response = client.get("/api/auth/me")

    assert response.status_code == 200
    assert response.json()["email"] == EMAIL


def test_me_with_bearer_token(client, registered):
    token = _login(client).json()["token"]
    client.cookies.clear()

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200


def test_me_without_session(client):
    assert client.get("/api/auth/me").status_code == 401


def test_logout_invalidates_session(client, registered):
    token = _login(client).json()["token"]

    assert client.post("/api/auth/logout").status_code == 204

    client.cookies.clear()
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_session_user_can_create_workspace(client, registered):
    _login(client)

    response = client.post("/api/v3/admin/workspaces", json={"title": "Workspace1"})

    assert response.status_code == 200
    assert response.json()["admin"] == registered["id"]


def test_expired_session_is_removed(db):
    service = AuthService(db)
    user = service.register_user(EMAIL, PASSWORD)
    session = service.create_session(user.id)
    session.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.commit()

    assert service.validate_session(session.token) is None
    assert db.query(UserSession).count() == 0


def test_inactive_user_cannot_authenticate(db):
    service = AuthService(db)
    user = service.register_user(EMAIL, PASSWORD)
    user.is_active = False
    db.commit()

    assert service.authenticate(EMAIL, PASSWORD) is None
