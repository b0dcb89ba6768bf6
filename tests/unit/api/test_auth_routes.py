"""
Name: Auth Routes Tests

Responsibilities:
  - Validate login success/failure and cookie issuance
  - Ensure /auth/me requires a token
"""

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from identity_api.api.main import create_app
from identity_api.container import get_audit_repository, get_user_repository
from identity_api.identity.passwords import Argon2PasswordHasher

pytestmark = pytest.mark.unit


@pytest.fixture
def client(alice) -> TestClient:
    get_user_repository().create_user(
        replace(alice, password_hash=Argon2PasswordHasher().hash("secret1"))
    )
    return TestClient(create_app())


def test_login_ok(client, alice):
    response = client.post(
        "/auth/login", json={"email": "a@x.com", "password": "secret1"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["accessToken"]
    assert body["tokenType"] == "bearer"
    assert body["user"]["email"] == alice.email
    assert "access_token=" in response.headers["set-cookie"]
    assert get_audit_repository().list_events(action_prefix="auth.login")


def test_login_wrong_password(client):
    response = client.post(
        "/auth/login", json={"email": "a@x.com", "password": "wrong"}
    )

    assert response.status_code == 401
    assert "Credenciales" in response.json()["message"]


def test_login_unknown_email(client):
    response = client.post(
        "/auth/login", json={"email": "ghost@x.com", "password": "secret1"}
    )

    assert response.status_code == 401


def test_login_without_password_uses_login_rules(client):
    response = client.post("/auth/login", json={"email": "a@x.com"})

    assert response.status_code == 400
    assert response.json()["message"] == ["password should not be empty"]


def test_me_requires_token(client):
    response = client.get("/auth/me")

    assert response.status_code == 401


def test_me_with_login_token(client, alice):
    token = client.post(
        "/auth/login", json={"email": "a@x.com", "password": "secret1"}
    ).json()["accessToken"]

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["id"] == str(alice.id)


def test_logout_is_idempotent(client):
    assert client.post("/auth/logout").json() == {"ok": True}
