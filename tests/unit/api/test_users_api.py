"""
Name: Users API Tests

Responsibilities:
  - Validate the HTTP surface of the identity record lifecycle
  - Cover 401 / 403 / 404 / 409 / 400 payloads (RFC7807 + message)
  - Verify camelCase views never expose credentials
  - Verify audit events for successful mutations
"""

from dataclasses import replace
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from identity_api.api.main import create_app
from identity_api.container import get_audit_repository, get_user_repository
from identity_api.identity.auth_users import create_access_token
from identity_api.identity.passwords import Argon2PasswordHasher

pytestmark = pytest.mark.unit

VIEW_KEYS = {"id", "email", "username", "fullName", "role", "createdAt"}


@pytest.fixture
def seeded(admin_user, alice, bob):
    """Store del container con admin + A + B (A con hash Argon2 real)."""
    repo = get_user_repository()
    alice_argon = replace(alice, password_hash=Argon2PasswordHasher().hash("secret1"))
    for user in (admin_user, alice_argon, bob):
        repo.create_user(user)
    return repo


@pytest.fixture
def client(seeded) -> TestClient:
    return TestClient(create_app())


def _auth(user) -> dict[str, str]:
    token, _ = create_access_token(user)
    return {"Authorization": f"Bearer {token}"}


# ============================================================================
# Authentication / authorization
# ============================================================================


def test_requests_without_token_are_401(client):
    response = client.get("/users")

    assert response.status_code == 401
    assert response.headers["content-type"].startswith("application/problem+json")


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/users"),
        ("get", "/users/search?username=a"),
        ("delete", "/users/{bob}"),
    ],
)
def test_user_role_is_forbidden(client, alice, bob, method, path):
    response = client.request(
        method.upper(), path.format(bob=bob.id), headers=_auth(alice)
    )

    assert response.status_code == 403
    assert response.json()["message"] == "You don't have the permission"


def test_user_cannot_change_roles(client, alice):
    response = client.put(
        f"/users/role/{alice.id}", json={"role": "ADMIN"}, headers=_auth(alice)
    )

    assert response.status_code == 403
    assert get_user_repository().get_user_by_id(alice.id).role.value == "USER"


# ============================================================================
# Reads
# ============================================================================


def test_list_users_returns_views_newest_first(client, admin_user):
    response = client.get("/users", headers=_auth(admin_user))

    assert response.status_code == 200
    body = response.json()
    assert [u["username"] for u in body] == ["bob", "alice", "root"]
    assert all(set(u) == VIEW_KEYS for u in body)


def test_get_user_by_id(client, admin_user, alice):
    response = client.get(f"/users/{alice.id}", headers=_auth(admin_user))

    assert response.status_code == 200
    assert response.json()["fullName"] == "Alice Liddell"


def test_get_missing_user_is_404(client, admin_user):
    response = client.get(f"/users/{uuid4()}", headers=_auth(admin_user))

    assert response.status_code == 404
    assert response.json()["message"] == "The User to read does not exist."


def test_get_user_with_malformed_id_is_400(client, admin_user):
    response = client.get("/users/not-a-uuid", headers=_auth(admin_user))

    assert response.status_code == 400
    assert response.json()["message"] == ["user_id must be a UUID"]


def test_public_profile_by_username(client, alice, bob):
    response = client.get("/users/@bob", headers=_auth(alice))

    assert response.status_code == 200
    assert response.json() == {
        "id": str(bob.id),
        "username": "bob",
        "fullName": "Bob Stone",
    }


def test_search_by_username_substring(client, admin_user, alice):
    response = client.get("/users/search?username=ali", headers=_auth(admin_user))

    assert response.status_code == 200
    assert [u["id"] for u in response.json()] == [str(alice.id)]


@pytest.mark.parametrize("query", ["", "?username=", "?email=a&fullName="])
def test_search_without_intent_returns_empty(client, admin_user, query):
    response = client.get(f"/users/search{query}", headers=_auth(admin_user))

    assert response.status_code == 200
    assert response.json() == []


# ============================================================================
# Create
# ============================================================================


def test_create_user(client, admin_user):
    response = client.post(
        "/users",
        json={
            "email": "c@x.com",
            "username": "carol",
            "fullName": "Carol",
            "password": "secret1",
        },
        headers=_auth(admin_user),
    )

    assert response.status_code == 201
    body = response.json()
    assert set(body) == VIEW_KEYS
    assert body["role"] == "USER"

    [event] = get_audit_repository().list_events(action_prefix="users.create")
    assert event.target_id is not None
    assert "password" not in event.metadata


def test_create_duplicate_email_is_409(client, admin_user):
    response = client.post(
        "/users",
        json={"email": "a@x.com", "username": "bob", "password": "secret1"},
        headers=_auth(admin_user),
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Email a@x.com already exists."


def test_create_invalid_payload_lists_messages(client, admin_user):
    response = client.post(
        "/users",
        json={"email": "nope", "username": "carol", "password": "123"},
        headers=_auth(admin_user),
    )

    assert response.status_code == 400
    messages = response.json()["message"]
    assert "email must be an email" in messages
    assert "password must be longer than or equal to 6 characters" in messages


def test_create_missing_fields(client, admin_user):
    response = client.post("/users", json={}, headers=_auth(admin_user))

    assert response.status_code == 400
    messages = response.json()["message"]
    assert "email should not be empty" in messages
    assert "username should not be empty" in messages
    assert "password must be a string" in messages


def test_create_with_unknown_role_is_400(client, admin_user):
    response = client.post(
        "/users",
        json={
            "email": "c@x.com",
            "username": "carol",
            "password": "secret1",
            "role": "ROOT",
        },
        headers=_auth(admin_user),
    )

    assert response.status_code == 400
    assert response.json()["message"] == ["role must be a valid enum value"]


def test_create_role_only_body_lists_messages_in_field_order(
    client, admin_user
):
    response = client.post(
        "/users", json={"role": "lorem ipsum dolor"}, headers=_auth(admin_user)
    )

    assert response.status_code == 400
    assert response.json()["message"] == [
        "email must be an email",
        "email should not be empty",
        "username must be a string",
        "username should not be empty",
        "password must be longer than or equal to 6 characters",
        "password must be a string",
        "password should not be empty",
        "role must be a valid enum value",
    ]


def test_unsupported_method_is_405_problem(client, admin_user):
    response = client.patch("/users", json={}, headers=_auth(admin_user))

    assert response.status_code == 405
    assert response.json()["message"] == "Method Not Allowed"


# ============================================================================
# Updates
# ============================================================================


def test_update_profile(client, admin_user, bob):
    response = client.put(
        f"/users/{bob.id}", json={"fullName": "Robert"}, headers=_auth(admin_user)
    )

    assert response.status_code == 200
    assert response.json()["fullName"] == "Robert"
    assert response.json()["username"] == "bob"


def test_update_profile_to_taken_username_is_409(client, admin_user, bob):
    response = client.put(
        f"/users/{bob.id}", json={"username": "alice"}, headers=_auth(admin_user)
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Username alice already exists."


def test_update_missing_user_is_404(client, admin_user):
    response = client.put(
        f"/users/{uuid4()}", json={"fullName": "X"}, headers=_auth(admin_user)
    )

    assert response.status_code == 404
    assert response.json()["message"] == "The User to update does not exist."


def test_update_password_by_id(client, admin_user, bob):
    response = client.put(
        f"/users/password/{bob.id}",
        json={"password": "newpass1", "email": "ignored@x.com"},
        headers=_auth(admin_user),
    )

    assert response.status_code == 200
    assert response.json() == {"data": True}
    stored = get_user_repository().get_user_by_id(bob.id)
    assert stored.email == "b@x.com"
    assert stored.password_hash != bob.password_hash


def test_update_role(client, admin_user, bob):
    response = client.put(
        f"/users/role/{bob.id}", json={"role": "ADMIN"}, headers=_auth(admin_user)
    )

    assert response.status_code == 200
    assert response.json()["role"] == "ADMIN"


def test_update_own_profile_ignores_email(client, alice):
    response = client.put(
        "/users/update/me",
        json={"fullName": "Alice L.", "email": "evil@x.com"},
        headers=_auth(alice),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == str(alice.id)
    assert body["fullName"] == "Alice L."
    assert body["email"] == "a@x.com"


def test_change_own_password_wrong_current(client, alice):
    before = get_user_repository().get_user_by_id(alice.id).password_hash

    response = client.put(
        "/users/my/password",
        json={"currentPassword": "wrong", "password": "newpass1"},
        headers=_auth(alice),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Password is incorrect"
    assert get_user_repository().get_user_by_id(alice.id).password_hash == before


def test_change_own_password(client, alice):
    response = client.put(
        "/users/my/password",
        json={"currentPassword": "secret1", "password": "newpass1"},
        headers=_auth(alice),
    )

    assert response.status_code == 200
    assert response.json() == {"data": True}


# ============================================================================
# Delete
# ============================================================================


def test_delete_user_returns_view_then_404(client, admin_user, bob):
    first = client.delete(f"/users/{bob.id}", headers=_auth(admin_user))
    second = client.delete(f"/users/{bob.id}", headers=_auth(admin_user))

    assert first.status_code == 200
    assert first.json()["id"] == str(bob.id)
    assert "passwordHash" not in first.json()
    assert second.status_code == 404
    assert second.json()["message"] == "The User to delete does not exist."
