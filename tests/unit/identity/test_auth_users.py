"""
Name: JWT Auth Tests

Responsibilities:
  - Validate token issue/decode round trip and rejection paths
  - Ensure the caller role is read from the store, not from the token
  - Validate token extraction (Bearer header / cookie)
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from identity_api.api.exception_handlers import register_exception_handlers
from identity_api.container import get_user_repository
from identity_api.crosscutting.error_responses import AppHTTPException
from identity_api.domain.entities import CallerContext, UserRole
from identity_api.identity.auth_users import (
    JWT_ALGORITHM,
    create_access_token,
    decode_access_token,
    require_caller,
)

pytestmark = pytest.mark.unit


def _auth_settings(secret: str = "test-secret"):
    return SimpleNamespace(
        jwt_secret=secret,
        jwt_access_ttl_minutes=30,
        jwt_cookie_name="access_token",
        jwt_cookie_secure=False,
    )


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/whoami")
    def whoami(caller: CallerContext = Depends(require_caller())):
        return {"id": str(caller.caller_id), "role": caller.caller_role.value}

    return app


def test_token_round_trip(alice):
    token, expires_in = create_access_token(alice, _auth_settings())

    payload = decode_access_token(token, _auth_settings())

    assert expires_in == 30 * 60
    assert payload.user_id == str(alice.id)
    assert payload.role == UserRole.USER


def test_token_with_other_secret_is_rejected(alice):
    token, _ = create_access_token(alice, _auth_settings("one"))

    with pytest.raises(AppHTTPException) as exc_info:
        decode_access_token(token, _auth_settings("two"))

    assert exc_info.value.status_code == 401


def test_expired_token_is_rejected(alice):
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = jwt.encode(
        {
            "sub": str(alice.id),
            "email": alice.email,
            "role": "USER",
            "iat": int(past.timestamp()),
            "exp": int((past + timedelta(minutes=1)).timestamp()),
        },
        "test-secret",
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(AppHTTPException) as exc_info:
        decode_access_token(token, _auth_settings())

    assert exc_info.value.detail == "Token expirado."


def test_require_caller_without_token_is_401():
    response = TestClient(_build_app()).get("/whoami")

    assert response.status_code == 401


def test_require_caller_reads_role_from_store(alice):
    repo = get_user_repository()
    repo.create_user(alice)
    token, _ = create_access_token(alice)
    # Promoción posterior a la emisión del token.
    repo.update_user(alice.id, role=UserRole.ADMIN)

    response = TestClient(_build_app()).get(
        "/whoami", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200
    assert response.json() == {"id": str(alice.id), "role": "ADMIN"}


def test_require_caller_accepts_cookie(alice):
    get_user_repository().create_user(alice)
    token, _ = create_access_token(alice)
    response = TestClient(_build_app()).get(
        "/whoami", headers={"Cookie": f"access_token={token}"}
    )

    assert response.status_code == 200


def test_token_of_deleted_user_is_401(alice):
    repo = get_user_repository()
    repo.create_user(alice)
    token, _ = create_access_token(alice)
    repo.delete_user(alice.id)

    response = TestClient(_build_app()).get(
        "/whoami", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401
