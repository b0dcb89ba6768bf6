"""
===============================================================================
TARJETA CRC — identity_api/api/auth_routes.py (Autenticación)
===============================================================================

Responsabilidades:
  - Exponer endpoints de autenticación (login/logout/me) con JWT.
  - Gestionar cookie httpOnly de forma consistente.
  - Emitir auditoría de login (best-effort).

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP <-> identidad.
  - Fail-safe security: si la autenticación falla, se deniega por defecto.

Colaboradores:
  - identity.auth_users: authenticate_user, create_access_token, require_caller
  - container: get_user_repository, get_audit_repository
  - audit.emit_audit_event
  - schemas.users.UserRes (misma vista que /users)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..audit import emit_audit_event
from ..container import get_audit_repository, get_user_repository
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES, unauthorized
from ..domain.entities import CallerContext
from ..domain.repositories import AuditEventRepository, UserRepository
from ..domain.views import UserView
from ..identity.auth_users import DEFAULT_ACCESS_TOKEN_COOKIE as ACCESS_TOKEN_COOKIE
from ..identity.auth_users import (
    authenticate_user,
    caller_from_user,
    create_access_token,
    get_auth_settings,
    require_caller,
)
from ..interfaces.api.http.schemas.users import UserRes

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """
    Credenciales de login.

    password ausente valida el default "" contra sus propias reglas (no
    contra el largo mínimo de alta de /users): "password should not be empty".
    """

    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(
        default="", min_length=1, max_length=512, validate_default=True
    )


class LoginResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRes


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _set_auth_cookie(response: Response, token: str, expires_in: int) -> None:
    """Setea cookie httpOnly de acceso."""
    settings = get_auth_settings()
    cookie_name = settings.jwt_cookie_name or ACCESS_TOKEN_COOKIE
    response.set_cookie(
        key=cookie_name,
        value=token,
        httponly=True,
        secure=settings.jwt_cookie_secure,
        samesite="lax",
        max_age=expires_in,
        path="/",
    )


def _clear_auth_cookie(response: Response) -> None:
    """Elimina cookie de acceso (si existe)."""
    settings = get_auth_settings()
    cookie_name = settings.jwt_cookie_name or ACCESS_TOKEN_COOKIE
    response.delete_cookie(
        key=cookie_name,
        path="/",
        samesite="lax",
        secure=settings.jwt_cookie_secure,
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post("/auth/login", response_model=LoginResponse, tags=["auth"])
def login(
    req: LoginRequest,
    response: Response,
    audit_repo: AuditEventRepository | None = Depends(get_audit_repository),
):
    """
    Inicia sesión y devuelve JWT.

    También setea cookie httpOnly con el mismo token.
    """
    user = authenticate_user(req.email, req.password)
    if user is None:
        raise unauthorized("Credenciales inválidas.")

    token, expires_in = create_access_token(user)
    _set_auth_cookie(response, token, expires_in)

    emit_audit_event(
        audit_repo,
        action="auth.login",
        caller=caller_from_user(user),
        target_id=user.id,
    )

    return LoginResponse(
        access_token=token,
        expires_in=expires_in,
        user=UserRes.from_view(UserView.from_user(user)),
    )


@router.post("/auth/logout", tags=["auth"])
def logout(response: Response):
    """
    Cierra sesión.

    No requiere autenticación: es idempotente.
    """
    _clear_auth_cookie(response)
    return {"ok": True}


@router.get("/auth/me", response_model=UserRes, tags=["auth"])
def me(
    caller: CallerContext = Depends(require_caller()),
    users: UserRepository = Depends(get_user_repository),
):
    """Devuelve el usuario autenticado (JWT o cookie)."""
    user = users.get_user_by_id(caller.caller_id)
    if user is None:
        raise unauthorized("Token inválido.")
    return UserRes.from_view(UserView.from_user(user))


__all__ = ["router"]
