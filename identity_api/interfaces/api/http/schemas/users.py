"""
===============================================================================
TARJETA CRC — schemas/users.py
===============================================================================

Módulo:
    Schemas HTTP para Usuarios (registros de identidad)

Responsabilidades:
    - Definir DTOs de request/response para /users (JSON en camelCase).
    - Validar forma del payload: email, strings no vacíos, enum de rol y
      largo mínimo de password (desde settings).
    - Declarar los mensajes de "campo faltante" por campo (los usa el
      handler de validación para responder message[]).

Colaboradores:
    - domain.entities.UserRole
    - domain.views.UserView / PublicUserView (origen de las responses)
    - crosscutting.config.get_settings (password_min_length)

Reglas:
    - Ninguna response declara password / passwordHash.
    - Campos extra en requests se ignoran (ej: email en update/me).
===============================================================================
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from identity_api.crosscutting.config import get_settings
from identity_api.domain.entities import UserRole
from identity_api.domain.views import PublicUserView, UserView

_settings = get_settings()

PASSWORD_MIN_LENGTH = _settings.password_min_length

# Forma mínima local@dominio.tld (sin espacios).
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Mensajes cuando el campo no viene en el payload (por alias JSON).
MISSING_FIELD_MESSAGES: dict[str, list[str]] = {
    "email": ["email must be an email", "email should not be empty"],
    "username": ["username must be a string", "username should not be empty"],
    "password": [
        f"password must be longer than or equal to {PASSWORD_MIN_LENGTH} characters",
        "password must be a string",
        "password should not be empty",
    ],
    "currentPassword": [
        "currentPassword must be a string",
        "currentPassword should not be empty",
    ],
    "role": ["role must be a valid enum value"],
}


def _check_email(v: str | None) -> str | None:
    if v is None:
        return v
    if not _EMAIL_RE.match(v):
        raise ValueError("must be an email")
    return v


class _CamelModel(BaseModel):
    """Base: alias camelCase en JSON, nombres snake_case en Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


NonEmptyStr = Annotated[str, Field(min_length=1, max_length=255)]
PasswordStr = Annotated[str, Field(min_length=PASSWORD_MIN_LENGTH, max_length=1024)]


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class CreateUserReq(_CamelModel):
    """Request para crear usuario (admin)."""

    email: NonEmptyStr
    username: NonEmptyStr
    full_name: str | None = Field(default=None, max_length=255)
    password: PasswordStr
    role: UserRole = Field(default=UserRole.USER, description="ADMIN | USER")

    @field_validator("email")
    @classmethod
    def email_shape(cls, v: str | None) -> str | None:
        return _check_email(v)


class UpdateUserReq(_CamelModel):
    """Request para actualizar perfil por id (patch: None = sin cambios)."""

    email: NonEmptyStr | None = None
    username: NonEmptyStr | None = None
    full_name: str | None = Field(default=None, max_length=255)

    @field_validator("email")
    @classmethod
    def email_shape(cls, v: str | None) -> str | None:
        return _check_email(v)


class UpdateOwnProfileReq(_CamelModel):
    """Request self-service: solo fullName y username (email se ignora)."""

    username: NonEmptyStr | None = None
    full_name: str | None = Field(default=None, max_length=255)


class UpdatePasswordReq(_CamelModel):
    """Request de reset de password por id (solo password)."""

    password: PasswordStr


class ChangeOwnPasswordReq(_CamelModel):
    """Request de cambio de password propio."""

    current_password: NonEmptyStr
    password: PasswordStr


class UpdateRoleReq(_CamelModel):
    """Request de cambio de rol."""

    role: UserRole


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class UserRes(_CamelModel):
    """Vista administrativa."""

    id: UUID
    email: str
    username: str
    full_name: str | None = None
    role: UserRole
    created_at: datetime | None = None

    @classmethod
    def from_view(cls, view: UserView) -> "UserRes":
        return cls(
            id=view.id,
            email=view.email,
            username=view.username,
            full_name=view.full_name,
            role=view.role,
            created_at=view.created_at,
        )


class PublicUserRes(_CamelModel):
    """Vista pública / self."""

    id: UUID
    username: str
    full_name: str | None = None

    @classmethod
    def from_view(cls, view: PublicUserView) -> "PublicUserRes":
        return cls(id=view.id, username=view.username, full_name=view.full_name)


class DataRes(BaseModel):
    """Marcador de éxito para comandos sin vista (password updates)."""

    data: bool
