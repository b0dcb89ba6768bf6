"""
===============================================================================
TARJETA CRC — domain/views.py
===============================================================================

Módulo:
    Vistas de salida del registro de identidad (Outward Identity View)

Responsabilidades:
    - Proyectar User a una vista SIN material de credenciales.
    - Ofrecer dos variantes:
        * UserView: vista administrativa (email, rol, timestamps).
        * PublicUserView: vista pública / self (subset sin email ni rol).

Colaboradores:
    - application.usecases.users.*: toda respuesta sale proyectada por acá.
    - interfaces.api.http.schemas.users: DTOs HTTP construidos desde las vistas.

Invariante:
    - Ninguna vista declara un campo de hash/password; la proyección es por
      whitelist de campos, no por borrado del hash.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from .entities import User, UserRole


@dataclass(frozen=True, slots=True)
class UserView:
    """Vista administrativa (sin credenciales)."""

    id: UUID
    email: str
    username: str
    full_name: str | None
    role: UserRole
    created_at: datetime | None

    @classmethod
    def from_user(cls, user: User) -> "UserView":
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            full_name=user.full_name,
            role=user.role,
            created_at=user.created_at,
        )


@dataclass(frozen=True, slots=True)
class PublicUserView:
    """Vista pública / self (sin email, rol ni credenciales)."""

    id: UUID
    username: str
    full_name: str | None

    @classmethod
    def from_user(cls, user: User) -> "PublicUserView":
        return cls(id=user.id, username=user.username, full_name=user.full_name)
