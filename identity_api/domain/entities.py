"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades de Identidad (registro de usuario + contexto del caller)

Responsabilidades:
    - Definir el enum de roles (ADMIN / USER).
    - Definir el registro persistido User (incluye password_hash).
    - Definir CallerContext: identidad verificada de quien ejecuta la operación.

Colaboradores:
    - domain.views: proyecciones sin credenciales.
    - domain.user_policy: decide Allow/Deny usando CallerContext.
    - infrastructure.repositories.*: mapean filas <-> User.

Notas:
    - User es inmutable (frozen): toda mutación produce una instancia nueva
      vía `dataclasses.replace` en los repositorios.
    - password_hash NUNCA sale de la capa de aplicación (ver domain.views).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """Roles soportados (catálogo cerrado)."""

    ADMIN = "ADMIN"
    USER = "USER"


@dataclass(frozen=True, slots=True)
class User:
    """Registro de identidad persistido."""

    id: UUID
    email: str
    username: str
    full_name: str | None
    password_hash: str
    role: UserRole
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class CallerContext:
    """
    Identidad verificada del caller (efímera, no se persiste).

    La construye el adaptador de autenticación a partir de un token válido;
    un request sin caller nunca llega al núcleo.
    """

    caller_id: UUID
    caller_role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.caller_role == UserRole.ADMIN
