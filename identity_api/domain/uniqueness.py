"""
===============================================================================
TARJETA CRC — domain/uniqueness.py
===============================================================================

Módulo:
    Uniqueness Guard (email / username)

Responsabilidades:
    - Detectar conflictos de unicidad ANTES de mutar el store.
    - Orden determinístico: email se chequea antes que username y se reporta
      solo el primer conflicto encontrado.
    - Ignorar el propio registro (exclude_id) en updates de perfil.

Colaboradores:
    - domain.repositories.UserRepository (lookups por email / username)
    - application.usecases.users.create_user / update_user_profile

Notas:
    - Es un pre-chequeo para dar un error claro y rápido; el árbitro final es
      el store (DuplicateUserError) ante carreras concurrentes.
    - Email y username se comparan tal cual se guardan (case-sensitive).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol
from uuid import UUID

from .entities import User


class UniqueField(str, Enum):
    EMAIL = "email"
    USERNAME = "username"


_FIELD_LABELS = {
    UniqueField.EMAIL: "Email",
    UniqueField.USERNAME: "Username",
}


def conflict_message(field: UniqueField | str, value: str) -> str:
    """Mensaje estable para un conflicto (ej: 'Email a@x.com already exists.')."""
    label = _FIELD_LABELS[UniqueField(field)]
    return f"{label} {value} already exists."


@dataclass(frozen=True, slots=True)
class NoConflict:
    """No hay colisión de unicidad."""

    @property
    def has_conflict(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class ConflictOn:
    """Colisión sobre un campo único."""

    field: UniqueField
    value: str

    @property
    def has_conflict(self) -> bool:
        return True

    @property
    def message(self) -> str:
        return conflict_message(self.field, self.value)


ConflictResult = NoConflict | ConflictOn

NO_CONFLICT = NoConflict()


class UserLookup(Protocol):
    """Subset del UserRepository que necesita el guard."""

    def get_user_by_email(self, email: str) -> Optional[User]: ...

    def get_user_by_username(self, username: str) -> Optional[User]: ...


def _is_conflict(hit: User | None, exclude_id: UUID | None) -> bool:
    return hit is not None and hit.id != exclude_id


def check_conflicts(
    users: UserLookup,
    *,
    email: str | None = None,
    username: str | None = None,
    exclude_id: UUID | None = None,
) -> ConflictResult:
    """
    Chequea colisiones de email y username (en ese orden).

    - email/username None => no se chequea ese campo.
    - exclude_id => un hit con ese id no es conflicto (el registro se
      conserva a sí mismo).
    """
    if email is not None and _is_conflict(users.get_user_by_email(email), exclude_id):
        return ConflictOn(field=UniqueField.EMAIL, value=email)

    if username is not None and _is_conflict(
        users.get_user_by_username(username), exclude_id
    ):
        return ConflictOn(field=UniqueField.USERNAME, value=username)

    return NO_CONFLICT
