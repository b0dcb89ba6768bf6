"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar registros de identidad en memoria (tests / local dev).
  - Implementar el contrato UserRepository completo.
  - Ser el árbitro final de unicidad (email / username) bajo lock: dos
    writes concurrentes nunca dejan duplicados.
  - Mantener ordering determinístico alineado con Postgres:
      ORDER BY created_at DESC NULLS LAST, id DESC

Collaborators:
  - domain.entities.User, UserRole
  - domain.repositories.UserRepository (contrato a implementar)
  - domain.user_search.matches_criteria (semántica de búsqueda)
  - crosscutting.exceptions.DuplicateUserError

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - User es inmutable: las mutaciones reemplazan la instancia (replace()).
  - Repo puro: NO aplica policy ni decisiones de negocio.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Iterable, List, Mapping, Optional
from uuid import UUID

from ....crosscutting.exceptions import DuplicateUserError
from ....domain.entities import User, UserRole
from ....domain.user_search import matches_criteria


class InMemoryUserRepository:
    """
    Repositorio in-memory, thread-safe, para usuarios.

    Modelo mental:
    - _users es la "tabla" en memoria (UUID -> User).
    - Cada operación lee/escribe bajo lock para evitar condiciones de carrera.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}

    # =========================================================
    # Helpers internos
    # =========================================================
    @staticmethod
    def _now() -> datetime:
        """R: Fuente única de tiempo (UTC)."""
        return datetime.now(timezone.utc)

    @staticmethod
    def _created_sort_key(u: User) -> datetime:
        """R: Emula 'NULLS LAST' para created_at cuando ordenamos DESC."""
        return u.created_at or datetime.min.replace(tzinfo=timezone.utc)

    @classmethod
    def _sorted(cls, items: Iterable[User]) -> List[User]:
        """R: created_at DESC, id DESC (lista nueva, no muta input)."""
        return sorted(
            list(items),
            key=lambda u: (cls._created_sort_key(u), u.id),
            reverse=True,
        )

    def _find_by(self, attr: str, value: str) -> Optional[User]:
        # Debe llamarse con el lock tomado.
        for user in self._users.values():
            if getattr(user, attr) == value:
                return user
        return None

    def _assert_unique(
        self, *, email: str | None, username: str | None, exclude_id: UUID | None
    ) -> None:
        # Debe llamarse con el lock tomado. Email se chequea primero.
        for attr, value in (("email", email), ("username", username)):
            if value is None:
                continue
            hit = self._find_by(attr, value)
            if hit is not None and hit.id != exclude_id:
                raise DuplicateUserError(attr, value)

    # =========================================================
    # Lecturas
    # =========================================================
    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return self._find_by("email", email)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            return self._find_by("username", username)

    def list_users(self) -> List[User]:
        with self._lock:
            values = list(self._users.values())
        return self._sorted(values)

    def search_users(self, criteria: Mapping[str, str]) -> List[User]:
        """Substring case-sensitive, AND entre criterios ({} => [])."""
        if not criteria:
            return []
        with self._lock:
            values = list(self._users.values())
        return self._sorted(u for u in values if matches_criteria(u, criteria))

    # =========================================================
    # Escrituras
    # =========================================================
    def create_user(self, user: User) -> User:
        with self._lock:
            if user.id in self._users:
                raise ValueError(f"User id already exists: {user.id}")
            self._assert_unique(
                email=user.email, username=user.username, exclude_id=None
            )
            stored = user if user.created_at else replace(user, created_at=self._now())
            self._users[stored.id] = stored
            return stored

    def update_user(
        self,
        user_id: UUID,
        *,
        email: str | None = None,
        username: str | None = None,
        full_name: str | None = None,
        password_hash: str | None = None,
        role: UserRole | None = None,
    ) -> Optional[User]:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None

            self._assert_unique(email=email, username=username, exclude_id=user_id)

            changes: dict[str, object] = {}
            if email is not None:
                changes["email"] = email
            if username is not None:
                changes["username"] = username
            if full_name is not None:
                changes["full_name"] = full_name
            if password_hash is not None:
                changes["password_hash"] = password_hash
            if role is not None:
                changes["role"] = role

            updated = replace(current, **changes)
            self._users[user_id] = updated
            return updated

    def delete_user(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.pop(user_id, None)

    def ping(self) -> bool:
        return True

    # =========================================================
    # Testing helpers
    # =========================================================
    def clear(self) -> None:
        with self._lock:
            self._users.clear()
