"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Implementar UserRepository sobre la tabla `users` (contrato con migraciones).
  - Ejecutar SQL parametrizado (nunca interpolar input de usuario).
  - Mapear filas crudas -> entidad de dominio `User` y validar `UserRole`.
  - Traducir violaciones de unicidad (uq_users_email / uq_users_username)
    a DuplicateUserError: la DB es el árbitro final ante carreras.
  - Exponer el resto de los fallos vía `DatabaseError` con logging estructurado.

Collaborators:
  - infrastructure.db.pool.get_pool (pool global, inyectable en tests)
  - domain.entities.User / UserRole
  - crosscutting.exceptions.DatabaseError / DuplicateUserError
  - crosscutting.logger.logger

Constraints / Notes:
  - Repositorio puro: NO define reglas de negocio.
  - Retorna None cuando no existe el recurso (no exception por "not found").
  - Orden estable en listados: created_at DESC, id DESC.
  - La búsqueda usa strpos() (substring case-sensitive, sin comodines LIKE).
============================================================
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional
from uuid import UUID

from psycopg import errors as pg_errors

from ....crosscutting.exceptions import DatabaseError, DuplicateUserError
from ....crosscutting.logger import logger
from ....domain.entities import User, UserRole

# ============================================================
# Constantes y contratos de SQL
# ============================================================
_USER_COLUMNS = "id, email, username, full_name, password_hash, role, created_at"

_USER_ORDER_BY = "created_at DESC, id DESC"

# Constraint -> campo único (ver alembic/versions/001_users.py).
_UNIQUE_CONSTRAINTS: Mapping[str, str] = {
    "uq_users_email": "email",
    "uq_users_username": "username",
}

# Atributo de User buscable -> columna.
_SEARCH_COLUMNS: Mapping[str, str] = {
    "email": "email",
    "full_name": "full_name",
    "username": "username",
}


def _row_to_user(row: tuple) -> User:
    """
    Convierte una fila de `users` a `User`.

    Role casting estricto: un valor fuera del enum -> DatabaseError.
    """
    try:
        role = UserRole(row[5])
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {row[5]}") from exc

    return User(
        id=row[0],
        email=row[1],
        username=row[2],
        full_name=row[3],
        password_hash=row[4],
        role=role,
        created_at=row[6],
    )


class PostgresUserRepository:
    """Repositorio PostgreSQL de usuarios (pool inyectable para tests)."""

    def __init__(self, pool: Any | None = None) -> None:
        self._pool = pool

    # ============================================================
    # Helpers internos: pool + ejecución
    # ============================================================
    def _get_pool(self):
        if self._pool is not None:
            return self._pool
        from ...db.pool import get_pool

        return get_pool()

    def _execute(
        self,
        *,
        query: str,
        params: Iterable[object],
        fetch: str,
        log_msg: str,
        log_extra: dict[str, object],
        candidate: Mapping[str, str | None] | None = None,
    ):
        """
        Ejecuta un statement con manejo consistente de errores.

        - UniqueViolation conocida -> DuplicateUserError(field, value).
        - Cualquier otro fallo -> DatabaseError (logueado).
        """
        try:
            with self._get_pool().connection() as conn:
                cursor = conn.execute(query, tuple(params))
                return cursor.fetchone() if fetch == "one" else cursor.fetchall()
        except pg_errors.UniqueViolation as exc:
            constraint = getattr(exc.diag, "constraint_name", None)
            field = _UNIQUE_CONSTRAINTS.get(constraint or "")
            value = (candidate or {}).get(field or "")
            if field is None or value is None:
                logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
                raise DatabaseError(f"{log_msg}: {exc}", original_error=exc) from exc
            raise DuplicateUserError(field, value, original_error=exc) from exc
        except DatabaseError:
            raise
        except Exception as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise DatabaseError(f"{log_msg}: {exc}", original_error=exc) from exc

    def _fetch_user(
        self, *, where: str, value: object, log_msg: str, log_extra: dict[str, object]
    ) -> Optional[User]:
        row = self._execute(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE {where} = %s",
            params=(value,),
            fetch="one",
            log_msg=log_msg,
            log_extra=log_extra,
        )
        return _row_to_user(row) if row else None

    # ============================================================
    # Lecturas
    # ============================================================
    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        return self._fetch_user(
            where="id",
            value=user_id,
            log_msg="PostgresUserRepository: get_user_by_id failed",
            log_extra={"user_id": str(user_id)},
        )

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._fetch_user(
            where="email",
            value=email,
            log_msg="PostgresUserRepository: get_user_by_email failed",
            log_extra={},
        )

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._fetch_user(
            where="username",
            value=username,
            log_msg="PostgresUserRepository: get_user_by_username failed",
            log_extra={},
        )

    def list_users(self) -> list[User]:
        rows = self._execute(
            query=f"SELECT {_USER_COLUMNS} FROM users ORDER BY {_USER_ORDER_BY}",
            params=(),
            fetch="all",
            log_msg="PostgresUserRepository: list_users failed",
            log_extra={},
        )
        return [_row_to_user(r) for r in rows]

    def search_users(self, criteria: Mapping[str, str]) -> list[User]:
        """Substring case-sensitive por columna, combinado con AND."""
        clauses: list[str] = []
        params: list[object] = []
        for attr, needle in criteria.items():
            column = _SEARCH_COLUMNS.get(attr)
            if column is None:
                raise ValueError(f"Unsupported search field: {attr}")
            clauses.append(f"strpos({column}, %s) > 0")
            params.append(needle)

        if not clauses:
            return []

        # clauses es controlado por código (columnas whitelisted).
        rows = self._execute(
            query=f"""
                SELECT {_USER_COLUMNS}
                FROM users
                WHERE {" AND ".join(clauses)}
                ORDER BY {_USER_ORDER_BY}
            """,
            params=params,
            fetch="all",
            log_msg="PostgresUserRepository: search_users failed",
            log_extra={"fields": sorted(criteria)},
        )
        return [_row_to_user(r) for r in rows]

    # ============================================================
    # Escrituras
    # ============================================================
    def create_user(self, user: User) -> User:
        row = self._execute(
            query=f"""
                INSERT INTO users (id, email, username, full_name, password_hash, role, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, COALESCE(%s, NOW()))
                RETURNING {_USER_COLUMNS}
            """,
            params=(
                user.id,
                user.email,
                user.username,
                user.full_name,
                user.password_hash,
                user.role.value,
                user.created_at,
            ),
            fetch="one",
            log_msg="PostgresUserRepository: create_user failed",
            log_extra={"user_id": str(user.id), "role": user.role.value},
            candidate={"email": user.email, "username": user.username},
        )
        if not row:
            raise DatabaseError(
                "PostgresUserRepository: create_user failed (no row returned)"
            )
        return _row_to_user(row)

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
        """
        Update dinámico: SET solo con los campos presentes.

        Sin cambios => devuelve el estado actual (si existe).
        """
        updates: list[str] = []
        params: list[object] = []

        for column, value in (
            ("email", email),
            ("username", username),
            ("full_name", full_name),
            ("password_hash", password_hash),
            ("role", role.value if role is not None else None),
        ):
            if value is not None:
                updates.append(f"{column} = %s")
                params.append(value)

        if not updates:
            return self.get_user_by_id(user_id)

        params.append(user_id)

        row = self._execute(
            query=f"""
                UPDATE users
                SET {", ".join(updates)}
                WHERE id = %s
                RETURNING {_USER_COLUMNS}
            """,
            params=params,
            fetch="one",
            log_msg="PostgresUserRepository: update_user failed",
            log_extra={
                "user_id": str(user_id),
                "columns": [u.split(" ", 1)[0] for u in updates],
            },
            candidate={"email": email, "username": username},
        )
        return _row_to_user(row) if row else None

    def delete_user(self, user_id: UUID) -> Optional[User]:
        row = self._execute(
            query=f"DELETE FROM users WHERE id = %s RETURNING {_USER_COLUMNS}",
            params=(user_id,),
            fetch="one",
            log_msg="PostgresUserRepository: delete_user failed",
            log_extra={"user_id": str(user_id)},
        )
        return _row_to_user(row) if row else None

    def ping(self) -> bool:
        row = self._execute(
            query="SELECT 1",
            params=(),
            fetch="one",
            log_msg="PostgresUserRepository: ping failed",
            log_extra={},
        )
        return bool(row)
