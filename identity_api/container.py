"""
===============================================================================
TARJETA CRC — identity_api/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, hasher, casos de uso) siguiendo DIP.
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache) para recursos compartidos.
  - Elegir el backend del store según Settings (memory | postgres).

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories.* / domain.services.* (puertos)
  - infrastructure.repositories.* / identity.passwords (implementaciones)
  - application.usecases.users.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO debe depender de FastAPI (solo expone factories).
  - Los tests reemplazan factories vía app.dependency_overrides o
    cache_clear() + Settings parcheados.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases.users import (
    ChangeOwnPasswordUseCase,
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserByUsernameUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    SearchUsersUseCase,
    UpdateUserPasswordUseCase,
    UpdateUserProfileUseCase,
    UpdateUserRoleUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import AuditEventRepository, UserRepository
from .domain.services import PasswordHasher
from .identity.passwords import Argon2PasswordHasher
from .infrastructure.repositories import (
    InMemoryAuditEventRepository,
    InMemoryUserRepository,
    PostgresUserRepository,
)

# =============================================================================
# Repositorios / servicios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Store de identidad (in-memory por defecto; Postgres si está configurado)."""
    if get_settings().user_store_backend == "postgres":
        return PostgresUserRepository()
    return InMemoryUserRepository()


@lru_cache(maxsize=1)
def get_audit_repository() -> AuditEventRepository:
    """Repositorio de auditoría (in-memory, append-only)."""
    return InMemoryAuditEventRepository()


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    """Hasher de credenciales (Argon2)."""
    return Argon2PasswordHasher()


def clear_caches() -> None:
    """Resetea singletons (tests / recarga de settings)."""
    get_user_repository.cache_clear()
    get_audit_repository.cache_clear()
    get_password_hasher.cache_clear()


# =============================================================================
# Casos de uso (factories por request)
# =============================================================================


def get_create_user_use_case() -> CreateUserUseCase:
    """Caso de uso: crear usuario."""
    return CreateUserUseCase(
        repository=get_user_repository(), password_hasher=get_password_hasher()
    )


def get_get_user_use_case() -> GetUserUseCase:
    """Caso de uso: leer usuario por id."""
    return GetUserUseCase(repository=get_user_repository())


def get_get_user_by_username_use_case() -> GetUserByUsernameUseCase:
    """Caso de uso: perfil público por username."""
    return GetUserByUsernameUseCase(repository=get_user_repository())


def get_list_users_use_case() -> ListUsersUseCase:
    """Caso de uso: listar usuarios."""
    return ListUsersUseCase(repository=get_user_repository())


def get_search_users_use_case() -> SearchUsersUseCase:
    """Caso de uso: buscar usuarios."""
    return SearchUsersUseCase(repository=get_user_repository())


def get_update_user_profile_use_case() -> UpdateUserProfileUseCase:
    """Caso de uso: actualizar perfil (by id / own)."""
    return UpdateUserProfileUseCase(repository=get_user_repository())


def get_update_user_password_use_case() -> UpdateUserPasswordUseCase:
    """Caso de uso: reset de password por id."""
    return UpdateUserPasswordUseCase(
        repository=get_user_repository(), password_hasher=get_password_hasher()
    )


def get_change_own_password_use_case() -> ChangeOwnPasswordUseCase:
    """Caso de uso: cambio de password self-service."""
    return ChangeOwnPasswordUseCase(
        repository=get_user_repository(), password_hasher=get_password_hasher()
    )


def get_update_user_role_use_case() -> UpdateUserRoleUseCase:
    """Caso de uso: cambiar rol."""
    return UpdateUserRoleUseCase(repository=get_user_repository())


def get_delete_user_use_case() -> DeleteUserUseCase:
    """Caso de uso: borrar usuario."""
    return DeleteUserUseCase(repository=get_user_repository())
