# =============================================================================
# FILE: application/dev_seed_admin.py
# =============================================================================
"""
===============================================================================
TASK: Dev Seed Admin (Local-only)
===============================================================================

Name:
    Dev Seed Admin

Qué es:
    Asegura que exista un usuario ADMIN para desarrollo cuando está configurado
    (DEV_SEED_ADMIN=true). Sin él no hay forma de crear el primer usuario: la
    creación es una operación solo-ADMIN.

Seguridad:
    - Guard estricto: solo corre en ambientes locales (local/development/test).

Patrones:
    - Dependency Injection (repo + hasher)
    - Fail-fast guard (safety boundary)
    - Idempotencia (ensure-create / optional reset)

CRC:
    Component: ensure_dev_admin
    Responsibilities:
      - Validar guard de ambiente
      - Asegurar usuario (create o update si force_reset)
    Collaborators:
      - UserRepository
      - PasswordHasher
      - Settings
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Final
from uuid import uuid4

from ..crosscutting.config import Settings
from ..crosscutting.logger import logger
from ..domain.entities import User, UserRole
from ..domain.repositories import UserRepository
from ..domain.services import PasswordHasher

_SEED_ALLOWED_ENVS: Final[frozenset[str]] = frozenset({"local", "development", "test"})


def _assert_allowed_environment(settings: Settings) -> None:
    env = (settings.app_env or "").strip().lower()
    if env not in _SEED_ALLOWED_ENVS:
        raise RuntimeError(
            f"FATAL: DEV_SEED_ADMIN is enabled but ENV is '{env}' (must be local). "
            "Safety guard prevents accidental overrides."
        )


def ensure_dev_admin(
    settings: Settings,
    *,
    user_repo: UserRepository,
    password_hasher: PasswordHasher,
) -> None:
    """
    Ensure a development admin user exists if configured.

    Behavior:
      - If disabled: no-op
      - If enabled:
          - Create user if missing
          - If force_reset: update password/role
          - Otherwise: skip if exists
    """
    if not settings.dev_seed_admin:
        return

    _assert_allowed_environment(settings)

    email = (settings.dev_seed_admin_email or "").strip()
    username = (settings.dev_seed_admin_username or "").strip()
    password = settings.dev_seed_admin_password or ""
    if not email or not username or not password:
        raise ValueError(
            "Dev seed admin is enabled but email/username/password are empty"
        )

    logger.info(
        "Dev seed admin: ensuring admin user",
        extra={"email": email, "force_reset": settings.dev_seed_admin_force_reset},
    )

    existing = user_repo.get_user_by_email(email)

    if existing is None:
        user_repo.create_user(
            User(
                id=uuid4(),
                email=email,
                username=username,
                full_name=None,
                password_hash=password_hasher.hash(password),
                role=UserRole.ADMIN,
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.info("Dev seed admin: user created", extra={"email": email})
        return

    if settings.dev_seed_admin_force_reset:
        user_repo.update_user(
            existing.id,
            password_hash=password_hasher.hash(password),
            role=UserRole.ADMIN,
        )
        logger.info("Dev seed admin: user reset applied", extra={"email": email})
        return

    logger.info("Dev seed admin: user exists; skipping", extra={"email": email})
