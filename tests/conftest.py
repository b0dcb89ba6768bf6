"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (APP_ENV=test, in-memory store, no .env)
  - Reset lru_cache singletons between tests
  - Provide reusable fakes (password hasher) and user factories

Collaborators:
  - pytest: Test framework
  - identity_api.container: singletons to reset
  - identity_api.domain: entities

Notes:
  - Fixtures are auto-discovered by pytest
  - Use @pytest.fixture(scope="function") for per-test isolation
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from uuid import uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ["USER_STORE_BACKEND"] = "memory"

from identity_api.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from identity_api.container import clear_caches  # noqa: E402
from identity_api.domain.entities import CallerContext, User, UserRole  # noqa: E402
from identity_api.infrastructure.repositories import (  # noqa: E402
    InMemoryUserRepository,
)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that need a live PostgreSQL"
    )


# ============================================================================
# Singletons
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Cada test arranca con settings y repositorios limpios."""
    app_config.get_settings.cache_clear()
    clear_caches()
    yield
    app_config.get_settings.cache_clear()
    clear_caches()


# ============================================================================
# Fakes
# ============================================================================


class FakePasswordHasher:
    """Hasher determinístico (sin costo de Argon2)."""

    def __init__(self) -> None:
        self.hash_calls: list[str] = []

    def hash(self, plaintext: str) -> str:
        self.hash_calls.append(plaintext)
        return f"hashed:{plaintext}"

    def verify(self, plaintext: str, hashed: str) -> bool:
        return hashed == f"hashed:{plaintext}"


@pytest.fixture
def password_hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


# ============================================================================
# Domain Entity Fixtures
# ============================================================================

_BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_user(
    *,
    email: str,
    username: str,
    full_name: str | None = None,
    password: str = "secret1",
    role: UserRole = UserRole.USER,
    minutes: int = 0,
) -> User:
    """Crea un User con hash del FakePasswordHasher y created_at controlado."""
    return User(
        id=uuid4(),
        email=email,
        username=username,
        full_name=full_name,
        password_hash=f"hashed:{password}",
        role=role,
        created_at=_BASE_TIME + timedelta(minutes=minutes),
    )


def caller_for(user: User) -> CallerContext:
    return CallerContext(caller_id=user.id, caller_role=user.role)


@pytest.fixture
def alice() -> User:
    return make_user(
        email="a@x.com", username="alice", full_name="Alice Liddell", minutes=1
    )


@pytest.fixture
def bob() -> User:
    return make_user(email="b@x.com", username="bob", full_name="Bob Stone", minutes=2)


@pytest.fixture
def admin_user() -> User:
    return make_user(
        email="root@x.com", username="root", role=UserRole.ADMIN, minutes=0
    )


@pytest.fixture
def admin_caller(admin_user: User) -> CallerContext:
    return caller_for(admin_user)


@pytest.fixture
def user_repo(admin_user: User, alice: User, bob: User) -> InMemoryUserRepository:
    """Store con admin + A + B (ejemplo canónico)."""
    repo = InMemoryUserRepository()
    for user in (admin_user, alice, bob):
        repo.create_user(user)
    return repo


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def caller_of():
    return caller_for
