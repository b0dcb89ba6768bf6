"""
Name: Postgres User Repository Tests

Responsibilities:
  - Validate SQL shape (parameterized, whitelisted columns)
  - Validate row mapping and error translation
  - Offline unit tests (fake pool, no real DB)
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest
from psycopg import errors as pg_errors

from identity_api.crosscutting.exceptions import DatabaseError, DuplicateUserError
from identity_api.domain.entities import UserRole
from identity_api.infrastructure.repositories import PostgresUserRepository

pytestmark = pytest.mark.unit


class _UniqueViolation(pg_errors.UniqueViolation):
    def __init__(self, constraint_name):
        super().__init__("duplicate key value violates unique constraint")
        self._constraint_name = constraint_name

    @property
    def diag(self):
        return SimpleNamespace(constraint_name=self._constraint_name)


class FakeCursor:
    def __init__(self, rows):
        self._rows = rows

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.calls = []

    def execute(self, query, params=None):
        self.calls.append((query, params))
        if self.error is not None:
            raise self.error
        return FakeCursor(self.rows)


class FakePool:
    def __init__(self, conn):
        self.conn = conn

    @contextmanager
    def connection(self):
        yield self.conn


def _row(role="USER"):
    return (
        uuid4(),
        "a@x.com",
        "alice",
        "Alice",
        "hash",
        role,
        datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


def _repo(**kwargs):
    conn = FakeConnection(**kwargs)
    return PostgresUserRepository(pool=FakePool(conn)), conn


def test_get_user_by_id_maps_row():
    row = _row()
    repo, conn = _repo(rows=[row])

    user = repo.get_user_by_id(row[0])

    assert user.id == row[0]
    assert user.role == UserRole.USER
    query, params = conn.calls[0]
    assert "WHERE id = %s" in query
    assert params == (row[0],)


def test_unknown_role_is_database_error():
    repo, _ = _repo(rows=[_row(role="SUPERUSER")])

    with pytest.raises(DatabaseError):
        repo.get_user_by_email("a@x.com")


def test_missing_row_is_none():
    repo, _ = _repo(rows=[])

    assert repo.get_user_by_username("ghost") is None


def test_list_users_orders_newest_first():
    repo, conn = _repo(rows=[_row(), _row()])

    assert len(repo.list_users()) == 2
    assert "ORDER BY created_at DESC, id DESC" in conn.calls[0][0]


def test_search_uses_strpos_per_field():
    repo, conn = _repo(rows=[_row()])

    repo.search_users({"username": "ali", "full_name": "Al"})

    query, params = conn.calls[0]
    assert "strpos(username, %s) > 0" in query
    assert "strpos(full_name, %s) > 0" in query
    assert " AND " in query
    assert params == ("ali", "Al")


def test_search_without_criteria_skips_db():
    repo, conn = _repo(rows=[_row()])

    assert repo.search_users({}) == []
    assert conn.calls == []


def test_search_rejects_unknown_field():
    repo, _ = _repo()

    with pytest.raises(ValueError):
        repo.search_users({"password_hash": "x"})


def test_update_sets_only_present_columns():
    row = _row()
    repo, conn = _repo(rows=[row])

    repo.update_user(row[0], password_hash="new")

    query, params = conn.calls[0]
    assert "password_hash = %s" in query
    assert "email = %s" not in query
    assert params == ("new", row[0])


@pytest.mark.parametrize(
    "constraint, field, value",
    [("uq_users_email", "email", "a@x.com"), ("uq_users_username", "username", "al")],
)
def test_unique_violation_maps_to_duplicate(constraint, field, value):
    repo, _ = _repo(error=_UniqueViolation(constraint))
    user_id = uuid4()

    with pytest.raises(DuplicateUserError) as exc_info:
        repo.update_user(user_id, email="a@x.com", username="al")

    assert exc_info.value.field == field
    assert exc_info.value.value == value


def test_other_failures_are_database_errors():
    repo, _ = _repo(error=RuntimeError("connection reset"))

    with pytest.raises(DatabaseError):
        repo.delete_user(uuid4())
