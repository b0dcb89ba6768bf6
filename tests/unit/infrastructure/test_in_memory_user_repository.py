"""
Name: In-Memory User Repository Tests

Responsibilities:
  - Validate ordering, uniqueness under lock and partial updates
  - Validate search pushdown semantics ({} => [])
"""

from concurrent.futures import ThreadPoolExecutor
from uuid import uuid4

import pytest

from identity_api.crosscutting.exceptions import DuplicateUserError
from identity_api.domain.entities import UserRole
from identity_api.infrastructure.repositories import InMemoryUserRepository

pytestmark = pytest.mark.unit


def test_list_is_newest_first_with_id_tiebreak(user_factory):
    repo = InMemoryUserRepository()
    first = user_factory(email="1@x.com", username="one", minutes=5)
    second = user_factory(email="2@x.com", username="two", minutes=5)
    older = user_factory(email="3@x.com", username="three", minutes=1)
    for user in (older, first, second):
        repo.create_user(user)

    listed = repo.list_users()

    assert listed[-1].id == older.id
    assert [u.id for u in listed[:2]] == sorted([first.id, second.id], reverse=True)


def test_create_rejects_duplicate_email_before_username(user_repo, user_factory):
    with pytest.raises(DuplicateUserError) as exc_info:
        user_repo.create_user(user_factory(email="a@x.com", username="bob"))

    assert exc_info.value.field == "email"
    assert exc_info.value.value == "a@x.com"


def test_create_stamps_created_at_when_missing(user_factory):
    from dataclasses import replace

    repo = InMemoryUserRepository()
    stored = repo.create_user(
        replace(user_factory(email="n@x.com", username="n"), created_at=None)
    )

    assert stored.created_at is not None


def test_update_applies_only_given_fields(user_repo, bob):
    updated = user_repo.update_user(bob.id, role=UserRole.ADMIN)

    assert updated.role == UserRole.ADMIN
    assert updated.email == bob.email
    assert updated.password_hash == bob.password_hash


def test_update_to_taken_username_raises(user_repo, bob):
    with pytest.raises(DuplicateUserError) as exc_info:
        user_repo.update_user(bob.id, username="alice")

    assert exc_info.value.field == "username"
    assert user_repo.get_user_by_id(bob.id).username == "bob"


def test_update_missing_returns_none(user_repo):
    assert user_repo.update_user(uuid4(), full_name="X") is None


def test_delete_returns_removed_record(user_repo, alice):
    removed = user_repo.delete_user(alice.id)

    assert removed.id == alice.id
    assert user_repo.delete_user(alice.id) is None


def test_search_empty_criteria_returns_empty(user_repo):
    assert user_repo.search_users({}) == []


def test_search_substring_and(user_repo, alice):
    assert [u.id for u in user_repo.search_users({"full_name": "Lid"})] == [alice.id]
    assert user_repo.search_users({"full_name": "Lid", "username": "bob"}) == []


def test_concurrent_creates_keep_username_unique(user_factory):
    repo = InMemoryUserRepository()
    candidates = [
        user_factory(email=f"{i}@x.com", username="same") for i in range(8)
    ]

    def _create(user):
        try:
            repo.create_user(user)
            return True
        except DuplicateUserError:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(_create, candidates))

    assert outcomes.count(True) == 1
    assert len(repo.list_users()) == 1
