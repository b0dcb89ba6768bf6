"""
Name: Uniqueness Guard Tests

Responsibilities:
  - Validate email-before-username ordering
  - Validate exclude_id semantics and conflict messages
"""

import pytest

from identity_api.domain.uniqueness import (
    NO_CONFLICT,
    ConflictOn,
    UniqueField,
    check_conflicts,
    conflict_message,
)

pytestmark = pytest.mark.unit


def test_no_fields_means_no_conflict(user_repo):
    assert check_conflicts(user_repo) == NO_CONFLICT


def test_free_values_have_no_conflict(user_repo):
    result = check_conflicts(user_repo, email="new@x.com", username="carol")

    assert result.has_conflict is False


def test_email_conflict(user_repo):
    result = check_conflicts(user_repo, email="a@x.com", username="carol")

    assert result == ConflictOn(field=UniqueField.EMAIL, value="a@x.com")
    assert result.message == "Email a@x.com already exists."


def test_username_conflict(user_repo):
    result = check_conflicts(user_repo, email="new@x.com", username="alice")

    assert result.has_conflict is True
    assert result.message == "Username alice already exists."


def test_email_is_checked_before_username(user_repo):
    # email de A y username de B: reporta email.
    result = check_conflicts(user_repo, email="a@x.com", username="bob")

    assert result.field == UniqueField.EMAIL


def test_exclude_id_keeps_own_values(user_repo, alice):
    result = check_conflicts(
        user_repo, email="a@x.com", username="alice", exclude_id=alice.id
    )

    assert result.has_conflict is False


def test_exclude_id_does_not_hide_other_records(user_repo, bob):
    result = check_conflicts(user_repo, username="alice", exclude_id=bob.id)

    assert result == ConflictOn(field=UniqueField.USERNAME, value="alice")


def test_conflict_message_accepts_raw_field_name():
    assert conflict_message("username", "zoe") == "Username zoe already exists."
