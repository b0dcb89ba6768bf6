"""
Name: Audit Emission Tests

Responsibilities:
  - Validate actor/metadata normalization
  - Ensure credentials never reach metadata and failures are swallowed
"""

import pytest

from identity_api.audit import emit_audit_event
from identity_api.infrastructure.repositories import InMemoryAuditEventRepository

pytestmark = pytest.mark.unit


class BrokenAuditRepository:
    def record_event(self, event):
        raise RuntimeError("disk full")


def test_emit_records_actor_and_target(admin_caller, bob):
    repo = InMemoryAuditEventRepository()

    emit_audit_event(
        repo, action="users.update_role", caller=admin_caller, target_id=bob.id,
        metadata={"role": "ADMIN"},
    )

    [event] = repo.list_events()
    assert event.actor == f"user:{admin_caller.caller_id}"
    assert event.target_id == bob.id
    assert event.metadata["role"] == "ADMIN"
    assert event.created_at is not None


def test_credentials_are_dropped_from_metadata(admin_caller):
    repo = InMemoryAuditEventRepository()

    emit_audit_event(
        repo,
        action="users.create",
        caller=admin_caller,
        metadata={"password": "x", "nested": {"password_hash": "y", "ok": 1}},
    )

    [event] = repo.list_events()
    assert "password" not in event.metadata
    assert event.metadata["nested"] == {"ok": 1}


def test_emit_is_best_effort(admin_caller):
    emit_audit_event(BrokenAuditRepository(), action="users.delete", caller=admin_caller)


def test_emit_without_repository_is_noop():
    emit_audit_event(None, action="auth.login")


def test_list_events_filters_newest_first(admin_caller, alice, bob):
    repo = InMemoryAuditEventRepository()
    emit_audit_event(repo, action="users.update", caller=admin_caller, target_id=alice.id)
    emit_audit_event(repo, action="users.delete", caller=admin_caller, target_id=bob.id)
    emit_audit_event(repo, action="auth.login", caller=admin_caller)

    actions = [e.action for e in repo.list_events(action_prefix="users.")]
    assert actions == ["users.delete", "users.update"]
    assert [e.action for e in repo.list_events(target_id=alice.id)] == ["users.update"]
