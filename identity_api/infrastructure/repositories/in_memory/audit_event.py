# =============================================================================
# FILE: infrastructure/repositories/in_memory/audit_event.py
# =============================================================================
"""
In-Memory Audit Event Repository for testing and development.

NOT FOR PRODUCTION USE - data is lost on restart.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import List
from uuid import UUID

from ....domain.audit import AuditEvent


class InMemoryAuditEventRepository:
    """
    In-memory implementation of AuditEventRepository.

    Useful for:
      - Unit testing
      - Local development without database
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._events: List[AuditEvent] = []

    def record_event(self, event: AuditEvent) -> None:
        """Persist an audit event (stamps created_at if missing)."""
        stored = (
            event
            if event.created_at
            else replace(event, created_at=datetime.now(timezone.utc))
        )
        with self._lock:
            self._events.append(stored)

    def list_events(
        self,
        *,
        action_prefix: str | None = None,
        target_id: UUID | None = None,
        limit: int = 100,
    ) -> List[AuditEvent]:
        """List audit events, newest first."""
        with self._lock:
            results = list(self._events)

        if action_prefix:
            results = [e for e in results if e.action.startswith(action_prefix)]
        if target_id is not None:
            results = [e for e in results if e.target_id == target_id]

        # Insertion order is chronological.
        results.reverse()
        return results[: max(limit, 0)]

    # -------------------------------------------------------------------------
    # Testing helpers
    # -------------------------------------------------------------------------
    def clear(self) -> None:
        """Clear all data (for testing)."""
        with self._lock:
            self._events.clear()
