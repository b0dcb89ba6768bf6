"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for the domain layer (ports).
- Keep the application/domain independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing (fake repositories).

Collaborators
- domain.entities: User, UserRole
- domain.audit: AuditEvent
- infrastructure.repositories: postgres / in_memory implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Implementations MUST match method signatures exactly.
- Single-record atomicity; no multi-record transactions are required.

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
- "Not found" is None, never an exception.
- Writes that break email/username uniqueness raise DuplicateUserError.
"""

from typing import List, Mapping, Optional, Protocol
from uuid import UUID

from .audit import AuditEvent
from .entities import User, UserRole


class UserRepository(Protocol):
    """
    R: Interface for identity record persistence.

    Implementations must provide:
      - Lookups by id, email and username (exact, case-sensitive)
      - Newest-first listing
      - Substring scan over email / full_name / username
      - Uniqueness enforcement on email and username as final arbiter
    """

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        """R: Fetch a user by ID (None if absent)."""
        ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        """R: Fetch a user by exact email."""
        ...

    def get_user_by_username(self, username: str) -> Optional[User]:
        """R: Fetch a user by exact username (non-ASCII allowed)."""
        ...

    def list_users(self) -> List[User]:
        """R: All users ordered by created_at DESC, id DESC."""
        ...

    def search_users(self, criteria: Mapping[str, str]) -> List[User]:
        """
        R: Users whose attributes contain every criteria value (AND).

        Args:
            criteria: User attribute name -> non-empty substring

        Returns:
            Matching users, newest first.
        """
        ...

    def create_user(self, user: User) -> User:
        """
        R: Insert a new user.

        Raises:
            DuplicateUserError: email or username already taken
        """
        ...

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
        R: Replace the given fields (None = untouched).

        Returns:
            Updated user, or None if it does not exist.

        Raises:
            DuplicateUserError: email or username already taken by another user
        """
        ...

    def delete_user(self, user_id: UUID) -> Optional[User]:
        """R: Hard delete. Returns the removed user, or None if absent."""
        ...

    def ping(self) -> bool:
        """R: Connectivity check for health endpoints."""
        ...


class AuditEventRepository(Protocol):
    """R: Append-only storage for audit events."""

    def record_event(self, event: AuditEvent) -> None:
        """R: Persist an audit event."""
        ...

    def list_events(
        self,
        *,
        action_prefix: str | None = None,
        target_id: UUID | None = None,
        limit: int = 100,
    ) -> List[AuditEvent]:
        """R: List audit events, newest first."""
        ...
