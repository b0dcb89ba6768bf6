"""
Name: Domain Service Interfaces (Ports)

Responsibilities:
  - Define the credential hashing contract consumed by the use cases.

Collaborators:
  - identity.passwords.Argon2PasswordHasher: production implementation
  - application.usecases.users: create / password updates / login

Constraints:
  - hash() must be a slow, salted, one-way function.
  - verify() must never raise for a mismatch; it returns False.
"""

from typing import Protocol


class PasswordHasher(Protocol):
    """R: One-way credential hashing + verification."""

    def hash(self, plaintext: str) -> str:
        """R: Hash a plaintext password into an opaque string."""
        ...

    def verify(self, plaintext: str, hashed: str) -> bool:
        """R: True if plaintext matches hashed (constant-time compare)."""
        ...
