"""
Repository adapters for the identity store.

- in_memory: thread-safe dict-backed store (tests / local dev)
- postgres: psycopg 3 store backed by the `users` table
"""

from .in_memory import InMemoryAuditEventRepository, InMemoryUserRepository
from .postgres import PostgresUserRepository

__all__ = [
    "InMemoryUserRepository",
    "InMemoryAuditEventRepository",
    "PostgresUserRepository",
]
