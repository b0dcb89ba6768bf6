"""
Name: Argon2 Password Hasher Tests

Responsibilities:
  - Validate hash/verify contract (salted, never raises on mismatch)
"""

import pytest

from identity_api.identity.passwords import Argon2PasswordHasher

pytestmark = pytest.mark.unit


@pytest.fixture(scope="module")
def hasher() -> Argon2PasswordHasher:
    return Argon2PasswordHasher()


def test_hash_is_not_plaintext_and_verifies(hasher):
    hashed = hasher.hash("secret1")

    assert hashed != "secret1"
    assert hashed.startswith("$argon2")
    assert hasher.verify("secret1", hashed) is True


def test_hash_is_salted(hasher):
    assert hasher.hash("secret1") != hasher.hash("secret1")


def test_wrong_password_is_false(hasher):
    assert hasher.verify("wrong", hasher.hash("secret1")) is False


def test_garbage_hash_is_false(hasher):
    assert hasher.verify("secret1", "not-a-hash") is False
