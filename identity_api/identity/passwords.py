"""
===============================================================================
TARJETA CRC — identity/passwords.py
===============================================================================

Módulo:
    Hasher de credenciales (Argon2)

Responsabilidades:
    - Implementar el puerto domain.services.PasswordHasher con argon2-cffi.
    - verify() nunca lanza por mismatch: devuelve False.

Colaboradores:
    - argon2.PasswordHasher (salt aleatorio + parámetros de costo por defecto)
    - application.usecases.users.*: create / password updates
    - identity.auth_users.authenticate_user: login

Notas:
    - La comparación es constant-time (la hace argon2).
    - No se loguea nunca el plaintext ni el hash.
===============================================================================
"""

from __future__ import annotations

from argon2 import PasswordHasher as _Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError


class Argon2PasswordHasher:
    """Adapter Argon2 para el puerto PasswordHasher."""

    def __init__(self, hasher: _Argon2Hasher | None = None):
        self._hasher = hasher or _Argon2Hasher()

    def hash(self, plaintext: str) -> str:
        return self._hasher.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        try:
            return self._hasher.verify(hashed, plaintext)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False
