"""
===============================================================================
USE CASES: Update User Password (by id / own)
===============================================================================

Name:
    Update User Password / Change Own Password

Business Goal:
    Reemplazar el hash de credencial de un registro, y SOLO eso:
      - by id: reset administrativo (ADMIN), sin contraseña actual.
      - own: self-service, la contraseña actual debe verificar primero.

Why (Context / Intención):
    - No se toman locks entre hash y persistencia. Si el registro desaparece
      en el medio, se reporta NOT_FOUND: el caller nunca cree que cambió.
    - Un fallo de infraestructura en el write propaga (DatabaseError) y el
      borde responde 503; updated=True solo se devuelve tras persistir.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Classes:
    UpdateUserPasswordUseCase, ChangeOwnPasswordUseCase

Responsibilities:
    - Autorizar (UPDATE_CREDENTIAL / UPDATE_OWN_CREDENTIAL).
    - Verificar existencia y, en self-service, la contraseña actual.
    - Hashear y persistir únicamente password_hash.

Collaborators:
    - UserRepository: get_user_by_id / update_user(password_hash=...)
    - PasswordHasher: hash / verify

Error Mapping:
    - FORBIDDEN: by id con caller no ADMIN
    - NOT_FOUND: target inexistente
    - INVALID_CREDENTIAL: contraseña actual incorrecta (hash intacto)
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.entities import CallerContext, User
from ....domain.repositories import UserRepository
from ....domain.services import PasswordHasher
from ....domain.user_policy import OperationKind
from .user_access import gate_operation
from .user_results import (
    PasswordUpdateResult,
    invalid_credential_error,
    not_found_error,
)

_UPDATE_ACTION = "update"


def _replace_hash(
    users: UserRepository, hasher: PasswordHasher, target: User, password: str
) -> PasswordUpdateResult:
    # Hash fuera de cualquier lock; el write es atómico por registro.
    new_hash = hasher.hash(password)
    updated = users.update_user(target.id, password_hash=new_hash)
    if updated is None:
        return PasswordUpdateResult(error=not_found_error(_UPDATE_ACTION))
    return PasswordUpdateResult(updated=True)


class UpdateUserPasswordUseCase:
    """Reset administrativo de credencial por id."""

    def __init__(self, repository: UserRepository, password_hasher: PasswordHasher):
        self._users = repository
        self._hasher = password_hasher

    def execute(
        self, caller: CallerContext, user_id: UUID, password: str
    ) -> PasswordUpdateResult:
        denied = gate_operation(caller, OperationKind.UPDATE_CREDENTIAL)
        if denied is not None:
            return PasswordUpdateResult(error=denied)

        target = self._users.get_user_by_id(user_id)
        if target is None:
            return PasswordUpdateResult(error=not_found_error(_UPDATE_ACTION))

        return _replace_hash(self._users, self._hasher, target, password)


class ChangeOwnPasswordUseCase:
    """Cambio de credencial self-service (requiere la contraseña actual)."""

    def __init__(self, repository: UserRepository, password_hasher: PasswordHasher):
        self._users = repository
        self._hasher = password_hasher

    def execute(
        self, caller: CallerContext, current_password: str, password: str
    ) -> PasswordUpdateResult:
        denied = gate_operation(caller, OperationKind.UPDATE_OWN_CREDENTIAL)
        if denied is not None:
            return PasswordUpdateResult(error=denied)

        target = self._users.get_user_by_id(caller.caller_id)
        if target is None:
            return PasswordUpdateResult(error=not_found_error(_UPDATE_ACTION))

        if not self._hasher.verify(current_password, target.password_hash):
            logger.info(
                "Own password change rejected: current password mismatch",
                extra={"caller_id": str(caller.caller_id)},
            )
            return PasswordUpdateResult(error=invalid_credential_error())

        return _replace_hash(self._users, self._hasher, target, password)
