"""
===============================================================================
USE CASE: Update User Profile (by id / own)
===============================================================================

Name:
    Update User Profile Use Case

Business Goal:
    Modificar campos de perfil (email, username, fullName) garantizando:
      - unicidad de email/username ignorando el propio registro
      - la credencial y el rol NO se tocan

Why (Context / Intención):
    - "by id" (consola admin) y "own" (self-service) son la MISMA operación:
      solo cambian cómo se resuelve el target y qué OperationKind se evalúa.
      Una sola implementación evita que diverjan.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    UpdateUserProfileUseCase

Responsibilities:
    - execute(): target = input.user_id, policy UPDATE_PROFILE (ADMIN).
    - execute_own(): target = caller.caller_id, policy UPDATE_OWN_PROFILE.
    - Verificar existencia (NOT_FOUND "to update").
    - Verificar unicidad con exclude_id = target.
    - Persistir solo los campos provistos.

Collaborators:
    - UserRepository: get_user_by_id / get_user_by_email /
      get_user_by_username / update_user
    - user_access helpers

Error Mapping:
    - FORBIDDEN: by id con caller no ADMIN
    - NOT_FOUND: target inexistente (o borrado entre lectura y write)
    - CONFLICT: email/username tomados por otro registro
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....crosscutting.exceptions import DuplicateUserError
from ....domain.entities import CallerContext
from ....domain.repositories import UserRepository
from ....domain.user_policy import OperationKind
from ....domain.views import UserView
from .user_access import duplicate_to_error, gate_operation, gate_uniqueness
from .user_results import UserResult, not_found_error

_UPDATE_ACTION = "update"


@dataclass(frozen=True)
class UpdateUserProfileInput:
    """
    DTO de entrada. None = campo no provisto (se conserva).

    user_id se ignora en execute_own(): el target es el propio caller.
    """

    caller: CallerContext
    user_id: UUID | None = None
    email: str | None = None
    username: str | None = None
    full_name: str | None = None


class UpdateUserProfileUseCase:
    def __init__(self, repository: UserRepository):
        self._users = repository

    def execute(self, input_data: UpdateUserProfileInput) -> UserResult:
        """Update administrativo por id."""
        denied = gate_operation(input_data.caller, OperationKind.UPDATE_PROFILE)
        if denied is not None:
            return UserResult(error=denied)

        if input_data.user_id is None:
            return UserResult(error=not_found_error(_UPDATE_ACTION))

        return self._apply(input_data.user_id, input_data)

    def execute_own(self, input_data: UpdateUserProfileInput) -> UserResult:
        """Update self-service: el target sale del caller context."""
        denied = gate_operation(input_data.caller, OperationKind.UPDATE_OWN_PROFILE)
        if denied is not None:
            return UserResult(error=denied)

        return self._apply(input_data.caller.caller_id, input_data)

    def _apply(self, target_id: UUID, input_data: UpdateUserProfileInput) -> UserResult:
        target = self._users.get_user_by_id(target_id)
        if target is None:
            return UserResult(error=not_found_error(_UPDATE_ACTION))

        # exclude_id: conservar el propio email/username nunca es conflicto.
        conflict = gate_uniqueness(
            self._users,
            email=input_data.email,
            username=input_data.username,
            exclude_id=target.id,
        )
        if conflict is not None:
            return UserResult(error=conflict)

        try:
            updated = self._users.update_user(
                target.id,
                email=input_data.email,
                username=input_data.username,
                full_name=input_data.full_name,
            )
        except DuplicateUserError as exc:
            return UserResult(error=duplicate_to_error(exc))

        if updated is None:
            return UserResult(error=not_found_error(_UPDATE_ACTION))

        return UserResult(user=UserView.from_user(updated))
