"""
===============================================================================
USE CASE: Update User Role
===============================================================================

Business Goal:
    Cambiar el rol de un registro (solo ADMIN). Ningún otro campo cambia.

CRC:
    Class: UpdateUserRoleUseCase
    Responsibilities:
      - Autorizar (UPDATE_ROLE).
      - NOT_FOUND "to update" si el target no existe.
      - Persistir solo role y devolver la vista administrativa.
    Collaborators:
      - UserRepository.get_user_by_id / update_user(role=...)
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.entities import CallerContext, UserRole
from ....domain.repositories import UserRepository
from ....domain.user_policy import OperationKind
from ....domain.views import UserView
from .user_access import gate_operation
from .user_results import UserResult, not_found_error

_UPDATE_ACTION = "update"


class UpdateUserRoleUseCase:
    def __init__(self, repository: UserRepository):
        self._users = repository

    def execute(self, caller: CallerContext, user_id: UUID, role: UserRole) -> UserResult:
        denied = gate_operation(caller, OperationKind.UPDATE_ROLE)
        if denied is not None:
            return UserResult(error=denied)

        if self._users.get_user_by_id(user_id) is None:
            return UserResult(error=not_found_error(_UPDATE_ACTION))

        updated = self._users.update_user(user_id, role=role)
        if updated is None:
            return UserResult(error=not_found_error(_UPDATE_ACTION))

        return UserResult(user=UserView.from_user(updated))
