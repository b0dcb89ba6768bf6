"""
===============================================================================
USE CASE: Delete User
===============================================================================

Business Goal:
    Borrar (hard delete) un registro y devolver su vista administrativa.

Why (Context / Intención):
    - La respuesta "eco" del registro borrado también pasa por UserView:
      el hash no sale ni siquiera en delete.

CRC:
    Class: DeleteUserUseCase
    Responsibilities:
      - Autorizar (DELETE, solo ADMIN).
      - NOT_FOUND "to delete" si el target no existe.
    Collaborators:
      - UserRepository.delete_user (devuelve el registro removido o None)
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.entities import CallerContext
from ....domain.repositories import UserRepository
from ....domain.user_policy import OperationKind
from ....domain.views import UserView
from .user_access import gate_operation
from .user_results import UserResult, not_found_error


class DeleteUserUseCase:
    def __init__(self, repository: UserRepository):
        self._users = repository

    def execute(self, caller: CallerContext, user_id: UUID) -> UserResult:
        denied = gate_operation(caller, OperationKind.DELETE)
        if denied is not None:
            return UserResult(error=denied)

        deleted = self._users.delete_user(user_id)
        if deleted is None:
            return UserResult(error=not_found_error("delete"))

        return UserResult(user=UserView.from_user(deleted))
