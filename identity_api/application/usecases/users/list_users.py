"""
===============================================================================
USE CASE: List Users
===============================================================================

Business Goal:
    Listar todos los registros (consola administrativa), más nuevos primero.

CRC:
    Class: ListUsersUseCase
    Responsibilities:
      - Autorizar (READ_MANY, solo ADMIN).
      - Delegar el orden al repositorio (created_at DESC, id DESC).
      - Proyectar cada registro a UserView.
    Collaborators:
      - UserRepository.list_users
      - user_access.gate_operation
===============================================================================
"""

from __future__ import annotations

from ....domain.entities import CallerContext
from ....domain.repositories import UserRepository
from ....domain.user_policy import OperationKind
from ....domain.views import UserView
from .user_access import gate_operation
from .user_results import UserListResult


class ListUsersUseCase:
    def __init__(self, repository: UserRepository):
        self._users = repository

    def execute(self, caller: CallerContext) -> UserListResult:
        denied = gate_operation(caller, OperationKind.READ_MANY)
        if denied is not None:
            return UserListResult(error=denied)

        return UserListResult(
            users=[UserView.from_user(user) for user in self._users.list_users()]
        )
