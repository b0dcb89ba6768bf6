"""
===============================================================================
USE CASES: Get User (by id / by username)
===============================================================================

Business Goal:
    Leer un registro de identidad:
      - por id: consulta administrativa (solo ADMIN), vista completa.
      - por username: perfil público (cualquier autenticado), vista pública.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Classes:
    GetUserUseCase, GetUserByUsernameUseCase

Responsibilities:
    - Autorizar (READ_ONE / READ_PUBLIC_PROFILE).
    - Buscar el registro; NOT_FOUND si no existe.
    - Proyectar a la vista correspondiente (nunca el hash).

Collaborators:
    - UserRepository: get_user_by_id / get_user_by_username
    - user_access.gate_operation

Notas:
    - El username se compara por igualdad exacta (incluye texto no-ASCII).
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.entities import CallerContext
from ....domain.repositories import UserRepository
from ....domain.user_policy import OperationKind
from ....domain.views import PublicUserView, UserView
from .user_access import gate_operation
from .user_results import PublicUserResult, UserResult, not_found_error

_READ_ACTION = "read"


class GetUserUseCase:
    """Lectura administrativa por id."""

    def __init__(self, repository: UserRepository):
        self._users = repository

    def execute(self, caller: CallerContext, user_id: UUID) -> UserResult:
        denied = gate_operation(caller, OperationKind.READ_ONE)
        if denied is not None:
            return UserResult(error=denied)

        user = self._users.get_user_by_id(user_id)
        if user is None:
            return UserResult(error=not_found_error(_READ_ACTION))

        return UserResult(user=UserView.from_user(user))


class GetUserByUsernameUseCase:
    """Lectura del perfil público por username."""

    def __init__(self, repository: UserRepository):
        self._users = repository

    def execute(self, caller: CallerContext, username: str) -> PublicUserResult:
        denied = gate_operation(caller, OperationKind.READ_PUBLIC_PROFILE)
        if denied is not None:
            return PublicUserResult(error=denied)

        user = self._users.get_user_by_username(username)
        if user is None:
            return PublicUserResult(error=not_found_error(_READ_ACTION))

        return PublicUserResult(user=PublicUserView.from_user(user))
