"""
===============================================================================
USE CASE: Search Users
===============================================================================

Business Goal:
    Buscar registros por email / fullName / username (substring, AND).

Why (Context / Intención):
    - Un filtro vacío NO significa "listar todo": si no vino ningún campo, o
      alguno vino vacío / null, el resultado es []. Para listar todo existe
      ListUsersUseCase.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    SearchUsersUseCase

Responsibilities:
    - Autorizar (SEARCH, solo ADMIN).
    - Aplicar la política de cero resultados (SearchFilter.has_search_intent).
    - Delegar el match al repositorio (push-down en Postgres).

Collaborators:
    - domain.user_search.SearchFilter
    - UserRepository.search_users(criteria)
===============================================================================
"""

from __future__ import annotations

from ....domain.entities import CallerContext
from ....domain.repositories import UserRepository
from ....domain.user_policy import OperationKind
from ....domain.user_search import SearchFilter
from ....domain.views import UserView
from .user_access import gate_operation
from .user_results import UserListResult


class SearchUsersUseCase:
    def __init__(self, repository: UserRepository):
        self._users = repository

    def execute(self, caller: CallerContext, filters: SearchFilter) -> UserListResult:
        denied = gate_operation(caller, OperationKind.SEARCH)
        if denied is not None:
            return UserListResult(error=denied)

        # Sin intención de búsqueda => [] sin tocar el store.
        if not filters.has_search_intent:
            return UserListResult(users=[])

        matches = self._users.search_users(filters.criteria())
        return UserListResult(users=[UserView.from_user(user) for user in matches])
