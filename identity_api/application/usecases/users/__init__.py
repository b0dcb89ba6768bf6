"""
===============================================================================
USER USE CASES PACKAGE (Public API / Exports)
===============================================================================

Expone un punto único de importación para los casos de uso de registros de
identidad, sus DTOs de entrada y sus resultados tipados.

Collaborators:
    create_user, get_user, list_users, search_users, update_user_profile,
    update_user_password, update_user_role, delete_user, user_results
===============================================================================
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Use Cases
# -----------------------------------------------------------------------------
from .create_user import CreateUserInput, CreateUserUseCase
from .delete_user import DeleteUserUseCase
from .get_user import GetUserByUsernameUseCase, GetUserUseCase
from .list_users import ListUsersUseCase
from .search_users import SearchUsersUseCase
from .update_user_password import ChangeOwnPasswordUseCase, UpdateUserPasswordUseCase
from .update_user_profile import UpdateUserProfileInput, UpdateUserProfileUseCase
from .update_user_role import UpdateUserRoleUseCase

# -----------------------------------------------------------------------------
# Results / Errors
# -----------------------------------------------------------------------------
from .user_results import (
    PasswordUpdateResult,
    PublicUserResult,
    UserError,
    UserErrorCode,
    UserListResult,
    UserResult,
)

__all__ = [
    "CreateUserInput",
    "CreateUserUseCase",
    "DeleteUserUseCase",
    "GetUserUseCase",
    "GetUserByUsernameUseCase",
    "ListUsersUseCase",
    "SearchUsersUseCase",
    "UpdateUserProfileInput",
    "UpdateUserProfileUseCase",
    "UpdateUserPasswordUseCase",
    "ChangeOwnPasswordUseCase",
    "UpdateUserRoleUseCase",
    "UserResult",
    "PublicUserResult",
    "UserListResult",
    "PasswordUpdateResult",
    "UserError",
    "UserErrorCode",
]
