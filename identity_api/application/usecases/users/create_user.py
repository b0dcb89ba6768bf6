"""
===============================================================================
USE CASE: Create User
===============================================================================

Name:
    Create User Use Case

Business Goal:
    Crear un registro de identidad garantizando:
      - solo un ADMIN puede crear usuarios
      - email y username únicos (email se reporta primero)
      - la contraseña se persiste únicamente como hash

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateUserUseCase

Responsibilities:
    - Autorizar (OperationKind.CREATE).
    - Verificar unicidad (email, username).
    - Hashear la contraseña y persistir el registro.
    - Devolver UserResult con la vista administrativa (sin hash).

Collaborators:
    - UserRepository: get_user_by_email / get_user_by_username / create_user
    - PasswordHasher: hash(plaintext)
    - user_access: gate_operation / gate_uniqueness / duplicate_to_error

-------------------------------------------------------------------------------
INPUTS / OUTPUTS
-------------------------------------------------------------------------------
Inputs:
    CreateUserInput(caller, email, username, password, full_name, role)

Outputs:
    UserResult(user: UserView | None, error: UserError | None)

Error Mapping:
    - FORBIDDEN: caller no ADMIN
    - CONFLICT: email o username existentes (pre-chequeo o store)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from ....crosscutting.exceptions import DuplicateUserError
from ....domain.entities import CallerContext, User, UserRole
from ....domain.repositories import UserRepository
from ....domain.services import PasswordHasher
from ....domain.user_policy import OperationKind
from ....domain.views import UserView
from .user_access import duplicate_to_error, gate_operation, gate_uniqueness
from .user_results import UserResult


@dataclass(frozen=True)
class CreateUserInput:
    """
    DTO de entrada.

    Nota:
      - El payload llega validado en forma (email, largo de password, enum).
      - role es opcional en el borde; el default es USER.
    """

    caller: CallerContext
    email: str
    username: str
    password: str
    full_name: str | None = None
    role: UserRole = UserRole.USER


class CreateUserUseCase:
    """Orquesta la creación de un usuario (authorize -> unicidad -> hash -> insert)."""

    def __init__(self, repository: UserRepository, password_hasher: PasswordHasher):
        self._users = repository
        self._hasher = password_hasher

    def execute(self, input_data: CreateUserInput) -> UserResult:
        # 1) Policy primero: un caller sin permiso no aprende nada del store.
        denied = gate_operation(input_data.caller, OperationKind.CREATE)
        if denied is not None:
            return UserResult(error=denied)

        # 2) Unicidad (email antes que username).
        conflict = gate_uniqueness(
            self._users, email=input_data.email, username=input_data.username
        )
        if conflict is not None:
            return UserResult(error=conflict)

        # 3) Hash antes de persistir: el plaintext no sale de este método.
        user = User(
            id=uuid4(),
            email=input_data.email,
            username=input_data.username,
            full_name=input_data.full_name,
            password_hash=self._hasher.hash(input_data.password),
            role=input_data.role,
            created_at=datetime.now(timezone.utc),
        )

        # 4) Persistir; el store es el árbitro final ante carreras.
        try:
            created = self._users.create_user(user)
        except DuplicateUserError as exc:
            return UserResult(error=duplicate_to_error(exc))

        return UserResult(user=UserView.from_user(created))
