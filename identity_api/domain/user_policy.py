"""
===============================================================================
TARJETA CRC — domain/user_policy.py
===============================================================================

Módulo:
    Política de Acceso a Registros de Identidad (Policy Engine)

Responsabilidades:
    - Definir el catálogo cerrado de operaciones (OperationKind).
    - Decidir Allow/Deny a partir de (caller, operación, target opcional).
    - Ser 100% testeable: funciones puras, inputs explícitos, sin DB ni FastAPI.

Colaboradores:
    - domain.entities.CallerContext, User, UserRole
    - application.usecases.users.*: llaman authorize() como primer paso.

Reglas:
    - UPDATE_OWN_PROFILE / UPDATE_OWN_CREDENTIAL: Allow para cualquier caller
      autenticado actuando sobre sí mismo.
    - READ_PUBLIC_PROFILE: Allow para cualquier caller autenticado.
    - Resto de operaciones: requieren rol ADMIN.
    - Deny lleva siempre la misma razón ("insufficient permission").
    - Un caller no autenticado nunca llega acá (401 en el borde).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

from .entities import CallerContext, User

DENY_REASON: Final[str] = "insufficient permission"

# Mensaje que ve el cliente cuando la policy deniega.
PERMISSION_DENIED_MESSAGE: Final[str] = "You don't have the permission"


class OperationKind(str, Enum):
    """Catálogo cerrado de operaciones sobre registros de identidad."""

    CREATE = "create"
    READ_ONE = "read_one"
    READ_MANY = "read_many"
    READ_PUBLIC_PROFILE = "read_public_profile"
    SEARCH = "search"
    UPDATE_PROFILE = "update_profile"
    UPDATE_CREDENTIAL = "update_credential"
    UPDATE_ROLE = "update_role"
    DELETE = "delete"
    UPDATE_OWN_PROFILE = "update_own_profile"
    UPDATE_OWN_CREDENTIAL = "update_own_credential"


SELF_OPERATIONS: Final[frozenset[OperationKind]] = frozenset(
    {OperationKind.UPDATE_OWN_PROFILE, OperationKind.UPDATE_OWN_CREDENTIAL}
)

AUTHENTICATED_OPERATIONS: Final[frozenset[OperationKind]] = frozenset(
    {OperationKind.READ_PUBLIC_PROFILE}
)


@dataclass(frozen=True, slots=True)
class PolicyDecision:
    """Resultado etiquetado de la policy (Allow | Deny)."""

    allowed: bool
    reason: str | None = None

    @property
    def denied(self) -> bool:
        return not self.allowed


ALLOW: Final[PolicyDecision] = PolicyDecision(allowed=True)
DENY: Final[PolicyDecision] = PolicyDecision(allowed=False, reason=DENY_REASON)


def _acts_on_self(caller: CallerContext, target: User | None) -> bool:
    # Sin target explícito, el target de una operación self ES el caller.
    return target is None or target.id == caller.caller_id


def authorize(
    caller: CallerContext,
    operation: OperationKind,
    target: User | None = None,
) -> PolicyDecision:
    """Evalúa si `caller` puede ejecutar `operation` (sobre `target`)."""
    if operation in SELF_OPERATIONS:
        return ALLOW if _acts_on_self(caller, target) else DENY

    if operation in AUTHENTICATED_OPERATIONS:
        return ALLOW

    return ALLOW if caller.is_admin else DENY
