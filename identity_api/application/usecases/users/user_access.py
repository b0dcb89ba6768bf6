"""
===============================================================================
USER ACCESS HELPERS (Policy gate + Uniqueness gate)
===============================================================================

Name:
    User Access Helpers

Business Goal:
    Centralizar los dos "gates" que comparten todos los casos de uso de
    usuarios, garantizando que:
      - la policy se evalúa SIEMPRE primero y un deny corta el flujo
      - los conflictos de unicidad producen el mismo mensaje en create/update
      - las métricas y logs de deny/conflicto se emiten en un único lugar

-------------------------------------------------------------------------------
CRC CARD (Functions-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    user_access helpers (module-level functions)

Responsibilities:
    - gate_operation(): authorize() + log + métrica, devuelve UserError | None.
    - gate_uniqueness(): check_conflicts() + log + métrica.
    - duplicate_to_error(): traduce DuplicateUserError (árbitro final del
      store) al mismo UserError que el pre-chequeo.

Collaborators:
    - domain.user_policy.authorize / OperationKind
    - domain.uniqueness.check_conflicts / conflict_message
    - crosscutting.metrics.record_policy_denial / record_conflict
    - crosscutting.exceptions.DuplicateUserError
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.exceptions import DuplicateUserError
from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_conflict, record_policy_denial
from ....domain.entities import CallerContext, User
from ....domain.uniqueness import UserLookup, check_conflicts, conflict_message
from ....domain.user_policy import OperationKind, authorize
from .user_results import UserError, conflict_error, forbidden_error


def gate_operation(
    caller: CallerContext,
    operation: OperationKind,
    target: User | None = None,
) -> UserError | None:
    """Evalúa la policy; devuelve FORBIDDEN (y registra) si deniega."""
    decision = authorize(caller, operation, target)
    if decision.allowed:
        return None

    logger.info(
        "Policy deny",
        extra={
            "operation": operation.value,
            "caller_id": str(caller.caller_id),
            "caller_role": caller.caller_role.value,
            "reason": decision.reason,
        },
    )
    record_policy_denial(operation.value)
    return forbidden_error()


def gate_uniqueness(
    users: UserLookup,
    *,
    email: str | None = None,
    username: str | None = None,
    exclude_id: UUID | None = None,
) -> UserError | None:
    """Pre-chequeo de unicidad (email antes que username)."""
    result = check_conflicts(
        users, email=email, username=username, exclude_id=exclude_id
    )
    if not result.has_conflict:
        return None

    logger.info("Uniqueness conflict", extra={"field": result.field.value})
    record_conflict(result.field.value)
    return conflict_error(result.message)


def duplicate_to_error(exc: DuplicateUserError) -> UserError:
    """Conflicto detectado por el store (carrera entre pre-chequeo y write)."""
    logger.warning(
        "Uniqueness conflict raised by store", extra={"field": exc.field}
    )
    record_conflict(exc.field)
    return conflict_error(conflict_message(exc.field, exc.value))
