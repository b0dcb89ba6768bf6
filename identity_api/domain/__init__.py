"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Mantener estable el "surface area" del dominio.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .audit import AuditEvent
from .entities import CallerContext, User, UserRole
from .repositories import AuditEventRepository, UserRepository
from .services import PasswordHasher
from .uniqueness import ConflictOn, NoConflict, UniqueField, check_conflicts
from .user_policy import OperationKind, PolicyDecision, authorize
from .user_search import SearchFilter
from .views import PublicUserView, UserView

__all__ = [
    # Entities
    "User",
    "UserRole",
    "CallerContext",
    "AuditEvent",
    # Views
    "UserView",
    "PublicUserView",
    # Ports
    "UserRepository",
    "AuditEventRepository",
    "PasswordHasher",
    # Policy / invariants
    "OperationKind",
    "PolicyDecision",
    "authorize",
    "UniqueField",
    "ConflictOn",
    "NoConflict",
    "check_conflicts",
    "SearchFilter",
]
