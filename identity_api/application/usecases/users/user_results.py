"""
===============================================================================
USER USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    User Use Case Results

Business Goal:
    Proveer modelos compartidos de resultados y errores para los casos de uso
    de registros de identidad, con un contrato estable y explícito para:
      - autorización (policy deny)
      - registros no encontrados (mensaje por operación)
      - conflictos de unicidad (email / username)
      - credencial actual incorrecta (self-service)

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de lanzar excepciones
      para desenlaces de negocio; el borde HTTP mapea code -> status.
    - Los mensajes viven acá (y en domain.uniqueness) para que sean idénticos
      en todas las operaciones.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    user_results models (module)

Responsibilities:
    - Definir UserErrorCode (set acotado).
    - Representar UserError (code + message).
    - Representar resultados:
        * UserResult (vista administrativa)
        * PublicUserResult (vista pública / self)
        * UserListResult (lista de vistas)
        * PasswordUpdateResult (marcador de éxito, sin vista)
    - Fábricas de errores con mensajes estables.

Collaborators:
    - domain.views.UserView / PublicUserView (nunca User crudo)
    - domain.user_policy.PERMISSION_DENIED_MESSAGE
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Final, List

from ....domain.user_policy import PERMISSION_DENIED_MESSAGE
from ....domain.views import PublicUserView, UserView

INVALID_CREDENTIAL_MESSAGE: Final[str] = "Password is incorrect"


class UserErrorCode(str, Enum):
    """
    Códigos de error para casos de uso de usuarios.

    Códigos:
      - FORBIDDEN: la policy denegó la operación.
      - NOT_FOUND: el registro target no existe.
      - CONFLICT: email o username ya tomados por otro registro.
      - INVALID_CREDENTIAL: la contraseña actual no verifica (self-service).
    """

    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"


@dataclass(frozen=True)
class UserError:
    """Error de caso de uso (categoría estable + mensaje para el cliente)."""

    code: UserErrorCode
    message: str


@dataclass
class UserResult:
    """
    Resultado con un único registro en vista administrativa.

    Contrato:
      - error is None => user presente
      - error != None => user None
    """

    user: UserView | None = None
    error: UserError | None = None


@dataclass
class PublicUserResult:
    """Resultado con un único registro en vista pública."""

    user: PublicUserView | None = None
    error: UserError | None = None


@dataclass
class UserListResult:
    """Resultado de listados/búsquedas (siempre lista, posiblemente vacía)."""

    users: List[UserView] = field(default_factory=list)
    error: UserError | None = None


@dataclass
class PasswordUpdateResult:
    """
    Resultado de comandos de credencial.

    updated=True solo si el hash nuevo quedó persistido.
    """

    updated: bool = False
    error: UserError | None = None


# =============================================================================
# Fábricas de errores (mensajes estables)
# =============================================================================


def forbidden_error() -> UserError:
    return UserError(code=UserErrorCode.FORBIDDEN, message=PERMISSION_DENIED_MESSAGE)


def not_found_error(action: str) -> UserError:
    """Mensaje por operación: 'The User to {action} does not exist.'"""
    return UserError(
        code=UserErrorCode.NOT_FOUND,
        message=f"The User to {action} does not exist.",
    )


def conflict_error(message: str) -> UserError:
    return UserError(code=UserErrorCode.CONFLICT, message=message)


def invalid_credential_error() -> UserError:
    return UserError(
        code=UserErrorCode.INVALID_CREDENTIAL,
        message=INVALID_CREDENTIAL_MESSAGE,
    )
