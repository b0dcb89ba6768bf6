"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message "humana" (sin filtrar secretos)

Los resultados de negocio (forbidden, not found, conflict) NO son excepciones:
viajan como resultados tipados de los casos de uso. Acá solo viven fallas de
infraestructura y la violación de unicidad detectada por el store.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  IdentityError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - infrastructure/repositories/* (lanzan DatabaseError / DuplicateUserError)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class IdentityError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      IdentityError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "IDENTITY_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(IdentityError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class DuplicateUserError(IdentityError):
    """
    El store rechazó una escritura por unicidad (email / username).

    Es el árbitro final ante carreras que pasan el chequeo previo del
    Uniqueness Guard; los casos de uso lo traducen a CONFLICT.
    """

    error_code: str = "DUPLICATE_USER"

    def __init__(self, field: str, value: str, **kwargs):
        self.field = field
        self.value = value
        super().__init__(f"Duplicate {field}: {value}", **kwargs)
