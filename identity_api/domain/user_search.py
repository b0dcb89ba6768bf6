"""
===============================================================================
TARJETA CRC — domain/user_search.py
===============================================================================

Módulo:
    Semántica de búsqueda de usuarios (SearchFilter)

Responsabilidades:
    - Representar qué campos de filtro vinieron en el request (y con qué valor).
    - Decidir si hay "intención de búsqueda" (política de cero resultados).
    - Evaluar el match de un User (substring case-sensitive, AND entre campos).

Colaboradores:
    - application.usecases.users.search_users
    - infrastructure.repositories.*.search_users (aplican los criterios)

Reglas (intencionales, testeadas):
    - Sin campos => [] (NO se lista todo).
    - Algún campo presente con "" o None => [] (no se ignora el campo).
    - Campos no vacíos => containment case-sensitive, combinados con AND.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .entities import User

# Nombre de parámetro (HTTP/camelCase o snake_case) -> atributo de User.
SEARCH_PARAMS: Mapping[str, str] = {
    "email": "email",
    "fullName": "full_name",
    "full_name": "full_name",
    "username": "username",
}


@dataclass(frozen=True)
class SearchFilter:
    """
    Filtro de búsqueda: solo contiene los campos efectivamente provistos.

    provided: atributo de User -> valor recibido (puede ser "" o None).
    """

    provided: Mapping[str, str | None] = field(default_factory=dict)

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "SearchFilter":
        """Construye el filtro desde parámetros crudos (ignora claves ajenas)."""
        provided: dict[str, str | None] = {}
        for name, attr in SEARCH_PARAMS.items():
            if name not in params:
                continue
            value = params[name]
            provided[attr] = None if value is None else str(value)
        return cls(provided=provided)

    @property
    def has_search_intent(self) -> bool:
        if not self.provided:
            return False
        return all(value for value in self.provided.values())

    def criteria(self) -> dict[str, str]:
        """Criterios aplicables al store (solo válido si has_search_intent)."""
        return {attr: value for attr, value in self.provided.items() if value}


def matches_criteria(user: User, criteria: Mapping[str, str]) -> bool:
    """True si cada campo del user contiene su valor de criterio (AND)."""
    for attr, needle in criteria.items():
        haystack = getattr(user, attr, None) or ""
        if needle not in haystack:
            return False
    return True
