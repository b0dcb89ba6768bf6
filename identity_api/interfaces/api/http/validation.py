"""
===============================================================================
TARJETA CRC — interfaces/api/http/validation.py
===============================================================================

Módulo:
    Traducción de errores de validación (pydantic) -> message[]

Responsabilidades:
    - Convertir la lista de errores de RequestValidationError en mensajes
      legibles "<campo> <regla>" (ej: "password must be a string").
    - Expandir campos faltantes a su set de mensajes declarado en schemas.
    - Deduplicar manteniendo el orden de aparición.

Colaboradores:
    - schemas.users.MISSING_FIELD_MESSAGES
    - api.exception_handlers (handler de RequestValidationError)
===============================================================================
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .schemas.users import MISSING_FIELD_MESSAGES

# Prefijos de loc que agrega FastAPI y no son parte del nombre del campo.
_LOC_SOURCES = frozenset({"body", "query", "path", "header", "cookie"})


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc if str(p) not in _LOC_SOURCES]
    return parts[-1] if parts else "body"


def _messages_for(error: Mapping[str, Any]) -> list[str]:
    field = _field_name(error.get("loc", ()))
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if kind == "missing":
        if field == "body":
            return ["body should not be empty"]
        return list(MISSING_FIELD_MESSAGES.get(field, [f"{field} should not be empty"]))

    if kind == "string_type":
        return [f"{field} must be a string"]

    if kind == "string_too_short":
        min_length = ctx.get("min_length", 1)
        if min_length <= 1:
            return [f"{field} should not be empty"]
        return [f"{field} must be longer than or equal to {min_length} characters"]

    if kind == "string_too_long":
        return [
            f"{field} must be shorter than or equal to {ctx.get('max_length')} characters"
        ]

    if kind == "enum":
        return [f"{field} must be a valid enum value"]

    if kind.startswith("uuid"):
        return [f"{field} must be a UUID"]

    if kind == "value_error":
        # Validadores propios levantan ValueError("<regla>").
        return [f"{field} {ctx.get('error', error.get('msg', 'is invalid'))}"]

    if kind in {"json_invalid", "model_attributes_type", "dict_type"}:
        return ["body must be a valid JSON object"]

    return [f"{field} {error.get('msg', 'is invalid')}"]


def describe_validation_errors(errors: Iterable[Mapping[str, Any]]) -> list[str]:
    """Lista de mensajes (orden estable, sin duplicados)."""
    messages: list[str] = []
    for error in errors:
        for message in _messages_for(error):
            if message not in messages:
                messages.append(message)
    return messages or ["Validation failed"]
