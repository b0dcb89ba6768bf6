"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI (app.include_router).
  - Centralizar responses RFC7807 para OpenAPI.
  - Componer routers por feature (hoy: users).

Patrones aplicados:
  - Factory: build_router() para testear composición y evitar side-effects al importar.

Colaboradores:
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
  - routers.users
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers import users_router


def build_router() -> APIRouter:
    """Construye el router raíz de la API de identidad."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    api_router.include_router(users_router)
    return api_router


router = build_router()

__all__ = ["router", "build_router"]
