"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Re-exportar los routers por feature para el router raíz.

Notas:
    - Este archivo NO define endpoints.
===============================================================================
"""

from .users import router as users_router

__all__ = ["users_router"]
