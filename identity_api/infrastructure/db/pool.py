"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Componente:
  Pool de conexiones PostgreSQL (singleton por proceso)

Responsabilidades:
  - Inicializar, exponer y cerrar el pool de conexiones.
  - Configurar conexiones: statement_timeout.
  - Devolver un pool instrumentado (observabilidad sin tocar repos).

Colaboradores:
  - psycopg_pool.ConnectionPool
  - infrastructure/db/instrumentation.InstrumentedConnectionPool
  - crosscutting.config.get_settings

Principios:
  - Fail-fast (doble init, uso sin init)
  - Solo se usa con USER_STORE_BACKEND=postgres
===============================================================================
"""

from __future__ import annotations

import threading
from typing import Optional

from psycopg_pool import ConnectionPool

from ...crosscutting.config import get_settings
from ...crosscutting.logger import logger
from .errors import PoolAlreadyInitializedError, PoolNotInitializedError
from .instrumentation import InstrumentedConnectionPool

_pool: Optional[InstrumentedConnectionPool] = None
_pool_lock = threading.Lock()


def _configure_connection(conn) -> None:
    """Aplica statement_timeout (guardrail contra queries colgadas)."""
    timeout_ms = int(get_settings().db_statement_timeout_ms)
    if timeout_ms > 0:
        conn.execute(f"SET statement_timeout = {timeout_ms}")
        conn.commit()


def init_pool(database_url: str, min_size: int, max_size: int):
    """Inicializa el pool (una vez por proceso)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError("El pool ya fue inicializado.")

        logger.info(
            "Inicializando pool DB",
            extra={"min_size": min_size, "max_size": max_size},
        )

        real_pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_configure_connection,
            open=True,
        )

        settings = get_settings()
        _pool = InstrumentedConnectionPool(
            real_pool,
            slow_query_seconds=settings.db_slow_query_seconds,
            healthcheck=settings.db_healthcheck_on_acquire,
        )

        logger.info("Pool DB inicializado")
        return _pool


def get_pool():
    """Retorna el pool instrumentado singleton."""
    if _pool is None:
        raise PoolNotInitializedError(
            "Pool no inicializado. Llamar init_pool() primero."
        )
    return _pool


def close_pool() -> None:
    """Cierra el pool (idempotente)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            logger.info("Cerrando pool DB")
            try:
                _pool.close()
            finally:
                _pool = None
            logger.info("Pool DB cerrado")


def reset_pool() -> None:
    """Olvida el singleton sin cerrarlo (solo tests)."""
    global _pool

    with _pool_lock:
        _pool = None
