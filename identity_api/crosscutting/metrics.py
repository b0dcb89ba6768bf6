"""
===============================================================================
MÓDULO: Métricas Prometheus (baja cardinalidad)
===============================================================================

Responsabilidades:
  - Registrar métricas HTTP (requests / latencia) por endpoint normalizado.
  - Registrar decisiones del núcleo de identidad: denegaciones de policy y
    conflictos de unicidad.
  - Registrar duración de queries DB por tipo de statement.
  - Exponer el payload de /metrics.

Colaboradores:
  - crosscutting/middleware.py (record_request_metrics)
  - application/usecases/users/* (record_policy_denial / record_conflict)
  - infrastructure/db/instrumentation.py (observe_db_query_duration)
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Registry propio: evita colisiones con el registry global en tests/reimports.
_registry = CollectorRegistry()

# ------------------------
# HTTP
# ------------------------
_requests_total = Counter(
    "identity_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "identity_request_latency_seconds",
    "Latencia de requests HTTP (segundos)",
    ["endpoint", "method"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=_registry,
)

# ------------------------
# Núcleo de identidad
# ------------------------
_policy_denials_total = Counter(
    "identity_policy_denials_total",
    "Operaciones denegadas por la policy (por tipo de operación)",
    ["operation"],
    registry=_registry,
)

_conflicts_total = Counter(
    "identity_conflicts_total",
    "Conflictos de unicidad detectados (por campo)",
    ["field"],
    registry=_registry,
)

# ------------------------
# DB
# ------------------------
_db_query_duration = Histogram(
    "identity_db_query_duration_seconds",
    "Duración de queries DB (segundos)",
    ["kind"],
    buckets=(0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=_registry,
)


# -----------------------------------------------------------------------------
# API pública
# -----------------------------------------------------------------------------


def record_request_metrics(
    *,
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """Registra métricas de un request HTTP."""
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized, method=method, status=_status_bucket(status_code)
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def record_policy_denial(operation: str) -> None:
    """Cuenta una denegación de la policy para un tipo de operación."""
    _policy_denials_total.labels(operation=operation).inc()


def record_conflict(field: str) -> None:
    """Cuenta un conflicto de unicidad (email / username)."""
    _conflicts_total.labels(field=field).inc()


def observe_db_query_duration(kind: str, seconds: float) -> None:
    """Observa duración de una query DB."""
    _db_query_duration.labels(kind=kind).observe(seconds)


# -----------------------------------------------------------------------------
# Helpers internos
# -----------------------------------------------------------------------------


def _normalize_endpoint(path: str) -> str:
    """Normaliza paths para evitar cardinalidad alta.

    Reemplaza UUIDs y usernames (`/users/@...`) por placeholders.
    """
    path = re.sub(r"/users/@[^/]+", "/users/@{username}", path)
    path = re.sub(
        r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
        "{id}",
        path,
        flags=re.IGNORECASE,
    )
    return path


def _status_bucket(code: int) -> str:
    """Agrupa status code para baja cardinalidad."""
    if 200 <= code < 300:
        return "2xx"
    if 400 <= code < 500:
        return "4xx"
    if 500 <= code < 600:
        return "5xx"
    return "other"


# -----------------------------------------------------------------------------
# Exposición del endpoint /metrics
# -----------------------------------------------------------------------------


def get_metrics_response() -> tuple[bytes, str]:
    """Genera el body y content-type para /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
