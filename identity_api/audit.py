"""
===============================================================================
TARJETA CRC — identity_api/audit.py (Emisión de auditoría)
===============================================================================

Responsabilidades:
  - Construir eventos de auditoría con formato consistente (actor/action/target/metadata).
  - Normalizar actor y metadata a partir del CallerContext.
  - Persistir vía AuditEventRepository (puerto del dominio).
  - "Best-effort": si falla la persistencia, NO rompe el flujo de negocio.

Colaboradores:
  - identity_api.domain.audit.AuditEvent
  - identity_api.domain.repositories.AuditEventRepository
  - identity_api.domain.entities.CallerContext
  - identity_api.crosscutting.logger.logger

Decisiones de seguridad:
  - Nunca se guardan credenciales: las claves sensibles se descartan.
  - Metadata se sanitiza a valores serializables; lo no serializable se stringifica.
===============================================================================
"""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from .crosscutting.logger import logger
from .domain.audit import AuditEvent
from .domain.entities import CallerContext
from .domain.repositories import AuditEventRepository

_FORBIDDEN_METADATA_KEYS = frozenset(
    {"password", "password_hash", "current_password", "currentpassword", "token"}
)


def _actor_from_caller(caller: CallerContext | None) -> str:
    """
    Identificador de actor estable y fácil de consultar.

    Formato:
      - user:{uuid}
      - anonymous
    """
    if caller is None:
        return "anonymous"
    return f"user:{caller.caller_id}"


def _metadata_from_caller(caller: CallerContext | None) -> dict[str, Any]:
    if caller is None:
        return {"principal_type": "anonymous"}
    return {
        "principal_type": "user",
        "user_id": str(caller.caller_id),
        "role": caller.caller_role.value,
    }


def _sanitize(value: Any) -> Any:
    """
    Convierte valores a tipos serializables para JSON.
    - primitives -> OK
    - dict/list -> sanitiza recursivamente (sin claves de credenciales)
    - otros -> str(value)
    """
    if value is None or isinstance(value, (str, int, float, bool)):
        return value

    if isinstance(value, dict):
        return {
            str(k): _sanitize(v)
            for k, v in value.items()
            if str(k).lower() not in _FORBIDDEN_METADATA_KEYS
        }

    if isinstance(value, list):
        return [_sanitize(v) for v in value]

    return str(value)


def emit_audit_event(
    repository: AuditEventRepository | None,
    *,
    action: str,
    caller: CallerContext | None = None,
    actor: str | None = None,
    target_id: UUID | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    """
    Emite un evento de auditoría.

    Regla clave:
      - Si repository es None o falla al escribir, NO se lanza excepción.
    """
    if repository is None:
        return

    payload = _sanitize({**_metadata_from_caller(caller), **(metadata or {})})

    event = AuditEvent(
        id=uuid4(),
        actor=actor or _actor_from_caller(caller),
        action=action,
        target_id=target_id,
        metadata=payload,
    )

    try:
        repository.record_event(event)
    except Exception as exc:
        # Best-effort: logueamos y seguimos.
        logger.warning(
            "Falló la escritura del evento de auditoría",
            extra={"action": action, "error": str(exc)},
        )
