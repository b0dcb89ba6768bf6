"""
===============================================================================
MÓDULO: Logger estructurado (JSON) con contexto de request
===============================================================================

Objetivo
--------
Un log por evento, en JSON, correlacionable por request_id / caller_id y sin
credenciales: ni passwords, ni hashes Argon2, ni JWT llegan a la salida,
aunque alguien los pase en `extra` bajo una clave inesperada.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  CredentialRedactor + JSONFormatter + setup_logger()

Responsabilidades:
  - Formatear LogRecord como JSON (una línea por evento)
  - Enriquecer con contexto de request (request_id, method, path, caller_id)
  - Redactar credenciales por clave Y por forma del valor

Colaboradores:
  - identity_api/context.py (ContextVars)
  - crosscutting/config.py (log_level / log_json)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import re
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from ..context import get_context_dict
from .config import get_settings

# Atributos propios de LogRecord: todo lo demás vino por `extra`.
_RESERVED_RECORD_KEYS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

REDACTED = "***REDACTADO***"


class CredentialRedactor:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      CredentialRedactor

    Responsabilidades:
      - Redactar valores bajo claves de credencial (password, token, ...)
      - Redactar valores con forma de credencial (hash Argon2, JWT, Bearer)
      - Recortar strings gigantes

    Colaboradores:
      - JSONFormatter
    ----------------------------------------------------------------------------
    """

    SENSITIVE_KEYS = frozenset(
        {
            "password",
            "password_hash",
            "passwordhash",
            "current_password",
            "currentpassword",
            "new_password",
            "jwt_secret",
            "secret",
            "token",
            "access_token",
            "accesstoken",
            "authorization",
            "cookie",
        }
    )

    # $argon2id$v=19$...  |  header.payload.signature  |  "Bearer <token>"
    _CREDENTIAL_SHAPES = (
        re.compile(r"^\$argon2(id|i|d)\$"),
        re.compile(r"^eyJ[\w-]*\.[\w-]+\.[\w-]*$"),
        re.compile(r"^bearer\s+\S+$", re.IGNORECASE),
    )

    def __init__(self, max_str: int = 4_000):
        self._max_str = max_str

    def _looks_like_credential(self, value: str) -> bool:
        return any(shape.match(value) for shape in self._CREDENTIAL_SHAPES)

    def sanitize(self, value: Any, *, key: str | None = None) -> Any:
        if key is not None and key.lower() in self.SENSITIVE_KEYS:
            return REDACTED

        if isinstance(value, str):
            if self._looks_like_credential(value.strip()):
                return REDACTED
            if len(value) > self._max_str:
                return value[: self._max_str] + "…(truncado)"
            return value

        if isinstance(value, dict):
            return {str(k): self.sanitize(v, key=str(k)) for k, v in value.items()}

        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.sanitize(v) for v in value]

        return value


class JSONFormatter(logging.Formatter):
    """LogRecord -> JSON con contexto de request y extras redactados."""

    def __init__(self, redactor: CredentialRedactor | None = None):
        super().__init__()
        self._redactor = redactor or CredentialRedactor()

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        payload.update(get_context_dict())

        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_KEYS:
                continue
            payload[key] = self._redactor.sanitize(value, key=key)

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger(name: str = "identity-api") -> logging.Logger:
    """
    Crea (una sola vez) el logger del servicio.

    Un .env inválido no debe impedir loguear: se usan INFO + JSON y el
    error de configuración aparece después, al validar settings en startup.
    """
    level, use_json = "INFO", True
    try:
        settings = get_settings()
        level, use_json = settings.log_level.upper(), settings.log_json
    except ValidationError:
        pass

    log = logging.getLogger(name)
    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)

    return log


logger = setup_logger()
