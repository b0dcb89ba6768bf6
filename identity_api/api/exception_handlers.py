"""
===============================================================================
TARJETA CRC — identity_api/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones de la aplicación a respuestas HTTP RFC7807 (+ message).
  - Traducir errores de validación de FastAPI a 400 con message[].
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos en errores no controlados.

Patrones aplicados:
  - Exception Mapping (Presentation Layer).
  - Fail-safe: cualquier excepción no tipada -> INTERNAL_ERROR (con logging).

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - crosscutting.exceptions: IdentityError / DatabaseError
  - interfaces.api.http.validation.describe_validation_errors
  - crosscutting.config.get_settings (para decidir nivel de detalle)
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    validation_error,
)
from ..crosscutting.exceptions import DatabaseError, IdentityError
from ..crosscutting.logger import logger
from ..interfaces.api.http.validation import describe_validation_errors


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def _handle_service_error(
    request: Request,
    *,
    exc: IdentityError,
    code: ErrorCode,
    status_code: int,
    detail: str,
) -> JSONResponse:
    """Helper común para errores tipados de servicios."""
    request_id = _request_id_from(request)

    logger.error(
        "Error de servicio",
        extra={
            "code": code.value,
            "error_code": exc.error_code,
            "error_id": exc.error_id,
            "error": exc.message,
            "request_id": request_id,
        },
    )

    app_exc = AppHTTPException(
        status_code=status_code,
        code=code,
        detail=detail,
        errors=[{"error_id": exc.error_id}],
    )
    return await app_exception_handler(request, app_exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Payload inválido -> 400 con la lista de mensajes por campo."""
    messages = describe_validation_errors(exc.errors())
    logger.info(
        "Request inválido",
        extra={"request_id": _request_id_from(request), "errors": messages},
    )
    return await app_exception_handler(request, validation_error(messages))


# Status de routing/framework (404 ruta inexistente, 405 método) -> ErrorCode.
_FRAMEWORK_STATUS_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    409: ErrorCode.CONFLICT,
}


async def framework_http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """
    HTTPException de Starlette/FastAPI (no AppHTTPException) -> RFC7807.

    Conserva status y headers (ej: Allow en 405).
    """
    if exc.status_code >= 500:
        code = ErrorCode.INTERNAL_ERROR
    else:
        code = _FRAMEWORK_STATUS_CODES.get(exc.status_code, ErrorCode.HTTP_ERROR)

    app_exc = AppHTTPException(
        status_code=exc.status_code,
        code=code,
        detail=str(exc.detail),
    )
    app_exc.headers = getattr(exc, "headers", None)
    return await app_exception_handler(request, app_exc)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    return await _handle_service_error(
        request,
        exc=exc,
        code=ErrorCode.DATABASE_ERROR,
        status_code=503,
        detail="Falla en operación de base de datos",
    )


async def identity_error_handler(request: Request, exc: IdentityError) -> JSONResponse:
    # R: Errores base: tratamos como INTERNAL_ERROR por defecto.
    return await _handle_service_error(
        request,
        exc=exc,
        code=ErrorCode.INTERNAL_ERROR,
        status_code=500,
        detail="Error interno.",
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica en producción.
    """
    request_id = _request_id_from(request)
    settings = get_settings()

    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": request_id, "error": str(exc)},
    )

    detail = str(exc) if not settings.is_production() else "Error interno."

    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=detail,
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - DatabaseError antes que IdentityError (más específico primero).
      - AppHTTPException tiene su handler; el resto de HTTPException
        (404/405 de routing) pasa por framework_http_exception_handler.
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(IdentityError, identity_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, framework_http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
