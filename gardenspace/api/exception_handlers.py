"""
===============================================================================
TARJETA CRC — gardenspace/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones de la aplicación a respuestas HTTP RFC7807.
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos en errores no controlados.

Patrones aplicados:
  - Exception Mapping (Presentation Layer).
  - Fail-safe: cualquier excepción no tipada -> INTERNAL_ERROR (con logging).

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - crosscutting.exceptions: GardenSpaceError y derivadas
  - crosscutting.config.get_settings (para decidir nivel de detalle)

Mapeo:
  - ValidationError          -> 422 VALIDATION_ERROR
  - AuthenticationError      -> 401 UNAUTHORIZED (+ WWW-Authenticate)
  - InvalidTransitionError   -> 409 INVALID_TRANSITION
  - ConflictError            -> 409 CONFLICT
  - StorageError             -> 503 STORAGE_ERROR
  - GardenSpaceError (base)  -> 500 INTERNAL_ERROR
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
)
from ..crosscutting.exceptions import (
    AuthenticationError,
    ConflictError,
    GardenSpaceError,
    InvalidTransitionError,
    StorageError,
    ValidationError,
)
from ..crosscutting.logger import logger


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def _handle_service_error(
    request: Request,
    *,
    exc: GardenSpaceError,
    code: ErrorCode,
    status_code: int,
    level: str = "error",
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Helper común para errores tipados de servicios."""
    request_id = _request_id_from(request)

    getattr(logger, level)(
        "Error de servicio",
        extra={
            "code": code.value,
            "error_id": exc.error_id,
            "error_message": exc.message,
            "request_id": request_id,
        },
    )

    app_exc = AppHTTPException(
        status_code=status_code,
        code=code,
        detail=exc.message,
        errors=[{"error_id": exc.error_id}],
        headers=headers,
    )
    return await app_exception_handler(request, app_exc)


async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    return await _handle_service_error(
        request,
        exc=exc,
        code=ErrorCode.VALIDATION_ERROR,
        status_code=422,
        level="info",
    )


async def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    return await _handle_service_error(
        request,
        exc=exc,
        code=ErrorCode.UNAUTHORIZED,
        status_code=401,
        level="info",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def invalid_transition_handler(
    request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    return await _handle_service_error(
        request,
        exc=exc,
        code=ErrorCode.INVALID_TRANSITION,
        status_code=409,
        level="info",
    )


async def conflict_error_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.CONFLICT, status_code=409, level="info"
    )


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.STORAGE_ERROR, status_code=503
    )


async def gardenspace_error_handler(
    request: Request, exc: GardenSpaceError
) -> JSONResponse:
    # R: Errores base: tratamos como INTERNAL_ERROR por defecto.
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.INTERNAL_ERROR, status_code=500
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Errores de validación de FastAPI/pydantic -> 422 RFC7807."""
    errors = [
        {
            "loc": list(err.get("loc", ())),
            "msg": err.get("msg"),
            "type": err.get("type"),
        }
        for err in jsonable_encoder(exc.errors())
    ]
    app_exc = AppHTTPException(
        status_code=422,
        code=ErrorCode.VALIDATION_ERROR,
        detail="Request validation failed",
        errors=errors,
    )
    return await app_exception_handler(request, app_exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica (evita filtrar internos).
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
      - Starlette resuelve por MRO: la subclase más específica gana
        (InvalidTransitionError antes que ConflictError).
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(InvalidTransitionError, invalid_transition_handler)
    app.add_exception_handler(ConflictError, conflict_error_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(GardenSpaceError, gardenspace_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
