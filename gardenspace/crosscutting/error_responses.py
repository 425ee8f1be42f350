# gardenspace/crosscutting/error_responses.py
"""
===============================================================================
TARJETA CRC — crosscutting/error_responses.py
===============================================================================

Módulo:
    Errores HTTP en formato Problem Details (RFC 7807)

Responsabilidades:
    - Catálogo de códigos estables (ErrorCode) que el frontend puede switchear.
    - Payload ErrorDetail (type, title, status, detail, code, instance, errors).
    - AppHTTPException + factories usadas por routers y dependencias:
      validation_error, not_found, unauthorized.
    - app_exception_handler: serializa como application/problem+json y agrega
      el request_id a `errors`.

Colaboradores:
    - api/exception_handlers.py (errores internos -> AppHTTPException)
    - crosscutting/middleware.py (413 del BodyLimitMiddleware)
    - interfaces/api/http/routers/bookings.py, identity/dependencies.py
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"


class ErrorDetail(BaseModel):
    """Problem Details + `code` estable + `errors` opcionales."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


def _documented(description: str) -> dict[str, Any]:
    return {
        "description": description,
        "model": ErrorDetail,
        "content": {
            PROBLEM_JSON_MEDIA_TYPE: {
                "schema": {"$ref": "#/components/schemas/ErrorDetail"}
            }
        },
    }


# R: Respuestas de error comunes para el OpenAPI de auth y reservas.
OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: _documented("Missing, invalid or expired bearer token"),
    404: _documented("Resource not found"),
    409: _documented("Email already registered or invalid booking transition"),
    422: _documented("Invalid request"),
    503: _documented("Storage unavailable"),
}


class AppHTTPException(HTTPException):
    """HTTPException con ErrorCode y lista de errores opcional."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.errors = errors


def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(422, ErrorCode.VALIDATION_ERROR, detail, errors)


def not_found(resource: str, identifier: str) -> AppHTTPException:
    return AppHTTPException(
        404, ErrorCode.NOT_FOUND, f"{resource} '{identifier}' not found"
    )


def unauthorized(detail: str = "Authentication required") -> AppHTTPException:
    return AppHTTPException(
        401,
        ErrorCode.UNAUTHORIZED,
        detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    errors = list(exc.errors or [])
    if request_id:
        errors.append({"request_id": request_id})

    problem = ErrorDetail(
        type=f"about:blank/{exc.code.value.lower()}",
        title=exc.code.value.replace("_", " ").title(),
        status=exc.status_code,
        detail=str(exc.detail),
        code=exc.code,
        instance=str(request.url),
        errors=errors or None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=problem.model_dump(mode="json", exclude_none=True),
        headers=exc.headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )
