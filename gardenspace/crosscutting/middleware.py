# gardenspace/crosscutting/middleware.py
"""
===============================================================================
TARJETA CRC — crosscutting/middleware.py
===============================================================================

Módulo:
    Middlewares HTTP de la API de reservas

Responsabilidades:
    - RequestContextMiddleware: correlación por X-Request-Id, contexto de logs,
      línea de acceso (incluye user_id si el request se autenticó) y métricas.
    - BodyLimitMiddleware: cortar con 413 los bodies mayores a max_body_bytes
      (por Content-Length o contando chunks).

Colaboradores:
    - gardenspace.context (contextvars)
    - crosscutting.metrics.record_request_metrics
    - crosscutting.error_responses (ErrorDetail RFC7807)
    - identity.dependencies (deja request.state.user)
===============================================================================
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .error_responses import PROBLEM_JSON_MEDIA_TYPE, ErrorCode, ErrorDetail
from .logger import logger
from .metrics import record_request_metrics

REQUEST_ID_HEADER = "X-Request-Id"
_MAX_REQUEST_ID_CHARS = 128
# R: Endpoints operativos: cuentan en métricas pero no generan línea de acceso.
_UNLOGGED_PATHS = frozenset({"/healthz", "/readyz", "/metrics"})


def _resolve_request_id(raw: str | None) -> str:
    candidate = (raw or "").strip()
    if candidate and len(candidate) <= _MAX_REQUEST_ID_CHARS:
        return candidate
    return str(uuid.uuid4())


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Asigna request_id, registra acceso + métricas y limpia el contexto."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception:
            logger.exception(
                "Request abortado por excepción",
                extra={"latency_ms": _elapsed_ms(started)},
            )
            raise
        finally:
            record_request_metrics(
                endpoint=request.url.path,
                method=request.method,
                status_code=status_code,
                latency_seconds=time.perf_counter() - started,
            )
            if request.url.path not in _UNLOGGED_PATHS:
                self._log_access(request, status_code, started)
            clear_context()

    @staticmethod
    def _log_access(request: Request, status_code: int, started: float) -> None:
        extra: dict[str, object] = {
            "status_code": status_code,
            "latency_ms": _elapsed_ms(started),
        }
        user = getattr(request.state, "user", None)
        if user is not None:
            extra["user_id"] = str(user.id)
        logger.info("Request completado", extra=extra)


class _BodyTooLarge(Exception):
    pass


class BodyLimitMiddleware:
    """
    Middleware ASGI puro: rechaza bodies mayores a `max_bytes` con 413.

    Si Content-Length ya excede el límite no se invoca la app; si no viene
    (chunked) se cuentan los bytes recibidos y se corta al superarlo.
    """

    def __init__(self, app, max_bytes: int | None = None):
        from .config import get_settings

        self.app = app
        self._max_bytes = max_bytes or get_settings().max_body_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        request_id = _resolve_request_id(
            headers.get(REQUEST_ID_HEADER.lower().encode(), b"").decode()
        )
        path = scope.get("path", "")

        declared = headers.get(b"content-length", b"").decode()
        if declared.isdigit() and int(declared) > self._max_bytes:
            logger.warning(
                "Body rechazado por Content-Length",
                extra={"content_length": int(declared), "max_bytes": self._max_bytes},
            )
            await self._reject(send, path=path, request_id=request_id)
            return

        received = 0
        response_started = False

        async def counting_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body") or b"")
                if received > self._max_bytes:
                    raise _BodyTooLarge()
            return message

        async def tracking_send(message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except _BodyTooLarge:
            if response_started:
                raise
            logger.warning(
                "Body rechazado al leer el stream",
                extra={"received_bytes": received, "max_bytes": self._max_bytes},
            )
            await self._reject(send, path=path, request_id=request_id)

    async def _reject(self, send, *, path: str, request_id: str) -> None:
        body = ErrorDetail(
            type="about:blank/payload_too_large",
            title="Payload Too Large",
            status=413,
            detail=f"Request body exceeds {self._max_bytes} bytes",
            code=ErrorCode.PAYLOAD_TOO_LARGE,
            instance=path,
            errors=[{"request_id": request_id}],
        ).model_dump(mode="json", exclude_none=True)

        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [
                    (b"content-type", PROBLEM_JSON_MEDIA_TYPE.encode()),
                    (REQUEST_ID_HEADER.lower().encode(), request_id.encode()),
                ],
            }
        )
        await send({"type": "http.response.body", "body": json.dumps(body).encode()})
