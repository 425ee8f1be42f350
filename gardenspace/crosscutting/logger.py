# gardenspace/crosscutting/logger.py
"""
===============================================================================
TARJETA CRC — crosscutting/logger.py
===============================================================================

Módulo:
    Logging estructurado (una línea JSON por evento)

Responsabilidades:
    - Serializar LogRecord -> JSON con timestamp UTC, nivel y origen.
    - Sumar el contexto del request (request_id, method, path).
    - Copiar los `extra=` del caller, redactando credenciales: passwords,
      hashes, tokens, headers Authorization y el secreto JWT.

Colaboradores:
    - gardenspace/context.py (ContextVars)
    - crosscutting/config.py (LOG_LEVEL, LOG_JSON)

Notas:
    - Nunca se loguea la contraseña en claro ni el token emitido; la redacción
      es la red de seguridad si algún caller los pasa en `extra`.
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

REDACTED = "***REDACTADO***"

# R: Atributos estándar de LogRecord (se toman de un record vacío).
_STANDARD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


class _Redactor:
    """Sanitiza valores de `extra` antes de serializarlos."""

    SENSITIVE_KEYS = frozenset(
        {
            "password",
            "plaintext_password",
            "password_hash",
            "secret",
            "jwt_secret",
            "token",
            "access_token",
            "authorization",
        }
    )

    def __init__(self, max_str: int = 4_000, max_depth: int = 4):
        self._max_str = max_str
        self._max_depth = max_depth

    def sanitize(self, value: Any, *, key: str | None = None, depth: int = 0) -> Any:
        if key is not None and key.lower() in self.SENSITIVE_KEYS:
            return REDACTED
        if depth > self._max_depth:
            return "***TRUNCADO***"

        if isinstance(value, str):
            return value if len(value) <= self._max_str else value[: self._max_str] + "…"
        if isinstance(value, dict):
            return {
                str(k): self.sanitize(v, key=str(k), depth=depth + 1)
                for k, v in value.items()
            }
        if isinstance(value, (list, tuple, set)):
            return [self.sanitize(v, key=key, depth=depth + 1) for v in value]
        if value is None or isinstance(value, (bool, int, float)):
            return value
        # UUID, date, Decimal, Enum...
        return str(value)


class JSONFormatter(logging.Formatter):
    """LogRecord -> JSON (contexto de request + extras redactados)."""

    def __init__(self):
        super().__init__()
        self._redactor = _Redactor()

    def format(self, record: logging.LogRecord) -> str:
        from ..context import get_context_dict

        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
            **get_context_dict(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                entry[key] = self._redactor.sanitize(value, key=key)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logger(name: str = "gardenspace") -> logging.Logger:
    """Logger del proyecto; idempotente ante reimports."""
    from .config import get_settings

    settings = get_settings()
    log = logging.getLogger(name)
    log.setLevel(getattr(logging, (settings.log_level or "INFO").upper(), logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        if settings.log_json:
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
            )
        log.addHandler(handler)

    return log


logger = setup_logger()
