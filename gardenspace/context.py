"""
===============================================================================
TARJETA CRC — gardenspace/context.py
===============================================================================

Responsabilidades:
  - Guardar request_id, método y path del request en curso (ContextVars).
  - Exponerlos como dict para que el JSONFormatter los agregue a cada log.

Colaboradores:
  - crosscutting.middleware.RequestContextMiddleware (set / clear)
  - crosscutting.logger.JSONFormatter (lectura)

Notas:
  - Valor vacío = "no disponible"; get_context_dict() omite esas claves.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")

_FIELDS: tuple[tuple[str, ContextVar[str]], ...] = (
    ("request_id", request_id_var),
    ("method", http_method_var),
    ("path", http_path_var),
)


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def get_context_dict() -> dict[str, str]:
    return {name: var.get() for name, var in _FIELDS if var.get()}


def clear_context() -> None:
    """Se llama al cerrar cada request para no arrastrar valores al siguiente."""
    for _, var in _FIELDS:
        var.set("")
