"""
===============================================================================
TARJETA CRC — interfaces/api/http/router.py
===============================================================================

Responsabilidades:
  - Router raíz de la API de reservas (lo incluye api/main.py).
  - Documentar en OpenAPI las respuestas problem+json comunes.

Colaboradores:
  - routers.bookings
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers import bookings_router


def build_router() -> APIRouter:
    root = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    root.include_router(bookings_router)
    return root


router = build_router()
