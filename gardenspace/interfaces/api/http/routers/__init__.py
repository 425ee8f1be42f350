"""
===============================================================================
TARJETA CRC — gardenspace/interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Exponer routers segmentados por bounded context para ser incluidos por el
      router principal.

Notas:
    - Este archivo NO define endpoints. Solo re-exporta routers.
===============================================================================
"""

from .bookings import router as bookings_router

__all__ = ["bookings_router"]
