"""
ASGI entrypoint.

    uvicorn gardenspace.main:app
"""

from .api.main import app

__all__ = ["app"]
