"""
===============================================================================
TARJETA CRC — identity/dependencies.py
===============================================================================

Módulo:
    Dependencias FastAPI de autenticación (Bearer JWT)

Responsabilidades:
    - Resolver el usuario actual desde el header Authorization.
    - Denegar por defecto (401) si el token falta, es inválido o el usuario
      ya no existe.
    - Dejar el usuario en request.state.user para logging/handlers.

Colaboradores:
    - identity.auth_service.AuthService.resolve_current_user
    - container.get_auth_service
    - crosscutting.error_responses.unauthorized
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Header, Request

from ..container import get_auth_service
from ..crosscutting.error_responses import unauthorized
from .auth_service import AuthResult, AuthService
from .tokens import INVALID_TOKEN_MESSAGE


def require_user() -> Callable:
    """Dependency FastAPI: requiere usuario autenticado por JWT."""

    def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        auth: AuthService = Depends(get_auth_service),
    ) -> AuthResult:
        if not authorization:
            raise unauthorized("Missing bearer token")

        result = auth.resolve_current_user(authorization)
        if result is None:
            raise unauthorized(INVALID_TOKEN_MESSAGE)

        request.state.user = result.user
        return result

    return dependency
