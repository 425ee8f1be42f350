"""
===============================================================================
TARJETA CRC — gardenspace/api/auth_routes.py (Registro / Login / Usuario actual)
===============================================================================

Responsabilidades:
  - Exponer endpoints de autenticación de usuario (register/login/me) con JWT.
  - Traducir HTTP (camelCase) <-> AuthService.
  - Devolver siempre {token, user} con la proyección pública del usuario.

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP ↔ servicio de identidad.
  - Fail-safe security: si la autenticación falla, se deniega por defecto.

Colaboradores:
  - identity.auth_service.AuthService (register/login/resolve)
  - identity.dependencies.require_user
  - container.get_auth_service

Notas:
  - ConflictError / AuthenticationError / ValidationError se traducen a
    RFC7807 en api/exception_handlers.py.
  - El email solo se recorta (strip); NO se pasa a minúsculas.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..container import get_auth_service
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..identity.auth_service import AuthResult, AuthService
from ..identity.dependencies import require_user
from ..identity.users import PublicUser

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(_CamelModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=512)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: str | None = Field(default=None, max_length=50)

    @field_validator("email")
    @classmethod
    def recortar_email(cls, v: str) -> str:
        return v.strip()

    @field_validator("full_name")
    @classmethod
    def recortar_nombre(cls, v: str) -> str:
        return v.strip()


class LoginRequest(_CamelModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=512)

    @field_validator("email")
    @classmethod
    def recortar_email(cls, v: str) -> str:
        return v.strip()


class UserResponse(_CamelModel):
    id: UUID
    email: str
    full_name: str
    role: str
    avatar_url: str | None = None


class AuthResponse(_CamelModel):
    token: str
    user: UserResponse
    # R: segundos de vida del token emitido; null en /auth/me (no emite token).
    expires_in: int | None = None


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _to_user_response(user: PublicUser) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        role=user.role,
        avatar_url=user.avatar_url,
    )


def _to_auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        token=result.token,
        user=_to_user_response(result.user),
        expires_in=result.expires_in,
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post(
    "/auth/register",
    response_model=AuthResponse,
    status_code=201,
    tags=["auth"],
)
def register(
    req: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Registra un usuario y devuelve token + usuario público (409 si el email existe)."""
    result = auth.register(
        email=req.email,
        password=req.password,
        full_name=req.full_name,
        role_hint=req.role,
    )
    return _to_auth_response(result)


@router.post("/auth/login", response_model=AuthResponse, tags=["auth"])
def login(
    req: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Inicia sesión y devuelve JWT.

    Email desconocido y password incorrecto responden igual (401).
    """
    return _to_auth_response(auth.login(req.email, req.password))


@router.get("/auth/me", response_model=AuthResponse, tags=["auth"])
def me(current: AuthResult = Depends(require_user())):
    """Devuelve el usuario autenticado y el mismo token presentado."""
    return _to_auth_response(current)
