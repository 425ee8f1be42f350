"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelos de Usuario (JWT)

Responsabilidades:
    - Definir el enum de roles de usuario para autenticación/autorización.
    - Definir el dataclass User utilizado por los flujos de auth.
    - Definir la proyección pública (PublicUser) que nunca incluye el hash.

Colaboradores:
    - identity/auth_service.py: crea usuarios y emite tokens.
    - identity/tokens.py: embebe id/email/role en el JWT.
    - infrastructure/repositories/*/user.py: mapean filas -> User.

Notas:
    - Este módulo NO contiene lógica de negocio: solo “shapes” de datos.
    - El rol se fija al registrarse; no hay setter de rol.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """Roles soportados para autenticación JWT."""

    USER = "user"
    ADMIN = "admin"

    @classmethod
    def from_hint(cls, hint: str | None) -> UserRole:
        """ADMIN solo si el hint es "admin" (case-insensitive); cualquier otro valor => USER."""
        if hint is not None and hint.strip().lower() == cls.ADMIN.value:
            return cls.ADMIN
        return cls.USER


@dataclass(frozen=True, slots=True)
class User:
    """Registro de usuario utilizado por autenticación (JWT)."""

    id: UUID
    email: str
    password_hash: str
    full_name: str
    role: UserRole
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class PublicUser:
    """Proyección pública del usuario (sin password_hash)."""

    id: UUID
    email: str
    full_name: str
    role: str
    avatar_url: str | None = None

    @classmethod
    def from_user(cls, user: User) -> PublicUser:
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            role=user.role.value.lower(),
            avatar_url=user.avatar_url,
        )
