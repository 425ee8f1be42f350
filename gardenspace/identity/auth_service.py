"""
===============================================================================
TARJETA CRC — identity/auth_service.py
===============================================================================

Módulo:
    Servicio de Autenticación (registro / login / usuario actual)

Responsabilidades:
    - Registrar usuarios: unicidad de email, hash del password, rol fijo.
    - Autenticar credenciales con un error uniforme (sin enumeración de emails).
    - Resolver el usuario actual desde un header Authorization sin lanzar
      excepciones para casos "no autenticado".
    - Devolver siempre token + proyección pública (nunca el hash).

Colaboradores:
    - domain.repositories.UserRepository (credential store)
    - identity.passwords.PasswordHasherService
    - identity.tokens.TokenCodec
    - crosscutting.metrics / logger

Decisiones de diseño:
    - Único componente que toca credential store y token codec a la vez.
    - No loguear passwords ni tokens; solo ids y resultado.
    - Los errores de storage (StorageError) NO se enmascaran.
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

from ..crosscutting.exceptions import AuthenticationError, ConflictError, ValidationError
from ..crosscutting.metrics import record_auth_event
from ..domain.repositories import UserRepository
from .passwords import PasswordHasherService
from .tokens import TokenCodec
from .users import PublicUser, User, UserRole

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid login credentials"
EMAIL_TAKEN_MESSAGE = "Email already registered"

BEARER_PREFIX = "Bearer "


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class AuthResult:
    """Token firmado + proyección pública del usuario."""

    token: str
    user: PublicUser
    expires_in: int | None = None


def strip_bearer(authorization: str | None) -> str | None:
    """Quita el prefijo "Bearer " si está presente; None si no queda token."""
    if authorization is None:
        return None
    token = authorization.strip()
    scheme, _, rest = token.partition(" ")
    if scheme.lower() == BEARER_PREFIX.strip().lower():
        token = rest.strip()
    return token or None


class AuthService:
    """
    Orquesta registro, login y resolución del usuario actual.

    Nota:
        Stateless entre llamadas; toda la persistencia vive en UserRepository.
    """

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasherService,
        tokens: TokenCodec,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = tokens
        self._clock = clock

    # ------------------------------------------------------------------
    # Register
    # ------------------------------------------------------------------
    def register(
        self,
        email: str,
        password: str,
        full_name: str,
        role_hint: str | None = None,
    ) -> AuthResult:
        """
        Crea un usuario y devuelve token + proyección pública.

        Errores:
            - ValidationError si falta email/password/full_name.
            - ConflictError si el email ya existe.
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")
        if not password:
            raise ValidationError("Password is required")
        if not full_name or not full_name.strip():
            raise ValidationError("Full name is required")

        if self._users.find_by_email(email) is not None:
            record_auth_event("register", "conflict")
            logger.info("Registro rechazado: email existente")
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        now = self._clock()
        user = self._users.save(
            User(
                id=uuid4(),
                email=email,
                password_hash=self._hasher.hash(password),
                full_name=full_name.strip(),
                role=UserRole.from_hint(role_hint),
                avatar_url=None,
                created_at=now,
                updated_at=now,
            )
        )

        record_auth_event("register", "success")
        logger.info(
            "Usuario registrado",
            extra={"user_id": str(user.id), "role": user.role.value},
        )
        return self._result_for(user)

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------
    def login(self, email: str, password: str) -> AuthResult:
        """
        Valida credenciales.

        Seguridad:
            - Email inexistente y password incorrecto producen el MISMO error
              y mensaje (no se revela si el email está registrado).
        """
        user = self._users.find_by_email(email) if email else None
        if user is None or not self._hasher.verify(password or "", user.password_hash):
            record_auth_event("login", "failure")
            logger.info("Login fallido")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        record_auth_event("login", "success")
        logger.info("Login exitoso", extra={"user_id": str(user.id)})
        return self._result_for(user)

    # ------------------------------------------------------------------
    # Current user
    # ------------------------------------------------------------------
    def resolve_current_user(self, authorization: str | None) -> AuthResult | None:
        """
        Resuelve el usuario del header Authorization.

        Retorna None (no lanza) si:
            - el header falta o está mal formado
            - el token no verifica (firma, exp, claims)
            - el usuario ya no existe
        """
        token = strip_bearer(authorization)
        if token is None:
            return None

        try:
            claims = self._tokens.verify(token)
        except AuthenticationError:
            record_auth_event("resolve", "failure")
            return None

        user = self._users.find_by_id(claims.user_id)
        if user is None:
            record_auth_event("resolve", "failure")
            logger.info(
                "Token válido para usuario inexistente",
                extra={"user_id": str(claims.user_id)},
            )
            return None

        record_auth_event("resolve", "success")
        return AuthResult(token=token, user=PublicUser.from_user(user))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _result_for(self, user: User) -> AuthResult:
        issued = self._tokens.issue(user)
        return AuthResult(
            token=issued.token,
            user=PublicUser.from_user(user),
            expires_in=issued.expires_in,
        )
