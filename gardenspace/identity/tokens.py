"""
===============================================================================
TARJETA CRC — identity/tokens.py
===============================================================================

Módulo:
    Codec de tokens de acceso (JWT HS256)

Responsabilidades:
    - Emitir JWT firmados con expiración (sub, email, role, iat, exp, typ).
    - Decodificar y validar JWT (firma, exp, claims mínimos, typ).
    - Reportar cualquier falla como AuthenticationError uniforme
      (expirado y adulterado son indistinguibles para el caller).

Colaboradores:
    - PyJWT
    - identity.users: User / UserRole
    - crosscutting.exceptions.AuthenticationError

Decisiones de diseño:
    - El secreto se inyecta en el constructor (config de proceso), nunca es
      un estático oculto. Todas las instancias deben compartir el mismo secreto.
    - No loguear secretos ni tokens.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import jwt

from ..crosscutting.exceptions import AuthenticationError
from .users import User, UserRole

# ---------------------------------------------------------------------------
# Constantes (evitan strings mágicos)
# ---------------------------------------------------------------------------

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_EMAIL: str = "email"
CLAIM_ROLE: str = "role"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_TYP: str = "typ"
CLAIM_ISS: str = "iss"

TOKEN_TYPE_ACCESS: str = "access"

INVALID_TOKEN_MESSAGE: str = "Invalid token"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Claims mínimos que esperamos de un access token."""

    user_id: UUID
    email: str
    role: UserRole


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_in: int


class TokenCodec:
    """
    Crea y verifica access tokens firmados y con vencimiento.

    Args:
        secret: secreto HMAC compartido por todas las instancias.
        ttl_minutes: vida del token.
        issuer: si se define, se agrega "iss" y se exige al verificar.
        clock: fuente de tiempo (inyectable para tests).
    """

    def __init__(
        self,
        secret: str,
        *,
        ttl_minutes: int = 60 * 24,
        issuer: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("TokenCodec requires a non-empty secret")
        if ttl_minutes <= 0:
            raise ValueError("ttl_minutes must be greater than 0")
        self._secret = secret
        self._ttl_seconds = int(ttl_minutes * 60)
        self._issuer = issuer or None
        self._clock = clock

    def issue(self, user: User) -> IssuedToken:
        """Crea un JWT de acceso firmado para el usuario."""
        now = self._clock()

        payload: dict[str, object] = {
            CLAIM_SUB: str(user.id),
            CLAIM_EMAIL: user.email,
            CLAIM_ROLE: user.role.value,
            CLAIM_IAT: int(now.timestamp()),
            CLAIM_EXP: int((now + timedelta(seconds=self._ttl_seconds)).timestamp()),
            CLAIM_TYP: TOKEN_TYPE_ACCESS,
        }
        if self._issuer:
            payload[CLAIM_ISS] = self._issuer

        token = jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)
        return IssuedToken(token=token, expires_in=self._ttl_seconds)

    def verify(self, token: str) -> TokenClaims:
        """
        Decodifica y valida un JWT de acceso.

        Errores:
            - AuthenticationError si expiró, la firma no coincide, faltan claims
              o el subject no es un UUID.
        """
        if not token:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)

        required = [CLAIM_SUB, CLAIM_EMAIL, CLAIM_ROLE, CLAIM_EXP]
        if self._issuer:
            required.append(CLAIM_ISS)

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                issuer=self._issuer,
                # R: exp/iat se validan abajo contra el clock inyectado.
                options={"require": required, "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE, original_error=exc) from exc

        try:
            expires_at = int(payload[CLAIM_EXP])
        except (TypeError, ValueError) as exc:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE, original_error=exc) from exc
        if expires_at <= int(self._clock().timestamp()):
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)

        token_type = payload.get(CLAIM_TYP)
        # R: si viene typ, lo validamos; si no viene, lo aceptamos por compatibilidad.
        if token_type is not None and token_type != TOKEN_TYPE_ACCESS:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)

        try:
            user_id = UUID(str(payload[CLAIM_SUB]))
            role = UserRole(str(payload[CLAIM_ROLE]))
        except ValueError as exc:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE, original_error=exc) from exc

        return TokenClaims(user_id=user_id, email=str(payload[CLAIM_EMAIL]), role=role)
