"""
===============================================================================
TARJETA CRC — identity/passwords.py
===============================================================================

Módulo:
    Hasher de passwords (Argon2)

Responsabilidades:
    - Hashear passwords en texto plano (one-way, salt aleatorio por hash).
    - Verificar un password contra el hash almacenado (comparación constant-time).

Colaboradores:
    - argon2.PasswordHasher
    - identity/auth_service.py

Decisiones:
    - Servicio explícito y stateless: se construye en el composition root y se
      inyecta; se testea sin FastAPI.
    - verify() nunca lanza por mismatch / hash corrupto: devuelve False.
===============================================================================
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError


class PasswordHasherService:
    """Wrapper fino sobre argon2-cffi con contrato hash/verify."""

    def __init__(self, hasher: PasswordHasher | None = None) -> None:
        self._hasher = hasher or PasswordHasher()

    def hash(self, plaintext: str) -> str:
        """Hashea un password usando Argon2id."""
        return self._hasher.hash(plaintext)

    def verify(self, plaintext: str, password_hash: str) -> bool:
        """Verifica password vs hash almacenado."""
        try:
            return self._hasher.verify(password_hash, plaintext)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False
