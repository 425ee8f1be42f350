"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar usuarios en memoria (tests / local dev).
  - Índice secundario por email (exacto, case-sensitive como se guardó).
  - Enforzar unicidad de email igual que el índice único de Postgres.

Collaborators:
  - identity.users.User
  - domain.repositories.UserRepository (contrato a implementar)
  - crosscutting.exceptions.ConflictError

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - User es inmutable (frozen), no hace falta copiar al devolver.
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, Optional
from uuid import UUID

from ....crosscutting.exceptions import ConflictError
from ....identity.users import User


class InMemoryUserRepository:
    """Credential store en memoria, thread-safe."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}
        self._ids_by_email: Dict[str, UUID] = {}

    def find_by_id(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._ids_by_email.get(email)
            return self._users.get(user_id) if user_id is not None else None

    def save(self, user: User) -> User:
        """
        Inserta o actualiza.

        - ConflictError si el email pertenece a otro id.
        - Si el email cambió, se reindexa.
        """
        with self._lock:
            owner = self._ids_by_email.get(user.email)
            if owner is not None and owner != user.id:
                raise ConflictError("Email already registered")

            previous = self._users.get(user.id)
            if previous is not None and previous.email != user.email:
                self._ids_by_email.pop(previous.email, None)

            self._users[user.id] = user
            self._ids_by_email[user.email] = user.id
            return user

    def ping(self) -> bool:
        return True
