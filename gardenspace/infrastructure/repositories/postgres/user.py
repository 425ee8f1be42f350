"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios para autenticación (por email / por id).
  - Persistir usuarios (insert o update de perfil).
  - Ejecutar SQL parametrizado contra la tabla `users` (contrato con migraciones).
  - Mapear filas crudas -> entidad `User` y validar `UserRole`.
  - Exponer fallos consistentes vía `StorageError` con logging estructurado.

Collaborators:
  - psycopg_pool.ConnectionPool (pool de conexiones)
  - infrastructure.db.pool.get_pool (accesor del pool global)
  - identity.users.User / UserRole
  - crosscutting.exceptions.StorageError / ConflictError

Constraints / Notes:
  - Repositorio puro: NO define reglas de negocio.
  - Retorna None cuando no existe el recurso (no exception por “not found”).
  - El email se compara exacto (case-sensitive como se guardó).
  - Violación de uq_users_email -> ConflictError (carrera entre dos registros).
  - El rol NO se actualiza en upsert: se fija al crear.
============================================================
"""

from __future__ import annotations

from typing import Iterable, Optional
from uuid import UUID

from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import ConflictError, StorageError
from ....crosscutting.logger import logger
from ....identity.users import User, UserRole

# R: Lista explícita de columnas para mantener el contrato estable con migraciones.
_USER_COLUMNS = (
    "id, email, password_hash, full_name, role, avatar_url, created_at, updated_at"
)


def _row_to_user(row: tuple) -> User:
    """
    Convierte una fila de `users` a `User`.

    Role casting estricto: si el valor no matchea el enum -> StorageError.
    """
    try:
        role = UserRole(row[4])
    except ValueError as exc:
        raise StorageError(f"Invalid user role in database: {row[4]}") from exc

    return User(
        id=row[0],
        email=row[1],
        password_hash=row[2],
        full_name=row[3],
        role=role,
        avatar_url=row[5],
        created_at=row[6],
        updated_at=row[7],
    )


class PostgresUserRepository:
    """Credential store sobre PostgreSQL."""

    def __init__(self, pool: ConnectionPool | None = None) -> None:
        # Pool inyectable (para tests); si es None se usa el global.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool
        from ...db.pool import get_pool

        return get_pool()

    def _fetchone(
        self,
        *,
        query: str,
        params: Iterable[object],
        log_msg: str,
        log_extra: dict[str, object],
    ) -> tuple | None:
        """Ejecuta una sentencia ... fetchone() con manejo consistente de errores."""
        try:
            with self._get_pool().connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except pg_errors.UniqueViolation as exc:
            logger.info(log_msg, extra={**log_extra, "error": "unique_violation"})
            raise ConflictError("Email already registered", original_error=exc) from exc
        except Exception as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise StorageError(f"{log_msg}: {exc}", original_error=exc) from exc

    # --- Lectura ---
    def find_by_email(self, email: str) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s",
            params=(email,),
            log_msg="PostgresUserRepository: find_by_email failed",
            log_extra={},
        )
        return _row_to_user(row) if row else None

    def find_by_id(self, user_id: UUID) -> Optional[User]:
        row = self._fetchone(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s",
            params=(user_id,),
            log_msg="PostgresUserRepository: find_by_id failed",
            log_extra={"user_id": str(user_id)},
        )
        return _row_to_user(row) if row else None

    # --- Escritura ---
    def save(self, user: User) -> User:
        """
        Upsert por id.

        - Insert: created_at/updated_at por defecto now() si vienen None.
        - Update: email, password_hash, full_name, avatar_url, updated_at.
        """
        row = self._fetchone(
            query=f"""
                INSERT INTO users (
                    id, email, password_hash, full_name, role, avatar_url,
                    created_at, updated_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, COALESCE(%s, now()), COALESCE(%s, now()))
                ON CONFLICT (id) DO UPDATE SET
                    email = EXCLUDED.email,
                    password_hash = EXCLUDED.password_hash,
                    full_name = EXCLUDED.full_name,
                    avatar_url = EXCLUDED.avatar_url,
                    updated_at = now()
                RETURNING {_USER_COLUMNS}
            """,
            params=(
                user.id,
                user.email,
                user.password_hash,
                user.full_name,
                user.role.value,
                user.avatar_url,
                user.created_at,
                user.updated_at,
            ),
            log_msg="PostgresUserRepository: save failed",
            log_extra={"user_id": str(user.id), "role": user.role.value},
        )
        if not row:
            raise StorageError("PostgresUserRepository: save failed (no row returned)")
        return _row_to_user(row)

    def ping(self) -> bool:
        row = self._fetchone(
            query="SELECT 1",
            params=(),
            log_msg="PostgresUserRepository: ping failed",
            log_extra={},
        )
        return bool(row)
