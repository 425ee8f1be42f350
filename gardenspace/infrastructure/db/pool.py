"""
===============================================================================
TARJETA CRC — infrastructure/db/pool.py
===============================================================================

Componente:
    Pool de conexiones PostgreSQL del proceso (usuarios + reservas)

Responsabilidades:
    - init_pool(): abrir el pool una sola vez (lifespan de la API).
    - get_pool(): entregarlo a los repositorios postgres.
    - close_pool() / reset_pool(): cierre idempotente (shutdown / tests).
    - Aplicar statement_timeout a cada conexión nueva.

Colaboradores:
    - psycopg_pool.ConnectionPool
    - crosscutting.config (DB_STATEMENT_TIMEOUT_MS)
    - api/main.py (lifespan)
===============================================================================
"""

from __future__ import annotations

import threading
from typing import Optional

from psycopg_pool import ConnectionPool

from ...crosscutting.logger import logger
from .errors import PoolAlreadyInitializedError, PoolNotInitializedError

_pool: Optional[ConnectionPool] = None
_lock = threading.Lock()


def _apply_statement_timeout(conn) -> None:
    from ...crosscutting.config import get_settings

    timeout_ms = int(get_settings().db_statement_timeout_ms)
    if timeout_ms > 0:
        conn.execute(f"SET statement_timeout = {timeout_ms}")
        conn.commit()


def init_pool(database_url: str, min_size: int, max_size: int) -> ConnectionPool:
    global _pool

    with _lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError()

        _pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_apply_statement_timeout,
            open=True,
        )
        logger.info(
            "Pool PostgreSQL abierto",
            extra={"min_size": min_size, "max_size": max_size},
        )
        return _pool


def get_pool() -> ConnectionPool:
    pool = _pool
    if pool is None:
        raise PoolNotInitializedError()
    return pool


def close_pool() -> None:
    """Cierra el pool si existe (idempotente)."""
    global _pool

    with _lock:
        pool, _pool = _pool, None
    if pool is not None:
        pool.close()
        logger.info("Pool PostgreSQL cerrado")


def reset_pool() -> None:
    """Descarta el pool sin propagar errores de cierre (solo tests)."""
    global _pool

    with _lock:
        pool, _pool = _pool, None
    if pool is None:
        return
    try:
        pool.close()
    except Exception as exc:
        logger.warning("Error cerrando pool en reset", extra={"error": str(exc)})
