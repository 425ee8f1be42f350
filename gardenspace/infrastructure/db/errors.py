"""
===============================================================================
TARJETA CRC — infrastructure/db/errors.py
===============================================================================

Responsabilidades:
  - Errores del ciclo de vida del pool (doble init, uso sin init).

Colaboradores:
  - infrastructure/db/pool.py (los lanza)
  - repositorios postgres (los envuelven en StorageError)
===============================================================================
"""


class DatabasePoolError(Exception):
    """Base para errores del pool de conexiones."""


class PoolAlreadyInitializedError(DatabasePoolError):
    def __init__(self) -> None:
        super().__init__("Connection pool already initialized")


class PoolNotInitializedError(DatabasePoolError):
    def __init__(self) -> None:
        super().__init__(
            "Connection pool not initialized (STORAGE_BACKEND=postgres requires "
            "init_pool() at startup)"
        )
