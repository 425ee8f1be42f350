"""
============================================================
TARJETA CRC — alembic/env.py
============================================================
Responsibilities:
  - Ejecutar las migraciones de GardenSpace (users, bookings) online u
    offline.
  - Tomar la URL de la misma Settings que usa la API (DATABASE_URL / .env),
    forzando el driver psycopg 3.

Collaborators:
  - gardenspace.crosscutting.config.get_settings
  - SQLAlchemy engine (solo para migrar; la app usa psycopg_pool)

Policy:
  - Migraciones escritas a mano: target_metadata = None.
============================================================
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from gardenspace.crosscutting.config import get_settings

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = None

_DRIVER_PREFIXES = ("postgresql://", "postgres://")


def database_url() -> str:
    url = get_settings().database_url
    for prefix in _DRIVER_PREFIXES:
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix) :]
    return url


def run_migrations_offline() -> None:
    context.configure(
        url=database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = database_url()
    engine = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
