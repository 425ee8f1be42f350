"""
Repository implementations (adapters).

- in_memory: thread-safe stores for tests / local development
- postgres: psycopg + psycopg_pool stores (production)
"""

from .in_memory import InMemoryBookingRepository, InMemoryUserRepository
from .postgres import PostgresBookingRepository, PostgresUserRepository

__all__ = [
    "InMemoryBookingRepository",
    "InMemoryUserRepository",
    "PostgresBookingRepository",
    "PostgresUserRepository",
]
