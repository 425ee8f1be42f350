from .booking import PostgresBookingRepository
from .user import PostgresUserRepository

__all__ = ["PostgresBookingRepository", "PostgresUserRepository"]
