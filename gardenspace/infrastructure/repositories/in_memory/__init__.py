from .booking import InMemoryBookingRepository
from .user import InMemoryUserRepository

__all__ = ["InMemoryBookingRepository", "InMemoryUserRepository"]
