"""
Dominio de reservas: entidad Booking, estados y puertos de persistencia.

No depende de FastAPI, psycopg ni de la capa de identidad.
"""

from .entities import Booking, BookingStatus, can_transition
from .repositories import BookingRepository, UserRepository

__all__ = [
    "Booking",
    "BookingStatus",
    "can_transition",
    "BookingRepository",
    "UserRepository",
]
