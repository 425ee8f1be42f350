"""
USE CASE: Get Booking

Query pura: devuelve la reserva o None si no existe.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from ....domain.entities import Booking
from ....domain.repositories import BookingRepository


class GetBookingUseCase:
    def __init__(self, repository: BookingRepository) -> None:
        self._bookings = repository

    def execute(self, booking_id: UUID) -> Optional[Booking]:
        return self._bookings.find_by_id(booking_id)
