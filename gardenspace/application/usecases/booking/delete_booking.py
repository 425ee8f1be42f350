"""
===============================================================================
USE CASE: Delete Booking
===============================================================================

Business Goal:
    Eliminar físicamente una reserva (hard delete, sin tombstone).

Contrato:
    - True si existía y se eliminó.
    - False si el id no existe (no es excepción).
===============================================================================
"""

from __future__ import annotations

import logging
from uuid import UUID

from ....crosscutting.metrics import record_booking_transition
from ....domain.repositories import BookingRepository

logger = logging.getLogger(__name__)


class DeleteBookingUseCase:
    """Hard delete de reservas."""

    def __init__(self, repository: BookingRepository) -> None:
        self._bookings = repository

    def execute(self, booking_id: UUID) -> bool:
        if not self._bookings.exists_by_id(booking_id):
            return False

        self._bookings.delete_by_id(booking_id)
        record_booking_transition("delete", "deleted")
        logger.info("Reserva eliminada", extra={"booking_id": str(booking_id)})
        return True
