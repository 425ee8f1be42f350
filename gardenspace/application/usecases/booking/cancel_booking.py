"""
===============================================================================
USE CASE: Cancel Booking
===============================================================================

Business Goal:
    Cancelar una reserva existente (pending o confirmed).

Reglas:
    - pending/confirmed -> cancelled
    - cancelled -> cancelled (solo refresca updated_at)
    - payment_method se conserva
    - id inexistente -> None

Collaborators:
    - BookingRepository.find_by_id / save
    - domain.entities.Booking.cancel
===============================================================================
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID

from ....crosscutting.metrics import record_booking_transition
from ....domain.entities import Booking
from ....domain.repositories import BookingRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CancelBookingUseCase:
    def __init__(
        self,
        repository: BookingRepository,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._bookings = repository
        self._clock = clock

    def execute(self, booking_id: UUID) -> Optional[Booking]:
        booking = self._bookings.find_by_id(booking_id)
        if booking is None:
            return None

        previous = booking.status
        booking.cancel(at=self._clock())
        saved = self._bookings.save(booking)

        record_booking_transition("cancel", saved.status.value)
        logger.info(
            "Reserva cancelada",
            extra={
                "booking_id": str(saved.id),
                "from_status": previous.value,
                "to_status": saved.status.value,
            },
        )
        return saved
