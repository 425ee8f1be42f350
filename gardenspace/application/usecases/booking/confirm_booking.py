"""
===============================================================================
USE CASE: Confirm Booking
===============================================================================

Business Goal:
    Pasar una reserva a CONFIRMED registrando el medio de pago.

Reglas:
    - pending -> confirmed
    - confirmed -> confirmed (re-confirmar sobreescribe payment_method)
    - cancelled -> InvalidTransitionError (no hay salida de cancelled)
    - id inexistente -> None (no es excepción)

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    ConfirmBookingUseCase

Responsibilities:
    - Leer la reserva (id inexistente -> None, antes de validar el input).
    - Validar payment_method (no vacío, largo máximo).
    - Aplicar Booking.confirm y persistir.
    - Emitir log + métrica "confirm".

Collaborators:
    - BookingRepository.find_by_id / save
    - domain.entities.Booking.confirm

Notas:
    - Una lectura seguida de una escritura; last-write-wins entre requests
      concurrentes sobre la misma reserva.
===============================================================================
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID

from ....crosscutting.exceptions import InvalidTransitionError, ValidationError
from ....crosscutting.metrics import record_booking_transition
from ....domain.entities import PAYMENT_METHOD_MAX_CHARS, Booking
from ....domain.repositories import BookingRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAYMENT_METHOD_CHARS = PAYMENT_METHOD_MAX_CHARS


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConfirmBookingUseCase:
    """Confirma (o re-confirma) una reserva."""

    def __init__(
        self,
        repository: BookingRepository,
        *,
        max_payment_method_chars: int = DEFAULT_MAX_PAYMENT_METHOD_CHARS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._bookings = repository
        self._max_payment_method_chars = max_payment_method_chars
        self._clock = clock

    def execute(self, booking_id: UUID, payment_method: str) -> Optional[Booking]:
        booking = self._bookings.find_by_id(booking_id)
        if booking is None:
            return None

        method = (payment_method or "").strip()
        if not method:
            raise ValidationError("payment_method is required")
        if len(method) > self._max_payment_method_chars:
            raise ValidationError(
                f"payment_method must be at most {self._max_payment_method_chars} characters"
            )

        previous = booking.status
        try:
            booking.confirm(method, at=self._clock())
        except InvalidTransitionError:
            record_booking_transition("confirm", "rejected")
            logger.info(
                "Confirmación rechazada",
                extra={"booking_id": str(booking_id), "status": previous.value},
            )
            raise

        saved = self._bookings.save(booking)
        record_booking_transition("confirm", saved.status.value)
        logger.info(
            "Reserva confirmada",
            extra={
                "booking_id": str(saved.id),
                "from_status": previous.value,
                "to_status": saved.status.value,
            },
        )
        return saved
