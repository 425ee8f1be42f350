"""
===============================================================================
USE CASE: Create Booking
===============================================================================

Name:
    Create Booking Use Case

Business Goal:
    Registrar una nueva reserva de parcela en estado PENDING, garantizando:
      - rango de fechas válido (end_date > start_date)
      - duración positiva en meses
      - precio total no negativo, con a lo sumo 2 decimales y dentro de
        NUMERIC(12,2); duración dentro de INTEGER

Why (Context / Intención):
    - La reserva nace siempre "pending": la confirmación (pago) es un paso
      posterior y explícito.
    - Toda validación ocurre ANTES de escribir en el store.
    - El garden_id es opaco: no se chequea existencia ni disponibilidad.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateBookingUseCase

Responsibilities:
    - Validar el input (CreateBookingInput.validate).
    - Construir la entidad Booking con id nuevo y timestamps.
    - Persistir vía BookingRepository.save.
    - Emitir log + métrica de transición "create".

Collaborators:
    - BookingRepository.save
    - domain.entities.Booking / BookingStatus
    - crosscutting.metrics.record_booking_transition

-------------------------------------------------------------------------------
INPUTS / OUTPUTS
-------------------------------------------------------------------------------
Inputs:
    - CreateBookingInput(user_id, garden_id, start_date, end_date,
      duration_months, total_price)

Outputs:
    - Booking persistido (status = pending)

Errors:
    - ValidationError: fechas, duración o precio inválidos
    - StorageError: propagado desde el adapter
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Callable
from uuid import UUID, uuid4

from ....crosscutting.exceptions import ValidationError
from ....crosscutting.metrics import record_booking_transition
from ....domain.entities import (
    MAX_DURATION_MONTHS,
    MAX_TOTAL_PRICE,
    TOTAL_PRICE_SCALE,
    Booking,
    BookingStatus,
)
from ....domain.repositories import BookingRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CreateBookingInput:
    """
    DTO de entrada.

    Notas:
      - duration_months NO se recalcula desde las fechas (se confía en el caller).
      - total_price se normaliza a Decimal.
    """

    user_id: UUID
    garden_id: UUID
    start_date: date
    end_date: date
    duration_months: int
    total_price: Decimal

    def validate(self) -> None:
        """Lanza ValidationError con el primer problema encontrado."""
        if self.start_date is None or self.end_date is None:
            raise ValidationError("start_date and end_date are required")
        if self.end_date <= self.start_date:
            raise ValidationError("end_date must be after start_date")
        if self.duration_months is None or int(self.duration_months) <= 0:
            raise ValidationError("duration_months must be greater than 0")
        if int(self.duration_months) > MAX_DURATION_MONTHS:
            raise ValidationError(
                f"duration_months must be at most {MAX_DURATION_MONTHS}"
            )
        try:
            price = Decimal(self.total_price)
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise ValidationError("total_price must be a number") from exc
        if not price.is_finite() or price < 0:
            raise ValidationError("total_price must be greater than or equal to 0")
        if price > MAX_TOTAL_PRICE:
            raise ValidationError(f"total_price must be at most {MAX_TOTAL_PRICE}")
        # R: el store redondea a 2 decimales; se rechaza en vez de redondear.
        if price != price.quantize(Decimal(1).scaleb(-TOTAL_PRICE_SCALE)):
            raise ValidationError(
                f"total_price must have at most {TOTAL_PRICE_SCALE} decimal places"
            )


class CreateBookingUseCase:
    """
    Use Case (Command):
        Crea una reserva pending.
    """

    def __init__(
        self,
        repository: BookingRepository,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._bookings = repository
        self._clock = clock

    def execute(self, input_data: CreateBookingInput) -> Booking:
        # 1) Validar antes de cualquier escritura.
        input_data.validate()

        # 2) Construir entidad (siempre PENDING, sin medio de pago).
        now = self._clock()
        booking = Booking(
            id=uuid4(),
            user_id=input_data.user_id,
            garden_id=input_data.garden_id,
            start_date=input_data.start_date,
            end_date=input_data.end_date,
            duration_months=int(input_data.duration_months),
            total_price=Decimal(input_data.total_price),
            status=BookingStatus.PENDING,
            payment_method=None,
            created_at=now,
            updated_at=now,
        )

        # 3) Persistir.
        created = self._bookings.save(booking)

        record_booking_transition("create", created.status.value)
        logger.info(
            "Reserva creada",
            extra={
                "booking_id": str(created.id),
                "user_id": str(created.user_id),
                "garden_id": str(created.garden_id),
                "status": created.status.value,
            },
        )
        return created
