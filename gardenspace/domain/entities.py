"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Booking, BookingStatus)

Responsabilidades:
    - Definir la reserva de parcela y su máquina de estados.
    - Brindar helpers mínimos (confirm/cancel) que mantienen las invariantes:
        * pending -> confirmed | cancelled
        * confirmed -> confirmed (overwrite) | cancelled
        * cancelled -> cancelled (solo refresca updated_at)
    - Mantener tipos claros para casos de uso y repositorios.

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - application/usecases/booking: construyen/transicionan reservas.
    - interfaces/api: serializan DTOs basados en estas entidades.

Principios:
    - Sin dependencias a DB/FastAPI.
    - El estado es un enum cerrado: ningún string arbitrario llega a status.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from ..crosscutting.exceptions import InvalidTransitionError


def _utcnow() -> datetime:
    """Fecha/hora UTC (helper interno)."""
    return datetime.now(timezone.utc)


# R: Límites de lo que el store puede guardar (ver alembic 001_foundation:
# INTEGER, NUMERIC(12,2), VARCHAR(100)).
MAX_DURATION_MONTHS = 2**31 - 1
TOTAL_PRICE_SCALE = 2
MAX_TOTAL_PRICE = Decimal("9999999999.99")
PAYMENT_METHOD_MAX_CHARS = 100


# ---------------------------------------------------------------------------
# BookingStatus
# ---------------------------------------------------------------------------


class BookingStatus(str, Enum):
    """Estados de una reserva (enum cerrado)."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


# R: transiciones expuestas. No existe camino de vuelta a PENDING.
_ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.CANCELLED}
    ),
    BookingStatus.CONFIRMED: frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.CANCELLED}
    ),
    BookingStatus.CANCELLED: frozenset({BookingStatus.CANCELLED}),
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    """True si la máquina de estados permite current -> target."""
    return target in _ALLOWED_TRANSITIONS[current]


# ---------------------------------------------------------------------------
# Booking
# ---------------------------------------------------------------------------


@dataclass
class Booking:
    """
    Reserva de una parcela por un número fijo de meses.

    Importante:
      - user_id/garden_id son referencias opacas (no se valida existencia acá).
      - duration_months NO se recalcula desde las fechas.
      - payment_method solo existe una vez confirmada.
    """

    id: UUID
    user_id: UUID
    garden_id: UUID
    start_date: date
    end_date: date
    duration_months: int
    total_price: Decimal
    status: BookingStatus = BookingStatus.PENDING
    payment_method: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        """Confirmed y cancelled no exponen transición a pending."""
        return self.status != BookingStatus.PENDING

    def touch(self, *, at: datetime | None = None) -> None:
        """Refresca updated_at (toda mutación pasa por acá)."""
        self.updated_at = at or _utcnow()

    def _transition(self, target: BookingStatus, *, at: datetime | None) -> None:
        if not can_transition(self.status, target):
            raise InvalidTransitionError(
                f"Booking {self.id} cannot move from {self.status.value} "
                f"to {target.value}"
            )
        self.status = target
        self.touch(at=at)

    def confirm(self, payment_method: str, *, at: datetime | None = None) -> None:
        """Confirma (o re-confirma) la reserva, sobreescribiendo el medio de pago."""
        self._transition(BookingStatus.CONFIRMED, at=at)
        self.payment_method = payment_method

    def cancel(self, *, at: datetime | None = None) -> None:
        """Cancela la reserva. payment_method se conserva."""
        self._transition(BookingStatus.CANCELLED, at=at)
