"""
===============================================================================
TARJETA CRC — schemas/bookings.py
===============================================================================

Módulo:
    Schemas HTTP para Bookings

Responsabilidades:
    - Definir DTOs de request/response para endpoints de reservas.
    - Exponer campos en camelCase (userId, gardenId, startDate, ...).
    - Mantener contratos estables y fáciles de versionar.

Colaboradores:
    - domain.entities.BookingStatus
    - crosscutting.config.get_settings (límites)

Notas:
    - Las reglas de negocio (end > start, duration > 0, price >= 0) viven en
      el caso de uso; acá solo tipos y forma.
===============================================================================
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from gardenspace.crosscutting.config import get_settings
from gardenspace.domain.entities import BookingStatus
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

_settings = get_settings()


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class CreateBookingReq(_CamelModel):
    """Request para crear una reserva (queda en pending)."""

    user_id: UUID | None = Field(
        default=None, description="Renter; por defecto el usuario autenticado"
    )
    garden_id: UUID = Field(..., description="Parcela reservada (id opaco)")
    start_date: date
    end_date: date
    duration_months: int = Field(..., description="Meses reservados")
    total_price: Decimal = Field(..., description="Precio total acordado")


class ConfirmBookingReq(_CamelModel):
    """Body alternativo para confirmar (además del query param paymentMethod)."""

    payment_method: str = Field(
        ..., min_length=1, max_length=_settings.max_payment_method_chars
    )


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class BookingRes(_CamelModel):
    """Response de reserva."""

    id: UUID
    user_id: UUID
    garden_id: UUID
    start_date: date
    end_date: date
    duration_months: int
    total_price: Decimal
    status: BookingStatus
    payment_method: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_serializer("total_price")
    def serialize_total_price(self, v: Decimal) -> float:
        return float(v)
