"""
===============================================================================
TARJETA CRC — gardenspace/interfaces/api/http/routers/bookings.py
===============================================================================

Class/Module:
    Booking Router

Responsibilities:
    - Exponer endpoints HTTP del ciclo de vida de reservas.
    - Convertir requests HTTP -> inputs de casos de uso.
    - Traducir resultados ausentes (None / False) -> 404 RFC7807.
    - Enforce de autenticación Bearer en el borde (capa HTTP).

Collaborators:
    - gardenspace.application.usecases (Create/Confirm/Cancel/Delete/Get/List)
    - gardenspace.identity.dependencies.require_user
    - gardenspace.container (factories DI)
    - schemas.bookings (DTOs Pydantic)

Patterns:
    - Controller / Router
    - Adapter (HTTP -> UseCase)
    - Error Mapping (InvalidTransitionError/ValidationError via handlers globales)
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Response

from gardenspace.application.usecases import (
    CancelBookingUseCase,
    ConfirmBookingUseCase,
    CreateBookingInput,
    CreateBookingUseCase,
    DeleteBookingUseCase,
    GetBookingUseCase,
    ListBookingsUseCase,
)
from gardenspace.container import (
    get_cancel_booking_use_case,
    get_confirm_booking_use_case,
    get_create_booking_use_case,
    get_delete_booking_use_case,
    get_get_booking_use_case,
    get_list_bookings_use_case,
)
from gardenspace.crosscutting.error_responses import not_found, validation_error
from gardenspace.domain.entities import Booking, BookingStatus
from gardenspace.identity.auth_service import AuthResult
from gardenspace.identity.dependencies import require_user

from ..schemas.bookings import BookingRes, ConfirmBookingReq, CreateBookingReq

router = APIRouter()

_RESOURCE = "Booking"


# =============================================================================
# Helpers internos (puros / sin IO)
# =============================================================================


def _to_booking_res(booking: Booking) -> BookingRes:
    """Mapea entidad de dominio -> DTO HTTP."""
    return BookingRes(
        id=booking.id,
        user_id=booking.user_id,
        garden_id=booking.garden_id,
        start_date=booking.start_date,
        end_date=booking.end_date,
        duration_months=booking.duration_months,
        total_price=booking.total_price,
        status=booking.status,
        payment_method=booking.payment_method,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
    )


def _found_or_404(booking: Booking | None, booking_id: UUID) -> BookingRes:
    if booking is None:
        raise not_found(_RESOURCE, str(booking_id))
    return _to_booking_res(booking)


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/bookings",
    response_model=BookingRes,
    status_code=201,
    tags=["bookings"],
)
def create_booking(
    req: CreateBookingReq,
    use_case: CreateBookingUseCase = Depends(get_create_booking_use_case),
    current: AuthResult = Depends(require_user()),
):
    booking = use_case.execute(
        CreateBookingInput(
            user_id=req.user_id or current.user.id,
            garden_id=req.garden_id,
            start_date=req.start_date,
            end_date=req.end_date,
            duration_months=req.duration_months,
            total_price=req.total_price,
        )
    )
    return _to_booking_res(booking)


@router.get("/bookings", response_model=list[BookingRes], tags=["bookings"])
def list_bookings(
    use_case: ListBookingsUseCase = Depends(get_list_bookings_use_case),
    _current: AuthResult = Depends(require_user()),
):
    return [_to_booking_res(b) for b in use_case.all()]


@router.get("/bookings/{booking_id}", response_model=BookingRes, tags=["bookings"])
def get_booking(
    booking_id: UUID,
    use_case: GetBookingUseCase = Depends(get_get_booking_use_case),
    _current: AuthResult = Depends(require_user()),
):
    return _found_or_404(use_case.execute(booking_id), booking_id)


@router.get(
    "/bookings/user/{user_id}",
    response_model=list[BookingRes],
    tags=["bookings"],
)
def list_bookings_by_user(
    user_id: UUID,
    status: BookingStatus | None = Query(None),
    use_case: ListBookingsUseCase = Depends(get_list_bookings_use_case),
    _current: AuthResult = Depends(require_user()),
):
    return [_to_booking_res(b) for b in use_case.by_user(user_id, status)]


@router.get(
    "/bookings/garden/{garden_id}",
    response_model=list[BookingRes],
    tags=["bookings"],
)
def list_bookings_by_garden(
    garden_id: UUID,
    status: BookingStatus | None = Query(None),
    use_case: ListBookingsUseCase = Depends(get_list_bookings_use_case),
    _current: AuthResult = Depends(require_user()),
):
    return [_to_booking_res(b) for b in use_case.by_garden(garden_id, status)]


@router.patch(
    "/bookings/{booking_id}/confirm",
    response_model=BookingRes,
    tags=["bookings"],
)
def confirm_booking(
    booking_id: UUID,
    payment_method: str | None = Query(None, alias="paymentMethod"),
    body: ConfirmBookingReq | None = Body(None),
    use_case: ConfirmBookingUseCase = Depends(get_confirm_booking_use_case),
    _current: AuthResult = Depends(require_user()),
):
    """
    Confirma la reserva.

    paymentMethod puede venir como query param o en el body; el query param
    tiene prioridad.
    """
    method = payment_method if payment_method is not None else (
        body.payment_method if body is not None else None
    )
    if method is None:
        raise validation_error("paymentMethod is required")

    return _found_or_404(use_case.execute(booking_id, method), booking_id)


@router.patch(
    "/bookings/{booking_id}/cancel",
    response_model=BookingRes,
    tags=["bookings"],
)
def cancel_booking(
    booking_id: UUID,
    use_case: CancelBookingUseCase = Depends(get_cancel_booking_use_case),
    _current: AuthResult = Depends(require_user()),
):
    return _found_or_404(use_case.execute(booking_id), booking_id)


@router.delete("/bookings/{booking_id}", status_code=204, tags=["bookings"])
def delete_booking(
    booking_id: UUID,
    use_case: DeleteBookingUseCase = Depends(get_delete_booking_use_case),
    _current: AuthResult = Depends(require_user()),
):
    if not use_case.execute(booking_id):
        raise not_found(_RESOURCE, str(booking_id))
    return Response(status_code=204)
