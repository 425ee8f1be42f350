from .booking import (
    CancelBookingUseCase,
    ConfirmBookingUseCase,
    CreateBookingInput,
    CreateBookingUseCase,
    DeleteBookingUseCase,
    GetBookingUseCase,
    ListBookingsUseCase,
)

__all__ = [
    "CancelBookingUseCase",
    "ConfirmBookingUseCase",
    "CreateBookingInput",
    "CreateBookingUseCase",
    "DeleteBookingUseCase",
    "GetBookingUseCase",
    "ListBookingsUseCase",
]
