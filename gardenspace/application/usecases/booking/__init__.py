"""
===============================================================================
BOOKING USE CASES PACKAGE (Public API / Exports)
===============================================================================

Responsibilities:
    - Re-exportar los casos de uso del ciclo de vida de reservas.
    - Definir __all__ como contrato de API pública del paquete.
===============================================================================
"""

from .cancel_booking import CancelBookingUseCase
from .confirm_booking import ConfirmBookingUseCase
from .create_booking import CreateBookingInput, CreateBookingUseCase
from .delete_booking import DeleteBookingUseCase
from .get_booking import GetBookingUseCase
from .list_bookings import ListBookingsUseCase

__all__ = [
    # Commands
    "CreateBookingUseCase",
    "ConfirmBookingUseCase",
    "CancelBookingUseCase",
    "DeleteBookingUseCase",
    # Queries
    "GetBookingUseCase",
    "ListBookingsUseCase",
    # DTOs
    "CreateBookingInput",
]
