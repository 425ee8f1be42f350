"""
===============================================================================
USE CASE: List Bookings
===============================================================================

Business Goal:
    Listar reservas (todas, por usuario o por parcela), opcionalmente
    filtradas por status.

Why (Context / Intención):
    - Lecturas puras: no modifican estado.
    - El orden lo define el adapter (created_at DESC, id DESC), estable para
      un mismo snapshot del store.
    - El filtro de status usa el enum cerrado; los strings externos se
      validan en el borde HTTP.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    ListBookingsUseCase

Responsibilities:
    - all / by_user / by_garden: elegir la query del repositorio según status.

Collaborators:
    - BookingRepository.find_all / find_by_user_id / find_by_garden_id /
      find_by_user_id_and_status / find_by_garden_id_and_status
===============================================================================
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from ....domain.entities import Booking, BookingStatus
from ....domain.repositories import BookingRepository


class ListBookingsUseCase:
    """Use Case (Query): listados de reservas."""

    def __init__(self, repository: BookingRepository) -> None:
        self._bookings = repository

    def all(self) -> List[Booking]:
        return self._bookings.find_all()

    def by_user(
        self, user_id: UUID, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        if status is None:
            return self._bookings.find_by_user_id(user_id)
        return self._bookings.find_by_user_id_and_status(user_id, status)

    def by_garden(
        self, garden_id: UUID, status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        if status is None:
            return self._bookings.find_by_garden_id(garden_id)
        return self._bookings.find_by_garden_id_and_status(garden_id, status)
