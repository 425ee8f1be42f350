"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/booking.py
============================================================
Class: InMemoryBookingRepository

Responsibilities:
  - Almacenar reservas en memoria (tests / local dev / fallback simple).
  - Implementar el contrato completo de BookingRepository.
  - Mantener ordering determinístico alineado con Postgres:
      ORDER BY created_at DESC NULLS LAST, id DESC

Collaborators:
  - domain.entities.Booking, BookingStatus
  - domain.repositories.BookingRepository (contrato a implementar)

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Copias defensivas: el caller nunca recibe la instancia interna, así una
    mutación fuera del repo no altera el "estado persistido" sin save().
  - save() es last-write-wins (igual que el UPDATE de Postgres).
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, Dict, Iterable, List, Optional
from uuid import UUID

from ....domain.entities import Booking, BookingStatus


class InMemoryBookingRepository:
    """
    Repositorio in-memory, thread-safe, para Bookings.

    Modelo mental:
    - _bookings es la "tabla" en memoria (UUID -> Booking).
    - Cada operación lee/escribe bajo lock.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._bookings: Dict[UUID, Booking] = {}

    # =========================================================
    # Helpers internos
    # =========================================================
    @staticmethod
    def _now() -> datetime:
        """R: Fuente única de tiempo (UTC)."""
        return datetime.now(timezone.utc)

    @staticmethod
    def _sorted(items: Iterable[Booking]) -> List[Booking]:
        """
        R: Devuelve una lista nueva ordenada (no muta input).

        created_at None se trata como "muy viejo" (NULLS LAST en DESC).
        """
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(
            (replace(b) for b in items),
            key=lambda b: (b.created_at or oldest, b.id.int),
            reverse=True,
        )

    def _select(self, predicate: Callable[[Booking], bool]) -> List[Booking]:
        with self._lock:
            values = list(self._bookings.values())
        return self._sorted(b for b in values if predicate(b))

    # =========================================================
    # Lecturas
    # =========================================================
    def find_all(self) -> List[Booking]:
        return self._select(lambda b: True)

    def find_by_id(self, booking_id: UUID) -> Optional[Booking]:
        with self._lock:
            current = self._bookings.get(booking_id)
            return replace(current) if current is not None else None

    def find_by_user_id(self, user_id: UUID) -> List[Booking]:
        return self._select(lambda b: b.user_id == user_id)

    def find_by_garden_id(self, garden_id: UUID) -> List[Booking]:
        return self._select(lambda b: b.garden_id == garden_id)

    def find_by_user_id_and_status(
        self, user_id: UUID, status: BookingStatus
    ) -> List[Booking]:
        return self._select(lambda b: b.user_id == user_id and b.status == status)

    def find_by_garden_id_and_status(
        self, garden_id: UUID, status: BookingStatus
    ) -> List[Booking]:
        return self._select(lambda b: b.garden_id == garden_id and b.status == status)

    def exists_by_id(self, booking_id: UUID) -> bool:
        with self._lock:
            return booking_id in self._bookings

    # =========================================================
    # Escrituras
    # =========================================================
    def save(self, booking: Booking) -> Booking:
        """
        Upsert.

        - created_at se conserva si ya existía (columna no actualizable).
        - created_at/updated_at se completan si vienen vacíos.
        """
        now = self._now()
        with self._lock:
            previous = self._bookings.get(booking.id)
            created_at = (
                previous.created_at
                if previous is not None
                else (booking.created_at or now)
            )
            stored = replace(
                booking,
                created_at=created_at,
                updated_at=booking.updated_at or now,
            )
            self._bookings[booking.id] = stored
            return replace(stored)

    def delete_by_id(self, booking_id: UUID) -> None:
        with self._lock:
            self._bookings.pop(booking_id, None)

    def ping(self) -> bool:
        return True
