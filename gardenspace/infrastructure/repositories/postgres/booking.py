"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/booking.py
============================================================
Class: PostgresBookingRepository

Responsibilities:
  - Persistir y consultar reservas en la tabla `bookings`.
  - Mapear filas -> `Booking`, validando el status contra el enum cerrado.
  - Exponer fallos consistentes vía `StorageError` con logging estructurado.

Collaborators:
  - psycopg_pool.ConnectionPool
  - domain.entities.Booking / BookingStatus
  - crosscutting.exceptions.StorageError

Constraints / Notes:
  - SQL parametrizado siempre.
  - Orden estable en listados: created_at DESC, id DESC.
  - save() es un upsert last-write-wins: no hay compare-and-swap sobre status.
  - Hard delete (sin tombstone).
============================================================
"""

from __future__ import annotations

from typing import Iterable, List, Optional
from uuid import UUID

from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import StorageError
from ....crosscutting.logger import logger
from ....domain.entities import Booking, BookingStatus

_BOOKING_COLUMNS = (
    "id, user_id, garden_id, start_date, end_date, duration_months, "
    "total_price, status, payment_method, created_at, updated_at"
)

_BOOKING_ORDER_BY = "created_at DESC, id DESC"


def _row_to_booking(row: tuple) -> Booking:
    """Convierte una fila de `bookings` a entidad; status inválido -> StorageError."""
    try:
        status = BookingStatus(row[7])
    except ValueError as exc:
        raise StorageError(f"Invalid booking status in database: {row[7]}") from exc

    return Booking(
        id=row[0],
        user_id=row[1],
        garden_id=row[2],
        start_date=row[3],
        end_date=row[4],
        duration_months=row[5],
        total_price=row[6],
        status=status,
        payment_method=row[8],
        created_at=row[9],
        updated_at=row[10],
    )


class PostgresBookingRepository:
    """Booking store sobre PostgreSQL."""

    def __init__(self, pool: ConnectionPool | None = None) -> None:
        self._pool = pool

    # =========================================================
    # Helpers internos: pool + ejecución
    # =========================================================
    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool
        from ...db.pool import get_pool

        return get_pool()

    def _execute(
        self,
        *,
        query: str,
        params: Iterable[object],
        log_msg: str,
        log_extra: dict[str, object],
        fetch: str,
    ):
        try:
            with self._get_pool().connection() as conn:
                cursor = conn.execute(query, tuple(params))
                if fetch == "one":
                    return cursor.fetchone()
                if fetch == "all":
                    return cursor.fetchall()
                return cursor.rowcount
        except Exception as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise StorageError(f"{log_msg}: {exc}", original_error=exc) from exc

    def _select_many(
        self, where: str, params: tuple, log_msg: str, log_extra: dict[str, object]
    ) -> List[Booking]:
        rows = self._execute(
            query=f"""
                SELECT {_BOOKING_COLUMNS}
                FROM bookings
                {where}
                ORDER BY {_BOOKING_ORDER_BY}
            """,
            params=params,
            log_msg=log_msg,
            log_extra=log_extra,
            fetch="all",
        )
        return [_row_to_booking(r) for r in rows]

    # =========================================================
    # Lecturas
    # =========================================================
    def find_all(self) -> List[Booking]:
        return self._select_many(
            "", (), "PostgresBookingRepository: find_all failed", {}
        )

    def find_by_id(self, booking_id: UUID) -> Optional[Booking]:
        row = self._execute(
            query=f"SELECT {_BOOKING_COLUMNS} FROM bookings WHERE id = %s",
            params=(booking_id,),
            log_msg="PostgresBookingRepository: find_by_id failed",
            log_extra={"booking_id": str(booking_id)},
            fetch="one",
        )
        return _row_to_booking(row) if row else None

    def find_by_user_id(self, user_id: UUID) -> List[Booking]:
        return self._select_many(
            "WHERE user_id = %s",
            (user_id,),
            "PostgresBookingRepository: find_by_user_id failed",
            {"user_id": str(user_id)},
        )

    def find_by_garden_id(self, garden_id: UUID) -> List[Booking]:
        return self._select_many(
            "WHERE garden_id = %s",
            (garden_id,),
            "PostgresBookingRepository: find_by_garden_id failed",
            {"garden_id": str(garden_id)},
        )

    def find_by_user_id_and_status(
        self, user_id: UUID, status: BookingStatus
    ) -> List[Booking]:
        return self._select_many(
            "WHERE user_id = %s AND status = %s",
            (user_id, status.value),
            "PostgresBookingRepository: find_by_user_id_and_status failed",
            {"user_id": str(user_id), "status": status.value},
        )

    def find_by_garden_id_and_status(
        self, garden_id: UUID, status: BookingStatus
    ) -> List[Booking]:
        return self._select_many(
            "WHERE garden_id = %s AND status = %s",
            (garden_id, status.value),
            "PostgresBookingRepository: find_by_garden_id_and_status failed",
            {"garden_id": str(garden_id), "status": status.value},
        )

    def exists_by_id(self, booking_id: UUID) -> bool:
        row = self._execute(
            query="SELECT 1 FROM bookings WHERE id = %s",
            params=(booking_id,),
            log_msg="PostgresBookingRepository: exists_by_id failed",
            log_extra={"booking_id": str(booking_id)},
            fetch="one",
        )
        return row is not None

    # =========================================================
    # Escrituras
    # =========================================================
    def save(self, booking: Booking) -> Booking:
        """
        Upsert por id.

        - created_at no se actualiza (igual que la columna no-updatable).
        - updated_at toma el valor de la entidad (la entidad lo refresca en
          cada transición) o now() si viene vacío.
        """
        row = self._execute(
            query=f"""
                INSERT INTO bookings (
                    id, user_id, garden_id, start_date, end_date, duration_months,
                    total_price, status, payment_method, created_at, updated_at
                )
                VALUES (
                    %s, %s, %s, %s, %s, %s, %s, %s, %s,
                    COALESCE(%s, now()), COALESCE(%s, now())
                )
                ON CONFLICT (id) DO UPDATE SET
                    user_id = EXCLUDED.user_id,
                    garden_id = EXCLUDED.garden_id,
                    start_date = EXCLUDED.start_date,
                    end_date = EXCLUDED.end_date,
                    duration_months = EXCLUDED.duration_months,
                    total_price = EXCLUDED.total_price,
                    status = EXCLUDED.status,
                    payment_method = EXCLUDED.payment_method,
                    updated_at = EXCLUDED.updated_at
                RETURNING {_BOOKING_COLUMNS}
            """,
            params=(
                booking.id,
                booking.user_id,
                booking.garden_id,
                booking.start_date,
                booking.end_date,
                booking.duration_months,
                booking.total_price,
                booking.status.value,
                booking.payment_method,
                booking.created_at,
                booking.updated_at,
            ),
            log_msg="PostgresBookingRepository: save failed",
            log_extra={"booking_id": str(booking.id), "status": booking.status.value},
            fetch="one",
        )
        if not row:
            raise StorageError(
                "PostgresBookingRepository: save failed (no row returned)"
            )
        return _row_to_booking(row)

    def delete_by_id(self, booking_id: UUID) -> None:
        self._execute(
            query="DELETE FROM bookings WHERE id = %s",
            params=(booking_id,),
            log_msg="PostgresBookingRepository: delete_by_id failed",
            log_extra={"booking_id": str(booking_id)},
            fetch="none",
        )

    def ping(self) -> bool:
        row = self._execute(
            query="SELECT 1",
            params=(),
            log_msg="PostgresBookingRepository: ping failed",
            log_extra={},
            fetch="one",
        )
        return bool(row)
