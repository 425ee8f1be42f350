"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for users (credential store) and bookings (booking store).
- Keep the application/identity layers independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing (mock/stub repositories).

Collaborators
- domain.entities: Booking, BookingStatus
- identity.users: User
- infrastructure.repositories: postgres.*, in_memory.* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- "Not found" is None / False, never an exception.
- Storage failures surface as crosscutting.exceptions.StorageError.

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
- Listing order is stable within a snapshot (implementations: created_at DESC, id DESC).
"""

from typing import List, Optional, Protocol
from uuid import UUID

from ..identity.users import User
from .entities import Booking, BookingStatus


class UserRepository(Protocol):
    """
    R: Credential store contract.

    Implementations must enforce email uniqueness (ConflictError on duplicates).
    """

    def find_by_id(self, user_id: UUID) -> Optional[User]:
        """R: Fetch a user by id (token resolution)."""
        ...

    def find_by_email(self, email: str) -> Optional[User]:
        """R: Fetch a user by exact email (login / registration check)."""
        ...

    def save(self, user: User) -> User:
        """R: Insert or update a user; returns the persisted record."""
        ...

    def ping(self) -> bool:
        """R: Cheap availability check for the readiness endpoint."""
        ...


class BookingRepository(Protocol):
    """
    R: Booking store contract.

    Implementations must provide:
      - Lookups by id, user and garden (optionally filtered by status)
      - Upsert (save) and hard delete
    """

    def find_all(self) -> List[Booking]:
        """R: Every booking in the store."""
        ...

    def find_by_id(self, booking_id: UUID) -> Optional[Booking]:
        """R: Fetch a single booking by id."""
        ...

    def find_by_user_id(self, user_id: UUID) -> List[Booking]:
        """R: Bookings made by a user."""
        ...

    def find_by_garden_id(self, garden_id: UUID) -> List[Booking]:
        """R: Bookings for a garden."""
        ...

    def find_by_user_id_and_status(
        self, user_id: UUID, status: BookingStatus
    ) -> List[Booking]:
        """R: Bookings made by a user in a given status."""
        ...

    def find_by_garden_id_and_status(
        self, garden_id: UUID, status: BookingStatus
    ) -> List[Booking]:
        """R: Bookings for a garden in a given status."""
        ...

    def save(self, booking: Booking) -> Booking:
        """R: Insert or update (last write wins); returns the persisted record."""
        ...

    def exists_by_id(self, booking_id: UUID) -> bool:
        """R: True if a booking with this id exists."""
        ...

    def delete_by_id(self, booking_id: UUID) -> None:
        """R: Hard delete (no tombstone)."""
        ...

    def ping(self) -> bool:
        """R: Cheap availability check for the readiness endpoint."""
        ...
