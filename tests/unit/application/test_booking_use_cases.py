"""
Name: Booking Use Case Tests

Responsibilities:
  - Create validation happens before any write
  - Confirm / Cancel / Delete contracts (None / False for unknown ids)
  - Queries by user / garden / status
  - End-to-end lifecycle on the in-memory store
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from gardenspace.application.usecases import (
    CancelBookingUseCase,
    ConfirmBookingUseCase,
    CreateBookingInput,
    CreateBookingUseCase,
    DeleteBookingUseCase,
    GetBookingUseCase,
    ListBookingsUseCase,
)
from gardenspace.crosscutting.exceptions import (
    InvalidTransitionError,
    StorageError,
    ValidationError,
)
from gardenspace.domain.entities import BookingStatus

pytestmark = pytest.mark.unit


def _input(**overrides) -> CreateBookingInput:
    data = dict(
        user_id=uuid4(),
        garden_id=uuid4(),
        start_date=date(2024, 1, 1),
        end_date=date(2024, 4, 1),
        duration_months=3,
        total_price=Decimal("15000.00"),
    )
    data.update(overrides)
    return CreateBookingInput(**data)


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def tick(self) -> datetime:
        self.now = self.now.replace(minute=self.now.minute + 1)
        return self.now


class TestCreateBooking:
    def test_create_persists_pending_booking(self, booking_repository):
        use_case = CreateBookingUseCase(booking_repository)

        booking = use_case.execute(_input())

        assert booking.status == BookingStatus.PENDING
        assert booking.payment_method is None
        assert booking.created_at is not None
        assert booking.created_at == booking.updated_at
        assert booking_repository.find_by_id(booking.id) == booking

    def test_create_generates_distinct_ids(self, booking_repository):
        use_case = CreateBookingUseCase(booking_repository)
        first = use_case.execute(_input())
        second = use_case.execute(_input())
        assert first.id != second.id

    def test_zero_price_is_allowed(self, booking_repository):
        booking = CreateBookingUseCase(booking_repository).execute(
            _input(total_price=Decimal("0"))
        )
        assert booking.total_price == Decimal("0")

    def test_values_at_column_limits_are_accepted(self, booking_repository):
        booking = CreateBookingUseCase(booking_repository).execute(
            _input(duration_months=2**31 - 1, total_price=Decimal("9999999999.99"))
        )
        assert booking.duration_months == 2**31 - 1
        assert booking.total_price == Decimal("9999999999.99")

    def test_trailing_zeros_beyond_two_decimals_are_accepted(self, booking_repository):
        booking = CreateBookingUseCase(booking_repository).execute(
            _input(total_price=Decimal("1.500"))
        )
        assert booking.total_price == Decimal("1.50")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"end_date": date(2024, 1, 1)},
            {"end_date": date(2023, 12, 31)},
            {"duration_months": 0},
            {"duration_months": -1},
            {"total_price": Decimal("-0.01")},
            {"total_price": Decimal("NaN")},
            {"duration_months": 2**31},
            {"total_price": Decimal("10000000000")},
            {"total_price": Decimal("1.234")},
        ],
    )
    def test_invalid_input_never_reaches_store(self, overrides):
        repo = MagicMock()
        use_case = CreateBookingUseCase(repo)

        with pytest.raises(ValidationError):
            use_case.execute(_input(**overrides))

        repo.save.assert_not_called()

    def test_duration_is_not_cross_checked_against_dates(self, booking_repository):
        booking = CreateBookingUseCase(booking_repository).execute(
            _input(duration_months=12)
        )
        assert booking.duration_months == 12


class TestConfirmBooking:
    def test_confirm_pending(self, booking_repository):
        created = CreateBookingUseCase(booking_repository).execute(_input())
        clock = _Clock()
        clock.tick()

        confirmed = ConfirmBookingUseCase(booking_repository, clock=clock).execute(
            created.id, "card_1234"
        )

        assert confirmed.status == BookingStatus.CONFIRMED
        assert confirmed.payment_method == "card_1234"
        assert confirmed.updated_at == clock.now
        assert confirmed.created_at == created.created_at

    def test_confirm_unknown_returns_none(self, booking_repository):
        assert ConfirmBookingUseCase(booking_repository).execute(uuid4(), "card") is None

    @pytest.mark.parametrize("method", ["", "   ", "x" * 101])
    def test_confirm_unknown_with_invalid_method_returns_none(
        self, booking_repository, method
    ):
        assert ConfirmBookingUseCase(booking_repository).execute(uuid4(), method) is None

    def test_confirm_twice_overwrites_payment_method(self, booking_repository):
        created = CreateBookingUseCase(booking_repository).execute(_input())
        use_case = ConfirmBookingUseCase(booking_repository)

        use_case.execute(created.id, "card_1234")
        again = use_case.execute(created.id, "transfer")

        assert again.status == BookingStatus.CONFIRMED
        assert again.payment_method == "transfer"

    def test_confirm_cancelled_is_rejected(self, booking_repository):
        created = CreateBookingUseCase(booking_repository).execute(_input())
        CancelBookingUseCase(booking_repository).execute(created.id)

        with pytest.raises(InvalidTransitionError):
            ConfirmBookingUseCase(booking_repository).execute(created.id, "card")

        stored = booking_repository.find_by_id(created.id)
        assert stored.status == BookingStatus.CANCELLED
        assert stored.payment_method is None

    @pytest.mark.parametrize("method", ["", "   ", "x" * 101])
    def test_invalid_payment_method(self, booking_repository, method):
        created = CreateBookingUseCase(booking_repository).execute(_input())

        with pytest.raises(ValidationError):
            ConfirmBookingUseCase(booking_repository).execute(created.id, method)

        assert booking_repository.find_by_id(created.id).status == BookingStatus.PENDING


class TestCancelBooking:
    def test_cancel_pending(self, booking_repository):
        created = CreateBookingUseCase(booking_repository).execute(_input())
        cancelled = CancelBookingUseCase(booking_repository).execute(created.id)
        assert cancelled.status == BookingStatus.CANCELLED

    def test_cancel_confirmed_keeps_payment_method(self, booking_repository):
        created = CreateBookingUseCase(booking_repository).execute(_input())
        ConfirmBookingUseCase(booking_repository).execute(created.id, "card_1234")

        cancelled = CancelBookingUseCase(booking_repository).execute(created.id)

        assert cancelled.status == BookingStatus.CANCELLED
        assert cancelled.payment_method == "card_1234"

    def test_cancel_cancelled_refreshes_updated_at(self, booking_repository):
        created = CreateBookingUseCase(booking_repository).execute(_input())
        clock = _Clock()
        use_case = CancelBookingUseCase(booking_repository, clock=clock)

        clock.tick()
        first = use_case.execute(created.id)
        clock.tick()
        second = use_case.execute(created.id)

        assert second.status == BookingStatus.CANCELLED
        assert second.updated_at > first.updated_at

    def test_cancel_unknown_returns_none(self, booking_repository):
        assert CancelBookingUseCase(booking_repository).execute(uuid4()) is None


class TestDeleteBooking:
    def test_delete_existing(self, booking_repository):
        created = CreateBookingUseCase(booking_repository).execute(_input())

        assert DeleteBookingUseCase(booking_repository).execute(created.id) is True
        assert booking_repository.find_by_id(created.id) is None

    def test_delete_unknown_returns_false(self, booking_repository):
        assert DeleteBookingUseCase(booking_repository).execute(uuid4()) is False

    def test_delete_twice(self, booking_repository):
        created = CreateBookingUseCase(booking_repository).execute(_input())
        use_case = DeleteBookingUseCase(booking_repository)

        assert use_case.execute(created.id) is True
        assert use_case.execute(created.id) is False

    def test_storage_error_propagates(self):
        repo = MagicMock()
        repo.exists_by_id.side_effect = StorageError("db down")

        with pytest.raises(StorageError):
            DeleteBookingUseCase(repo).execute(uuid4())


class TestQueries:
    def test_list_by_user_garden_and_status(self, booking_repository):
        create = CreateBookingUseCase(booking_repository)
        user, other_user, garden = uuid4(), uuid4(), uuid4()

        a = create.execute(_input(user_id=user, garden_id=garden))
        b = create.execute(_input(user_id=user))
        c = create.execute(_input(user_id=other_user, garden_id=garden))
        ConfirmBookingUseCase(booking_repository).execute(a.id, "card")

        queries = ListBookingsUseCase(booking_repository)

        assert {x.id for x in queries.by_user(user)} == {a.id, b.id}
        assert {x.id for x in queries.by_garden(garden)} == {a.id, c.id}
        assert [x.id for x in queries.by_user(user, BookingStatus.CONFIRMED)] == [a.id]
        assert [x.id for x in queries.by_garden(garden, BookingStatus.PENDING)] == [c.id]
        assert len(queries.all()) == 3
        assert queries.by_user(uuid4()) == []

    def test_queries_pick_repository_method_by_status(self):
        repo = MagicMock()
        queries = ListBookingsUseCase(repo)
        user, garden = uuid4(), uuid4()

        queries.by_user(user)
        queries.by_garden(garden, BookingStatus.CANCELLED)
        queries.all()

        repo.find_by_user_id.assert_called_once_with(user)
        repo.find_by_garden_id_and_status.assert_called_once_with(
            garden, BookingStatus.CANCELLED
        )
        repo.find_all.assert_called_once_with()

    def test_get_unknown_returns_none(self, booking_repository):
        assert GetBookingUseCase(booking_repository).execute(uuid4()) is None


class TestLifecycle:
    def test_create_confirm_list_delete(self, booking_repository):
        user, garden = uuid4(), uuid4()

        booking = CreateBookingUseCase(booking_repository).execute(
            CreateBookingInput(
                user_id=user,
                garden_id=garden,
                start_date=date(2024, 1, 1),
                end_date=date(2024, 4, 1),
                duration_months=3,
                total_price=Decimal("15000.00"),
            )
        )
        assert booking.status == BookingStatus.PENDING

        confirmed = ConfirmBookingUseCase(booking_repository).execute(
            booking.id, "card_1234"
        )
        assert confirmed.status == BookingStatus.CONFIRMED
        assert confirmed.payment_method == "card_1234"

        listed = ListBookingsUseCase(booking_repository).by_user(user)
        assert [b.id for b in listed] == [booking.id]
        assert listed[0].status == BookingStatus.CONFIRMED

        assert DeleteBookingUseCase(booking_repository).execute(booking.id) is True
        assert GetBookingUseCase(booking_repository).execute(booking.id) is None
