"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (APP_ENV=test => in-memory stores)
  - Provide reusable fixtures (fast hasher, token codec, auth service, repos)
  - Reset composition-root singletons between tests

Collaborators:
  - pytest: Test framework
  - gardenspace.identity / gardenspace.infrastructure / gardenspace.container

Notes:
  - Fixtures are auto-discovered by pytest
  - The env must be set BEFORE importing gardenspace (settings are cached)
"""

import os
import sys
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-for-unit-tests-only-0123456789")
os.environ.setdefault("LOG_JSON", "true")

from gardenspace.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from argon2 import PasswordHasher  # noqa: E402

from gardenspace.domain.entities import Booking, BookingStatus  # noqa: E402
from gardenspace.identity.auth_service import AuthService  # noqa: E402
from gardenspace.identity.passwords import PasswordHasherService  # noqa: E402
from gardenspace.identity.tokens import TokenCodec  # noqa: E402
from gardenspace.infrastructure.repositories import (  # noqa: E402
    InMemoryBookingRepository,
    InMemoryUserRepository,
)

TEST_SECRET = "test-secret-for-unit-tests-only-0123456789"


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require PostgreSQL)"
    )


class FakeClock:
    """Reloj controlable para tokens y timestamps."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


# ============================================================================
# Identity fixtures
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fast_hasher() -> PasswordHasherService:
    """R: Argon2 con parámetros mínimos (tests rápidos)."""
    return PasswordHasherService(
        PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
    )


@pytest.fixture
def token_codec(clock: FakeClock) -> TokenCodec:
    return TokenCodec(TEST_SECRET, ttl_minutes=60, clock=clock)


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def auth_service(
    user_repository: InMemoryUserRepository,
    fast_hasher: PasswordHasherService,
    token_codec: TokenCodec,
    clock: FakeClock,
) -> AuthService:
    return AuthService(user_repository, fast_hasher, token_codec, clock=clock)


# ============================================================================
# Booking fixtures
# ============================================================================


@pytest.fixture
def booking_repository() -> InMemoryBookingRepository:
    return InMemoryBookingRepository()


@pytest.fixture
def sample_booking() -> Booking:
    """R: Reserva pending de 3 meses."""
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return Booking(
        id=uuid4(),
        user_id=uuid4(),
        garden_id=uuid4(),
        start_date=date(2024, 1, 1),
        end_date=date(2024, 4, 1),
        duration_months=3,
        total_price=Decimal("15000.00"),
        status=BookingStatus.PENDING,
        created_at=now,
        updated_at=now,
    )


# ============================================================================
# Composition root isolation
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_container():
    """R: Cada test arranca con stores in-memory vacíos."""
    from gardenspace.container import reset_container

    reset_container()
    yield
    reset_container()
