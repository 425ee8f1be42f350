"""
===============================================================================
TARJETA CRC — gardenspace/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, hasher, token codec, servicios).
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache).
  - Centralizar decisiones runtime basadas en Settings (storage backend).

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories.* (puertos)
  - infrastructure.repositories.* (implementaciones)
  - identity.* (AuthService, PasswordHasherService, TokenCodec)
  - application.usecases.booking.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO debe depender de FastAPI (solo expone factories).
  - Los stores in-memory viven en el proceso: en tests se resetean con
    reset_container().
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases import (
    CancelBookingUseCase,
    ConfirmBookingUseCase,
    CreateBookingUseCase,
    DeleteBookingUseCase,
    GetBookingUseCase,
    ListBookingsUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import BookingRepository, UserRepository
from .identity.auth_service import AuthService
from .identity.passwords import PasswordHasherService
from .identity.tokens import TokenCodec
from .infrastructure.repositories import (
    InMemoryBookingRepository,
    InMemoryUserRepository,
    PostgresBookingRepository,
    PostgresUserRepository,
)

# =============================================================================
# Helpers internos
# =============================================================================


def _use_memory_storage() -> bool:
    """in-memory en test/dev explícito; Postgres en runtime."""
    return get_settings().resolved_storage_backend() == "memory"


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Credential store."""
    if _use_memory_storage():
        return InMemoryUserRepository()
    return PostgresUserRepository()


@lru_cache(maxsize=1)
def get_booking_repository() -> BookingRepository:
    """Booking store."""
    if _use_memory_storage():
        return InMemoryBookingRepository()
    return PostgresBookingRepository()


# =============================================================================
# Identity
# =============================================================================


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasherService:
    return PasswordHasherService()


@lru_cache(maxsize=1)
def get_token_codec() -> TokenCodec:
    """Token codec con el secreto de proceso (compartido entre instancias)."""
    settings = get_settings()
    return TokenCodec(
        settings.jwt_secret,
        ttl_minutes=settings.jwt_access_ttl_minutes,
        issuer=settings.jwt_issuer or None,
    )


@lru_cache(maxsize=1)
def get_auth_service() -> AuthService:
    return AuthService(
        users=get_user_repository(),
        hasher=get_password_hasher(),
        tokens=get_token_codec(),
    )


# =============================================================================
# Use cases (booking)
# =============================================================================


def get_create_booking_use_case() -> CreateBookingUseCase:
    return CreateBookingUseCase(repository=get_booking_repository())


def get_confirm_booking_use_case() -> ConfirmBookingUseCase:
    return ConfirmBookingUseCase(
        repository=get_booking_repository(),
        max_payment_method_chars=get_settings().max_payment_method_chars,
    )


def get_cancel_booking_use_case() -> CancelBookingUseCase:
    return CancelBookingUseCase(repository=get_booking_repository())


def get_delete_booking_use_case() -> DeleteBookingUseCase:
    return DeleteBookingUseCase(repository=get_booking_repository())


def get_get_booking_use_case() -> GetBookingUseCase:
    return GetBookingUseCase(repository=get_booking_repository())


def get_list_bookings_use_case() -> ListBookingsUseCase:
    return ListBookingsUseCase(repository=get_booking_repository())


# =============================================================================
# Health
# =============================================================================


def ping_storage() -> bool:
    """True si ambos stores responden (usado por /readyz)."""
    return bool(get_user_repository().ping() and get_booking_repository().ping())


def reset_container() -> None:
    """Limpia singletons (tests / recarga de settings)."""
    for factory in (
        get_user_repository,
        get_booking_repository,
        get_password_hasher,
        get_token_codec,
        get_auth_service,
    ):
        factory.cache_clear()
