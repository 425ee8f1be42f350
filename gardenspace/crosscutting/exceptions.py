# gardenspace/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  GardenSpaceError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP
  - Generar error_id para rastreo
  - Distinguir conflicto / autenticación / validación / storage

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - identity/auth_service.py, application/usecases/booking/*
  - infrastructure/repositories/postgres/* (StorageError)

Nota:
  - "No encontrado" NO es una excepción: los casos de uso devuelven None/False.
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class GardenSpaceError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      GardenSpaceError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "GARDENSPACE_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class ConflictError(GardenSpaceError):
    """Colisión con el estado existente (ej: email ya registrado)."""

    error_code: str = "CONFLICT"


class InvalidTransitionError(ConflictError):
    """Transición de estado no permitida (ej: confirmar una reserva cancelada)."""

    error_code: str = "INVALID_TRANSITION"


class AuthenticationError(GardenSpaceError):
    """Credenciales inválidas o token inválido/expirado (mensaje uniforme)."""

    error_code: str = "UNAUTHORIZED"


class ValidationError(GardenSpaceError):
    """Input inválido detectado antes de cualquier escritura."""

    error_code: str = "VALIDATION_ERROR"


class StorageError(GardenSpaceError):
    """Errores del store (conexión, query, timeout, pool, datos corruptos)."""

    error_code: str = "STORAGE_ERROR"
