"""Unit tests for error_responses and typed exceptions."""

import pytest

from gardenspace.crosscutting.error_responses import (
    OPENAPI_ERROR_RESPONSES,
    ErrorCode,
    not_found,
    unauthorized,
    validation_error,
)
from gardenspace.crosscutting.exceptions import (
    ConflictError,
    GardenSpaceError,
    InvalidTransitionError,
    StorageError,
)

pytestmark = pytest.mark.unit


class TestErrorFactories:
    def test_validation_error(self):
        exc = validation_error("Invalid input", [{"field": "name", "msg": "required"}])
        assert exc.status_code == 422
        assert exc.code == ErrorCode.VALIDATION_ERROR
        assert exc.errors == [{"field": "name", "msg": "required"}]

    def test_not_found(self):
        exc = not_found("Booking", "b-123")
        assert exc.status_code == 404
        assert exc.code == ErrorCode.NOT_FOUND
        assert exc.detail == "Booking 'b-123' not found"

    def test_unauthorized_sets_www_authenticate(self):
        exc = unauthorized()
        assert exc.status_code == 401
        assert exc.code == ErrorCode.UNAUTHORIZED
        assert exc.headers["WWW-Authenticate"] == "Bearer"

    def test_openapi_documents_booking_errors(self):
        assert {401, 404, 409, 422}.issubset(OPENAPI_ERROR_RESPONSES)


class TestTypedExceptions:
    def test_error_id_is_generated(self):
        exc = StorageError("db down")
        assert exc.error_id
        assert exc.error_code == "STORAGE_ERROR"

    def test_invalid_transition_is_a_conflict(self):
        exc = InvalidTransitionError("nope")
        assert isinstance(exc, ConflictError)
        assert isinstance(exc, GardenSpaceError)
        assert exc.error_code == "INVALID_TRANSITION"

    def test_explicit_error_id_and_message_are_kept(self):
        exc = ConflictError("dup", error_id="abc")
        assert exc.error_code == "CONFLICT"
        assert exc.error_id == "abc"
        assert exc.message == "dup"
        assert str(exc) == "dup"
