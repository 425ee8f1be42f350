"""
Name: Logging and Metrics Tests

Responsibilities:
  - JSON formatter includes request context and redacts secrets
  - Metrics endpoint output contains the project counters
"""

import json
import logging

import pytest

from gardenspace.context import clear_context, set_request_context
from gardenspace.crosscutting.logger import REDACTED, JSONFormatter
from gardenspace.crosscutting.metrics import (
    _normalize_endpoint,
    get_metrics_response,
    record_auth_event,
    record_booking_transition,
)

pytestmark = pytest.mark.unit


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="gardenspace.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hola",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_redacts_sensitive_keys(self):
        out = json.loads(
            JSONFormatter().format(
                _record(password="pw", token="abc", authorization="Bearer x", user_id="u1")
            )
        )

        assert out["password"] == REDACTED
        assert out["token"] == REDACTED
        assert out["authorization"] == REDACTED
        assert out["user_id"] == "u1"
        assert out["message"] == "hola"

    def test_redacts_nested_keys(self):
        out = json.loads(
            JSONFormatter().format(_record(payload={"jwt_secret": "s", "ok": 1}))
        )
        assert out["payload"] == {"jwt_secret": REDACTED, "ok": 1}

    def test_includes_request_context(self):
        set_request_context(request_id="req-1", method="GET", path="/bookings")
        try:
            out = json.loads(JSONFormatter().format(_record()))
        finally:
            clear_context()

        assert out["request_id"] == "req-1"
        assert out["method"] == "GET"
        assert out["path"] == "/bookings"


class TestMetrics:
    def test_counters_are_exposed(self):
        record_auth_event("login", "success")
        record_booking_transition("create", "pending")

        body, content_type = get_metrics_response()
        text = body.decode()

        assert "text/plain" in content_type
        assert "gardenspace_auth_events_total" in text
        assert 'action="create"' in text

    def test_endpoint_normalization_hides_ids(self):
        normalized = _normalize_endpoint(
            "/bookings/3fa85f64-5717-4562-b3fc-2c963f66afa6/confirm"
        )
        assert normalized == "/bookings/{id}/confirm"
