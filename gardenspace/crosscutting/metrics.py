"""
===============================================================================
TARJETA CRC — crosscutting/metrics.py
===============================================================================

Módulo:
    Métricas Prometheus de la API (registry propio)

Responsabilidades:
    - HTTP: gardenspace_requests_total / gardenspace_request_latency_seconds
      etiquetadas por ruta normalizada (ids -> {id}) y clase de status.
    - Identidad: gardenspace_auth_events_total{operation, outcome}.
    - Reservas: gardenspace_booking_transitions_total{action, status}.
    - Render de /metrics.

Colaboradores:
    - crosscutting.middleware (HTTP)
    - identity.auth_service (register / login / resolve)
    - application/usecases/booking (create / confirm / cancel / delete)

Restricciones:
    - Nunca etiquetar con user_id, booking_id ni emails.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

_requests_total = Counter(
    "gardenspace_requests_total",
    "HTTP requests by route, method and status class",
    ["endpoint", "method", "status"],
    registry=_registry,
)
_request_latency = Histogram(
    "gardenspace_request_latency_seconds",
    "HTTP request latency in seconds",
    ["endpoint", "method"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=_registry,
)
_auth_events_total = Counter(
    "gardenspace_auth_events_total",
    "Identity operations by outcome",
    ["operation", "outcome"],
    registry=_registry,
)
_booking_transitions_total = Counter(
    "gardenspace_booking_transitions_total",
    "Booking writes by action and resulting status",
    ["action", "status"],
    registry=_registry,
)

_UUID_SEGMENT = re.compile(
    r"/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}(?=/|$)",
    re.IGNORECASE,
)
_NUMERIC_SEGMENT = re.compile(r"/\d+(?=/|$)")


def _normalize_endpoint(path: str) -> str:
    """/bookings/<uuid>/confirm -> /bookings/{id}/confirm"""
    path = _UUID_SEGMENT.sub("/{id}", path)
    return _NUMERIC_SEGMENT.sub("/{id}", path)


def _status_class(code: int) -> str:
    return f"{code // 100}xx" if 100 <= code < 600 else "other"


def record_request_metrics(
    endpoint: str, method: str, status_code: int, latency_seconds: float
) -> None:
    route = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=route, method=method, status=_status_class(status_code)
    ).inc()
    _request_latency.labels(endpoint=route, method=method).observe(latency_seconds)


def record_auth_event(operation: str, outcome: str) -> None:
    """operation: register | login | resolve; outcome: success | failure | conflict."""
    _auth_events_total.labels(operation=operation, outcome=outcome).inc()


def record_booking_transition(action: str, status: str) -> None:
    """action: create | confirm | cancel | delete; status: estado resultante o
    "deleted" / "rejected"."""
    _booking_transitions_total.labels(action=action, status=status).inc()


def get_metrics_response() -> tuple[bytes, str]:
    return generate_latest(_registry), CONTENT_TYPE_LATEST
