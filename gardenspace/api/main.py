"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (body limit, request context, CORS)
  - Mount auth routes and booking routes
  - Expose health check, readiness and metrics endpoints

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - BodyLimitMiddleware: rejects oversized bodies with 413
  - interfaces.api.http.router: booking endpoints
  - api.auth_routes: register / login / me

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - DB pool is only initialized when the storage backend is postgres

Notes:
  - Middleware order matters: RequestContext → CORS → BodyLimit → routes
  - /healthz is liveness only; /readyz pings the stores
  - /metrics exposes Prometheus metrics
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..container import ping_storage
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.router import router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and initializes pool."""
    settings = get_settings()
    backend = settings.resolved_storage_backend()

    if backend == "postgres":
        # Initialize DB pool (must happen before any repository usage)
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        logger.info(
            "GardenSpace API starting up",
            extra={
                "app_env": settings.app_env,
                "storage_backend": backend,
                "jwt_ttl_minutes": settings.jwt_access_ttl_minutes,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )
        yield
    finally:
        if backend == "postgres":
            close_pool()
        logger.info("GardenSpace API shutting down")


def _get_allowed_origins() -> list[str]:
    return get_settings().get_allowed_origins_list()


# R: Create FastAPI application instance with API metadata
app = FastAPI(
    title="GardenSpace API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "auth", "description": "User registration and authentication (JWT)"},
        {"name": "bookings", "description": "Garden plot booking lifecycle"},
    ],
)

# R: Middleware order (bottom = first to execute):
# 1. RequestContextMiddleware - sets request_id
# 2. CORSMiddleware - handles preflight
# 3. BodyLimitMiddleware - rejects oversized bodies early
app.add_middleware(BodyLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_allowed_origins(),
    allow_credentials=get_settings().cors_allow_credentials,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "X-Request-Id",
    ],
)
app.add_middleware(RequestContextMiddleware)

app.include_router(auth_router)
app.include_router(router)

register_exception_handlers(app)


@app.get("/healthz")
def healthz(request: Request):
    """Liveness: the process is up and serving requests."""
    return {
        "ok": True,
        "request_id": getattr(request.state, "request_id", None),
    }


@app.get("/readyz")
def readyz(request: Request, response: Response):
    """
    R: Readiness check for the credential and booking stores.

    Returns:
        ok: True if both stores answer a ping
        storage: "connected" or "disconnected"
        request_id: Correlation ID for this request
    """
    storage_status = "disconnected"
    try:
        if ping_storage():
            storage_status = "connected"
    except Exception as e:
        logger.warning("Ready check: storage unavailable", extra={"error": str(e)})

    ok = storage_status == "connected"
    if not ok:
        response.status_code = 503

    return {
        "ok": ok,
        "storage": storage_status,
        "request_id": getattr(request.state, "request_id", None),
    }


# R: Prometheus metrics endpoint
@app.get("/metrics")
def metrics():
    """Expose Prometheus metrics in text format."""
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
