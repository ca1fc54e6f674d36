# This file assembles the provider discovery FastAPI application.
# Every response gets a request ID and timing header, and HTTP metrics are labelled by route
# template so `/search/providers?...` calls share one series regardless of their filters.
# At startup the store tables are probed once and the result is logged; the API still starts without them.

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import RequestResponseEndpoint

from provider_search.api.api_config import ApiConfig, get_api_config
from provider_search.api.dependencies import get_database_client
from provider_search.api.error_handlers import register_error_handlers
from provider_search.api.routers.health import router as health_router
from provider_search.api.routers.search import router as search_router
from provider_search.common.logging import configure_logging

LOGGER = logging.getLogger("api")

API_HTTP_REQUESTS_TOTAL = Counter(
    "api_http_requests_total",
    "HTTP requests answered by the provider API.",
    ["method", "route", "status_code"],
)
API_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "api_http_request_duration_seconds",
    "Provider API request latency in seconds.",
    ["method", "route"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
API_HTTP_INFLIGHT_REQUESTS = Gauge(
    "api_http_inflight_requests",
    "Provider API requests currently in progress.",
    ["method"],
)


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    config = get_api_config()
    try:
        db = get_database_client()
        connected = db.can_connect()
        missing = [name for name in config.store_table_names if connected and not db.table_exists(name)]
    except Exception:
        LOGGER.warning("Provider store check failed at startup", exc_info=True)
        connected, missing = False, []

    app.state.db_connected_at_startup = connected
    if not connected:
        LOGGER.warning("Provider store is unreachable; search requests will fail until it is up")
    elif missing:
        LOGGER.warning("Provider store is missing tables: %s", ", ".join(missing))
    else:
        LOGGER.info("Provider store ready tables=%s", ",".join(config.store_table_names))
    yield


def _log_request(config: ApiConfig, request: Request, status_code: int, duration_ms: float) -> None:
    try:
        get_database_client().log_request(
            table_name=config.request_log_table_name,
            request_id=request.state.request_id,
            path=request.url.path,
            method=request.method,
            status_code=status_code,
            duration_ms=duration_ms,
        )
    except Exception:
        LOGGER.warning("Request log write failed request_id=%s", request.state.request_id, exc_info=True)


def create_app() -> FastAPI:
    """Create the configured provider discovery app."""

    config = get_api_config()
    configure_logging(config.log_level)

    app = FastAPI(
        title=config.api_name,
        description=(
            "Provider discovery API. Searches local service providers by free text, "
            "category, minimum rating, service name, and distance from a location."
        ),
        version=config.app_version,
        lifespan=_lifespan,
        openapi_tags=[
            {"name": "health", "description": "Liveness, store readiness, and build metadata."},
            {"name": "search", "description": "Provider search, category catalog, and popular services."},
        ],
    )

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        started = time.perf_counter()
        status_code = 500
        inflight = API_HTTP_INFLIGHT_REQUESTS.labels(method=request.method)
        inflight.inc()
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0
            response.headers["x-request-id"] = request.state.request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"
            if config.enable_request_logging:
                _log_request(config, request, status_code, duration_ms)
            return response
        finally:
            inflight.dec()
            route = _route_label(request)
            API_HTTP_REQUESTS_TOTAL.labels(
                method=request.method, route=route, status_code=str(status_code)
            ).inc()
            API_HTTP_REQUEST_DURATION_SECONDS.labels(method=request.method, route=route).observe(
                time.perf_counter() - started
            )

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(search_router, prefix=config.api_version_path)
    return app


app = create_app()
