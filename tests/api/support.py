# This file provides shared helpers for API endpoint tests.
# Dependency overrides let endpoint tests run against fakes or a temporary SQLite store.
# The helpers build consistent config objects and scoped TestClient contexts.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi.testclient import TestClient

from provider_search.api.api_config import ApiConfig
from provider_search.api.app import app
from provider_search.api.dependencies import get_config, get_database_client, get_search_service

STORE_TABLES = {"service_providers", "provider_services", "users"}


def build_test_config(
    *,
    database_url: str = "sqlite://",
    environment: str = "test",
    default_page_size: int = 10,
    max_page_size: int = 50,
) -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Provider API",
        api_version_path="/api/v1",
        schema_version="1.0.0",
        host="0.0.0.0",
        port=8000,
        environment=environment,
        database_url=database_url,
        default_page_size=default_page_size,
        max_page_size=max_page_size,
        enable_request_logging=False,
        allowed_origins=[],
        providers_table_name="service_providers",
        services_table_name="provider_services",
        owners_table_name="users",
        request_log_table_name="api_request_log",
        app_version="0.1.0",
        allowed_table_names=STORE_TABLES | {"api_request_log"},
    )


class FakeDBClient:
    """Simple fake DB dependency for health/readiness endpoint tests."""

    def __init__(self, *, connected: bool = True, existing_tables: set[str] | None = None) -> None:
        self._connected = connected
        self._tables = STORE_TABLES if existing_tables is None else existing_tables

    def can_connect(self) -> bool:
        return self._connected

    def table_exists(self, table_name: str) -> bool:
        return self._connected and table_name in self._tables

    def log_request(self, **_: Any) -> None:
        return None


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    db_client: Any | None = None,
    search_service: Any | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()

    app.dependency_overrides[get_config] = lambda: resolved_config
    if db_client is not None:
        app.dependency_overrides[get_database_client] = lambda: db_client
    if search_service is not None:
        app.dependency_overrides[get_search_service] = lambda: search_service

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
