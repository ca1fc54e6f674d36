# This file provides dependency factories for FastAPI routes and middleware.
# Services are created once per process and shared through dependency injection,
# which also lets endpoint tests swap them out with overrides.

from __future__ import annotations

from functools import lru_cache

from provider_search.api.api_config import ApiConfig, get_api_config
from provider_search.api.db_access import DatabaseClient
from provider_search.api.services.search_service import SearchService


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    config = get_api_config()
    return DatabaseClient(database_url=config.database_url)


@lru_cache(maxsize=1)
def get_search_service() -> SearchService:
    config = get_api_config()
    db_client = get_database_client()
    return SearchService(config=config, db=db_client)


def get_config() -> ApiConfig:
    return get_api_config()
