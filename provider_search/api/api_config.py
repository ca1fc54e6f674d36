# This file defines runtime settings for the search API in one place.
# Each setting is read from one environment variable; `_ENV_SETTINGS` is the full list.
# Store table names are validated against an identifier pattern and an allowlist before any SQL uses them.

from __future__ import annotations

import os
import re
from collections.abc import Callable
from functools import lru_cache
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
PRODUCTION_ENVIRONMENTS = frozenset({"production", "prod"})
_TRUE_VALUES = {"1", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "no", "n", "off"}


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Provider Discovery API"
    api_version_path: str = "/api/v1"
    schema_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    environment: str = "local"
    log_level: str = "INFO"
    database_url: str
    default_page_size: int = 10
    max_page_size: int = 50
    enable_request_logging: bool = False
    allowed_origins: list[str] = Field(default_factory=list)
    providers_table_name: str = "service_providers"
    services_table_name: str = "provider_services"
    owners_table_name: str = "users"
    request_log_table_name: str = "api_request_log"
    app_version: str = "0.1.0"
    allowed_table_names: set[str] = Field(default_factory=set)

    @field_validator("api_version_path")
    @classmethod
    def validate_api_version_path(cls, value: str) -> str:
        segments = [segment for segment in value.split("/") if segment]
        if not value.startswith("/") or len(segments) < 2 or not segments[-1].startswith("v"):
            raise ValueError("api_version_path must look like '/api/v1'.")
        return "/" + "/".join(segments)

    @field_validator(
        "providers_table_name",
        "services_table_name",
        "owners_table_name",
        "request_log_table_name",
    )
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        return _checked_identifier(value)

    @field_validator("default_page_size", "max_page_size")
    @classmethod
    def validate_page_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Page sizes must be at least 1.")
        return value

    @model_validator(mode="after")
    def validate_page_size_bounds(self) -> "ApiConfig":
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size must not exceed max_page_size.")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in PRODUCTION_ENVIRONMENTS

    @property
    def store_table_names(self) -> tuple[str, str, str]:
        return (self.providers_table_name, self.services_table_name, self.owners_table_name)

    def validate_table_name(self, table_name: str) -> str:
        _checked_identifier(table_name)
        if table_name not in self.allowed_table_names:
            raise ValueError(f"Table name is not in allowlist: {table_name!r}")
        return table_name


def _checked_identifier(value: str) -> str:
    if not _IDENTIFIER_RE.match(value):
        raise ValueError(f"Unsafe SQL identifier: {value!r}")
    return value


def _as_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be boolean-like, got {raw!r}")


def _as_int(name: str, raw: str) -> int:
    return int(raw)


def _as_list(name: str, raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _as_str(name: str, raw: str) -> str:
    return raw


# field name -> (environment variable, parser)
_ENV_SETTINGS: dict[str, tuple[str, Callable[[str, str], Any]]] = {
    "api_name": ("API_NAME", _as_str),
    "api_version_path": ("API_VERSION_PATH", _as_str),
    "schema_version": ("API_SCHEMA_VERSION", _as_str),
    "host": ("API_HOST", _as_str),
    "port": ("API_PORT", _as_int),
    "environment": ("ENV", _as_str),
    "log_level": ("LOG_LEVEL", _as_str),
    "database_url": ("DATABASE_URL", _as_str),
    "default_page_size": ("API_DEFAULT_PAGE_SIZE", _as_int),
    "max_page_size": ("API_MAX_PAGE_SIZE", _as_int),
    "enable_request_logging": ("API_ENABLE_REQUEST_LOGGING", _as_bool),
    "allowed_origins": ("API_ALLOWED_ORIGINS", _as_list),
    "providers_table_name": ("API_PROVIDERS_TABLE_NAME", _as_str),
    "services_table_name": ("API_SERVICES_TABLE_NAME", _as_str),
    "owners_table_name": ("API_OWNERS_TABLE_NAME", _as_str),
    "request_log_table_name": ("API_REQUEST_LOG_TABLE_NAME", _as_str),
    "app_version": ("APP_VERSION", _as_str),
}


def _read_environment() -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field_name, (env_name, parse) in _ENV_SETTINGS.items():
        raw = os.getenv(env_name)
        if raw is None or raw.strip() == "":
            continue
        values[field_name] = parse(env_name, raw)
    return values


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    values = _read_environment()
    if not values.get("database_url"):
        raise RuntimeError("DATABASE_URL is required for API startup.")

    config = ApiConfig.model_validate(values)
    extra_tables = _as_list("API_ALLOWED_TABLE_NAMES", os.getenv("API_ALLOWED_TABLE_NAMES", ""))
    allowed = {*config.store_table_names, config.request_log_table_name, *extra_tables}
    for table_name in allowed:
        _checked_identifier(table_name)
    return config.model_copy(update={"allowed_table_names": allowed})


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
