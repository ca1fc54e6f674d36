# This file builds response envelopes for API endpoints in a consistent format.
# Search results keep their `providers`/`pagination` body and gain version and tracing fields.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from provider_search.api.schema_versions import build_version_fields


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def build_search_envelope(
    *,
    api_version_path: str,
    schema_version: str,
    request_id: str,
    result: dict[str, Any],
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """Wrap a shaped `{providers, pagination}` search result."""

    return {
        **build_version_fields(api_version_path=api_version_path, schema_version=schema_version),
        "request_id": request_id,
        "generated_at": utc_now(),
        "providers": result["providers"],
        "pagination": result["pagination"],
        "warnings": warnings,
    }


def build_object_envelope(
    *,
    api_version_path: str,
    schema_version: str,
    request_id: str,
    data: dict[str, Any] | list[Any] | None,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """Build standard non-search response envelope."""

    return {
        **build_version_fields(api_version_path=api_version_path, schema_version=schema_version),
        "request_id": request_id,
        "generated_at": utc_now(),
        "data": data,
        "warnings": warnings,
    }
