# This file defines liveness, readiness, and version endpoints.
# Readiness requires a reachable database and all three provider store tables.

from __future__ import annotations

import subprocess
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from provider_search.api.api_config import ApiConfig
from provider_search.api.db_access import DatabaseClient
from provider_search.api.dependencies import get_config, get_database_client
from provider_search.api.schema_versions import build_version_fields
from provider_search.api.schemas.health_schemas import (
    HealthResponse,
    ReadinessResponse,
    VersionResponse,
)

router = APIRouter(tags=["health"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]
DBDep = Annotated[DatabaseClient, Depends(get_database_client)]


def _base_fields(request: Request, config: ApiConfig) -> dict[str, Any]:
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "timestamp": datetime.now(tz=UTC),
    }


def _git_commit() -> str | None:
    try:
        completed = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            check=True,
            capture_output=True,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return completed.stdout.strip() or None


@router.get("/health", response_model=HealthResponse)
def health(request: Request, config: ConfigDep) -> dict[str, Any]:
    return {
        **_base_fields(request, config),
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
    }


@router.get("/ready", response_model=ReadinessResponse)
def ready(request: Request, config: ConfigDep, db: DBDep) -> dict[str, Any]:
    db_connected = db.can_connect()
    providers, services, owners = (
        db_connected and db.table_exists(table_name) for table_name in config.store_table_names
    )
    return {
        **_base_fields(request, config),
        "db_connected": db_connected,
        "providers_source_ready": providers,
        "services_source_ready": services,
        "owners_source_ready": owners,
        "ready": all((db_connected, providers, services, owners)),
        "database": "reachable" if db_connected else "unreachable",
    }


@router.get("/version", response_model=VersionResponse)
def version(request: Request, config: ConfigDep) -> dict[str, Any]:
    return {
        **_base_fields(request, config),
        "api_version_path": config.api_version_path,
        "app_version": config.app_version,
        "git_commit": _git_commit(),
        "project": config.api_name,
        "version": config.app_version,
    }
