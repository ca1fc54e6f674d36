# This file defines helpers for API path versioning and schema version metadata.
# Every response carries explicit version fields, and the contract check script uses
# the breaking-change detector below to compare OpenAPI snapshots.

from __future__ import annotations

from typing import Any


def api_version_label(api_version_path: str) -> str:
    """Convert `/api/v1` style paths into `v1` labels."""

    cleaned = api_version_path.rstrip("/")
    parts = [part for part in cleaned.split("/") if part]
    if not parts:
        raise ValueError(f"Invalid api_version_path: {api_version_path!r}")
    return parts[-1]


def build_version_fields(*, api_version_path: str, schema_version: str) -> dict[str, str]:
    return {
        "api_version": api_version_label(api_version_path),
        "schema_version": schema_version,
    }


def _removed_operations(previous_paths: dict[str, Any], current_paths: dict[str, Any]) -> list[str]:
    findings = [f"Removed API path: {path}" for path in sorted(set(previous_paths) - set(current_paths))]
    for path in sorted(set(previous_paths) & set(current_paths)):
        for method, operation in previous_paths[path].items():
            current_operation = current_paths[path].get(method)
            if current_operation is None:
                findings.append(f"Removed API operation: {method.upper()} {path}")
                continue
            kept = {param.get("name") for param in current_operation.get("parameters", [])}
            dropped = {param.get("name") for param in operation.get("parameters", [])} - kept
            findings.extend(
                f"{method.upper()} {path} removed query parameter: {name}" for name in sorted(dropped) if name
            )
    return findings


def _removed_schema_fields(previous_schemas: dict[str, Any], current_schemas: dict[str, Any]) -> list[str]:
    findings: list[str] = []
    for name, previous in previous_schemas.items():
        current = current_schemas.get(name)
        if current is None:
            findings.append(f"Removed schema component: {name}")
            continue
        for field in sorted(set(previous.get("required", [])) - set(current.get("required", []))):
            findings.append(f"Schema {name} removed required field: {field}")
        for field in sorted(set(previous.get("properties", {})) - set(current.get("properties", {}))):
            findings.append(f"Schema {name} removed property: {field}")
    return findings


def detect_breaking_schema_changes(
    *,
    previous_snapshot: dict[str, Any],
    current_snapshot: dict[str, Any],
) -> list[str]:
    """List removed paths, operations, query parameters, schema components, and fields."""

    return _removed_operations(
        previous_snapshot.get("paths", {}),
        current_snapshot.get("paths", {}),
    ) + _removed_schema_fields(
        previous_snapshot.get("components", {}).get("schemas", {}),
        current_snapshot.get("components", {}).get("schemas", {}),
    )
