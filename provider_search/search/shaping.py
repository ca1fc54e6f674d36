# This file shapes raw store rows from either search path into one provider summary format.
# Per-service descriptions are dropped and the owner is reduced to name, phone, and email.
# Distance is used for ranking only, so a summary does not reveal which path produced it.

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from provider_search.search.pagination import PaginationSpec, build_pagination_metadata


def _json_list(raw: Any) -> list[Any]:
    if raw is None:
        return []
    if isinstance(raw, list):
        return raw
    try:
        parsed = json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        return []
    return parsed if isinstance(parsed, list) else []


def shape_service(row: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "id": str(row["id"]),
        "name": row["name"],
        "duration_minutes": int(row["duration_minutes"]),
        "price": float(row["price"]),
    }


def shape_owner(row: Mapping[str, Any]) -> dict[str, Any] | None:
    if row.get("owner_ref") is None:
        return None
    return {
        "name": row["owner_name"],
        "phone": row["owner_phone"],
        "email": row.get("owner_email"),
    }


def shape_provider(
    row: Mapping[str, Any],
    services: Sequence[Mapping[str, Any]],
) -> dict[str, Any]:
    return {
        "id": str(row["id"]),
        "owner": shape_owner(row),
        "business_name": row["business_name"],
        "description": row["description"],
        "category": row["category"],
        "subcategory": row.get("subcategory"),
        "location": {
            "longitude": float(row["longitude"]),
            "latitude": float(row["latitude"]),
            "address": row["address"],
        },
        "services": [shape_service(service) for service in services],
        "working_hours": _json_list(row.get("working_hours_json")),
        "rating": float(row["rating"]),
        "total_ratings": int(row["total_ratings"]),
        "is_verified": bool(row["is_verified"]),
        "images": [str(image) for image in _json_list(row.get("images_json"))],
        "created_at": row.get("created_at"),
    }


def group_services(service_rows: Iterable[Mapping[str, Any]]) -> dict[str, list[Mapping[str, Any]]]:
    grouped: dict[str, list[Mapping[str, Any]]] = {}
    for service in service_rows:
        grouped.setdefault(str(service["provider_id"]), []).append(service)
    return grouped


def shape_search_result(
    *,
    rows: Sequence[Mapping[str, Any]],
    service_rows: Iterable[Mapping[str, Any]],
    total_count: int,
    pagination: PaginationSpec,
) -> dict[str, Any]:
    """Build `{providers, pagination}` keeping the store's row order."""

    services_by_provider = group_services(service_rows)
    providers = [
        shape_provider(row, services_by_provider.get(str(row["id"]), [])) for row in rows
    ]
    return {
        "providers": providers,
        "pagination": build_pagination_metadata(total_count=total_count, pagination=pagination),
    }
