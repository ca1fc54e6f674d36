"""DDL and load helpers for the provider store tables."""

from __future__ import annotations

import json
from collections.abc import Iterable

from sqlalchemy import insert
from sqlalchemy.engine import Engine

from provider_search.store.models import OwnerIdentity, ProviderRecord
from provider_search.store.tables import StoreTables


def create_store_schema(engine: Engine, tables: StoreTables) -> None:
    """Create owner, provider, and service tables if they are missing."""

    tables.metadata.create_all(engine, checkfirst=True)


def provider_row(record: ProviderRecord) -> dict[str, object]:
    return {
        "id": record.id,
        "owner_id": record.owner_id,
        "business_name": record.business_name,
        "description": record.description,
        "category": record.category,
        "subcategory": record.subcategory,
        "address": record.location.address,
        "longitude": record.location.longitude,
        "latitude": record.location.latitude,
        "rating": record.rating,
        "total_ratings": record.total_ratings,
        "is_verified": record.is_verified,
        "images_json": json.dumps(record.images),
        "working_hours_json": json.dumps(
            [hours.model_dump(mode="json") for hours in record.working_hours]
        ),
        "created_at": record.created_at,
    }


def service_rows(record: ProviderRecord) -> list[dict[str, object]]:
    return [
        {
            "id": service.id,
            "provider_id": record.id,
            "position": position,
            "name": service.name,
            "duration_minutes": service.duration_minutes,
            "price": service.price,
            "description": service.description,
        }
        for position, service in enumerate(record.services)
    ]


def load_store(
    engine: Engine,
    tables: StoreTables,
    *,
    owners: Iterable[OwnerIdentity],
    providers: Iterable[ProviderRecord],
) -> int:
    """Insert owners and providers in one transaction; returns the provider count."""

    owner_rows = [owner.model_dump() for owner in owners]
    provider_records = list(providers)
    provider_rows = [provider_row(record) for record in provider_records]
    all_service_rows = [row for record in provider_records for row in service_rows(record)]

    with engine.begin() as connection:
        if owner_rows:
            connection.execute(insert(tables.owners), owner_rows)
        if provider_rows:
            connection.execute(insert(tables.providers), provider_rows)
        if all_service_rows:
            connection.execute(insert(tables.services), all_service_rows)
    return len(provider_rows)
