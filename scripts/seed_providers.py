# This file creates the provider store tables and loads a small sample directory.
# It is meant for local development against SQLite or a fresh PostgreSQL database.
# ruff: noqa: E402

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import UTC, datetime
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from sqlalchemy import func, select

from provider_search.api.api_config import load_api_config
from provider_search.api.db_access import DatabaseClient
from provider_search.common.logging import configure_logging
from provider_search.store.ddl import create_store_schema, load_store
from provider_search.store.models import OwnerIdentity, ProviderRecord
from provider_search.store.tables import build_store_tables

LOGGER = logging.getLogger("seed")

SAMPLE_OWNERS = [
    OwnerIdentity(id="owner-1", name="Rami Haddad", phone="+963900000001", email="rami@example.com"),
    OwnerIdentity(id="owner-2", name="Lina Khoury", phone="+963900000002"),
    OwnerIdentity(id="owner-3", name="Omar Saleh", phone="+963900000003", email="omar@example.com"),
]

_WEEKDAY_HOURS = [
    {"day": day, "open": "09:00", "close": "18:00", "is_closed": False}
    for day in ("monday", "tuesday", "wednesday", "thursday", "saturday", "sunday")
] + [{"day": "friday", "open": "00:00", "close": "00:00", "is_closed": True}]

SAMPLE_PROVIDERS = [
    {
        "id": "prov-1",
        "owner_id": "owner-1",
        "business_name": "Jasmine Beauty Salon",
        "description": "Hair styling, bridal makeup, and nail care in the old city.",
        "category": "beauty",
        "location": {"longitude": 36.3065, "latitude": 33.5119, "address": "Straight Street, Damascus"},
        "services": [
            {"id": "svc-1", "name": "Haircut", "duration_minutes": 45, "price": 15000, "description": "Wash included."},
            {"id": "svc-2", "name": "Bridal Makeup", "duration_minutes": 120, "price": 90000},
        ],
        "working_hours": _WEEKDAY_HOURS,
        "rating": 4.6,
        "total_ratings": 38,
        "is_verified": True,
        "images": ["https://images.example.com/prov-1/front.jpg"],
    },
    {
        "id": "prov-2",
        "owner_id": "owner-2",
        "business_name": "Al Shifa Family Clinic",
        "description": "General practice and pediatric consultations.",
        "category": "doctors",
        "location": {"longitude": 36.2920, "latitude": 33.5138, "address": "Mazzeh, Damascus"},
        "services": [
            {"id": "svc-3", "name": "General Consultation", "duration_minutes": 30, "price": 25000},
            {"id": "svc-4", "name": "Pediatric Checkup", "duration_minutes": 30, "price": 30000},
        ],
        "working_hours": _WEEKDAY_HOURS,
        "rating": 4.8,
        "total_ratings": 112,
        "is_verified": True,
    },
    {
        "id": "prov-3",
        "owner_id": "owner-3",
        "business_name": "Orontes Barber House",
        "description": "Classic shaves and haircuts.",
        "category": "beauty",
        "location": {"longitude": 36.7578, "latitude": 34.7324, "address": "Hama"},
        "services": [
            {"id": "svc-5", "name": "Haircut", "duration_minutes": 30, "price": 10000},
            {"id": "svc-6", "name": "Hot Towel Shave", "duration_minutes": 25, "price": 8000},
        ],
        "working_hours": _WEEKDAY_HOURS,
        "rating": 3.9,
        "total_ratings": 17,
    },
]


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create provider store tables and load sample data.")
    parser.add_argument(
        "--database-url",
        default=None,
        help="Overrides DATABASE_URL from the environment.",
    )
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url
    config = load_api_config()
    configure_logging(config.log_level)

    db = DatabaseClient(database_url=config.database_url)
    tables = build_store_tables(
        providers_table=config.providers_table_name,
        services_table=config.services_table_name,
        owners_table=config.owners_table_name,
    )
    create_store_schema(db.engine, tables)

    existing = int(db.fetch_scalar(select(func.count()).select_from(tables.providers)))
    if existing:
        LOGGER.info("Provider store already holds %d providers; skipping seed.", existing)
        return 0

    created_at = datetime.now(tz=UTC)
    providers = [
        ProviderRecord.model_validate({**payload, "created_at": created_at})
        for payload in SAMPLE_PROVIDERS
    ]
    loaded = load_store(db.engine, tables, owners=SAMPLE_OWNERS, providers=providers)
    LOGGER.info("Seeded %d providers into %s", loaded, config.providers_table_name)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
