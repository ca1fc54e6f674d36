# This file declares the relational layout of the provider store with SQLAlchemy Core.
# Table names come from the API config, so the layout is built per config instead of at import time.
# The search core only reads these tables; seeding and tests use the same definitions to write them.

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)


@dataclass(frozen=True)
class StoreTables:
    metadata: MetaData
    providers: Table
    services: Table
    owners: Table


def build_store_tables(
    *,
    providers_table: str = "service_providers",
    services_table: str = "provider_services",
    owners_table: str = "users",
) -> StoreTables:
    """Build table definitions bound to a fresh MetaData."""

    metadata = MetaData()

    owners = Table(
        owners_table,
        metadata,
        Column("id", String(64), primary_key=True),
        Column("name", String(120), nullable=False),
        Column("phone", String(32), nullable=False),
        Column("email", String(254), nullable=True),
    )

    providers = Table(
        providers_table,
        metadata,
        Column("id", String(64), primary_key=True),
        Column("owner_id", String(64), ForeignKey(f"{owners_table}.id"), nullable=False),
        Column("business_name", String(200), nullable=False),
        Column("description", Text, nullable=False),
        Column("category", String(64), nullable=False),
        Column("subcategory", String(64), nullable=True),
        Column("address", Text, nullable=False),
        Column("longitude", Float, nullable=False),
        Column("latitude", Float, nullable=False),
        Column("rating", Float, nullable=False, default=0.0),
        Column("total_ratings", Integer, nullable=False, default=0),
        Column("is_verified", Boolean, nullable=False, default=False),
        Column("images_json", Text, nullable=False, default="[]"),
        Column("working_hours_json", Text, nullable=False, default="[]"),
        Column("created_at", DateTime(timezone=True), nullable=True),
        CheckConstraint("rating >= 0 AND rating <= 5", name=f"ck_{providers_table}_rating"),
        CheckConstraint("total_ratings >= 0", name=f"ck_{providers_table}_total_ratings"),
        CheckConstraint("longitude >= -180 AND longitude <= 180", name=f"ck_{providers_table}_lng"),
        CheckConstraint("latitude >= -90 AND latitude <= 90", name=f"ck_{providers_table}_lat"),
        Index(f"ix_{providers_table}_category", "category"),
        Index(f"ix_{providers_table}_rating", "rating"),
        Index(f"ix_{providers_table}_lat_lng", "latitude", "longitude"),
    )

    services = Table(
        services_table,
        metadata,
        Column("id", String(64), primary_key=True),
        Column(
            "provider_id",
            String(64),
            ForeignKey(f"{providers_table}.id", ondelete="CASCADE"),
            nullable=False,
        ),
        Column("position", Integer, nullable=False, default=0),
        Column("name", String(200), nullable=False),
        Column("duration_minutes", Integer, nullable=False),
        Column("price", Float, nullable=False),
        Column("description", Text, nullable=True),
        CheckConstraint("duration_minutes >= 0", name=f"ck_{services_table}_duration"),
        CheckConstraint("price >= 0", name=f"ck_{services_table}_price"),
        Index(f"ix_{services_table}_provider_id", "provider_id", "position"),
    )

    return StoreTables(metadata=metadata, providers=providers, services=services, owners=owners)
