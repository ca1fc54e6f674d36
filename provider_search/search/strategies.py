# This file implements the two execution strategies for provider search.
# Without a location, providers are filtered by attributes and ranked by rating.
# With a location, providers are first restricted to a fixed radius, then filtered and ranked by distance.
# Both strategies build their page and count statements from the same FilterSpec.

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from sqlalchemy import Select, func, literal, select
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import FromClause, Subquery

from provider_search.search.filters import FilterSpec
from provider_search.search.geo import GeoPoint, great_circle_meters, latitude_window
from provider_search.search.normalizer import SearchFilters
from provider_search.store.tables import StoreTables

MAX_SEARCH_RADIUS_METERS = 10_000

PROVIDER_COLUMNS = (
    "id",
    "business_name",
    "description",
    "category",
    "subcategory",
    "address",
    "longitude",
    "latitude",
    "rating",
    "total_ratings",
    "is_verified",
    "images_json",
    "working_hours_json",
    "created_at",
)


def _projection(tables: StoreTables) -> list[ColumnElement[object]]:
    providers = tables.providers
    owners = tables.owners
    return [
        *(providers.c[name] for name in PROVIDER_COLUMNS),
        owners.c.id.label("owner_ref"),
        owners.c.name.label("owner_name"),
        owners.c.phone.label("owner_phone"),
        owners.c.email.label("owner_email"),
    ]


def _with_owner(tables: StoreTables, from_clause: FromClause) -> FromClause:
    return from_clause.outerjoin(tables.owners, tables.owners.c.id == tables.providers.c.owner_id)


class SearchStrategy(ABC):
    """One way of executing a compiled filter set against the store."""

    name: str

    @abstractmethod
    def page_query(self, spec: FilterSpec, *, offset: int, limit: int) -> Select:
        raise NotImplementedError

    @abstractmethod
    def count_query(self, spec: FilterSpec) -> Select:
        raise NotImplementedError


class AttributeQueryStrategy(SearchStrategy):
    name = "attribute"

    def page_query(self, spec: FilterSpec, *, offset: int, limit: int) -> Select:
        providers = spec.tables.providers
        return (
            select(*_projection(spec.tables))
            .select_from(_with_owner(spec.tables, providers))
            .where(spec.where_clause())
            .order_by(providers.c.rating.desc(), providers.c.id.asc())
            .offset(offset)
            .limit(limit)
        )

    def count_query(self, spec: FilterSpec) -> Select:
        return (
            select(func.count())
            .select_from(spec.tables.providers)
            .where(spec.where_clause())
        )


@dataclass(frozen=True)
class SpatialJoinStrategy(SearchStrategy):
    origin: GeoPoint
    radius_meters: float = MAX_SEARCH_RADIUS_METERS

    name = "spatial"

    def nearby(self, tables: StoreTables) -> Subquery:
        """Providers within the radius, with their distance from the origin."""

        providers = tables.providers
        distance = great_circle_meters(
            providers.c.longitude,
            providers.c.latitude,
            literal(self.origin.longitude),
            literal(self.origin.latitude),
        )
        min_lat, max_lat = latitude_window(self.origin, self.radius_meters)
        return (
            select(providers.c.id.label("provider_id"), distance.label("distance_meters"))
            .where(
                providers.c.latitude.between(min_lat, max_lat),
                distance <= self.radius_meters,
            )
            .subquery("nearby")
        )

    def _nearby_providers(self, tables: StoreTables, nearby: Subquery) -> FromClause:
        return nearby.join(tables.providers, tables.providers.c.id == nearby.c.provider_id)

    def page_query(self, spec: FilterSpec, *, offset: int, limit: int) -> Select:
        nearby = self.nearby(spec.tables)
        return (
            select(*_projection(spec.tables), nearby.c.distance_meters)
            .select_from(_with_owner(spec.tables, self._nearby_providers(spec.tables, nearby)))
            .where(spec.where_clause())
            .order_by(nearby.c.distance_meters.asc(), spec.tables.providers.c.id.asc())
            .offset(offset)
            .limit(limit)
        )

    def count_query(self, spec: FilterSpec) -> Select:
        nearby = self.nearby(spec.tables)
        return (
            select(func.count())
            .select_from(self._nearby_providers(spec.tables, nearby))
            .where(spec.where_clause())
        )


def select_strategy(filters: SearchFilters) -> SearchStrategy:
    if filters.location is None:
        return AttributeQueryStrategy()
    return SpatialJoinStrategy(origin=filters.location)
