# This file compiles SearchFilters into the predicate set shared by both search paths.
# Page queries and count queries on either path take their WHERE clause from one FilterSpec,
# so a predicate can never be applied to one of them and missed by the other.
# Location is not a predicate here; it picks the execution strategy.

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import and_, or_, select, true
from sqlalchemy.sql.elements import ColumnElement

from provider_search.search.normalizer import SearchFilters
from provider_search.store.tables import StoreTables

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input is matched literally."""

    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def query_terms(query: str) -> list[str]:
    seen: set[str] = set()
    terms: list[str] = []
    for term in query.split():
        key = term.lower()
        if key not in seen:
            seen.add(key)
            terms.append(term)
    return terms


@dataclass(frozen=True)
class FilterSpec:
    """Conjunctive predicates over the providers table."""

    tables: StoreTables
    predicates: tuple[ColumnElement[bool], ...]
    applied: tuple[str, ...]

    def where_clause(self) -> ColumnElement[bool]:
        if not self.predicates:
            return true()
        return and_(*self.predicates)


def _service_name_matches(tables: StoreTables, pattern: str) -> ColumnElement[bool]:
    services = tables.services
    return (
        select(services.c.id)
        .where(
            services.c.provider_id == tables.providers.c.id,
            services.c.name.ilike(pattern, escape=LIKE_ESCAPE),
        )
        .exists()
    )


def text_predicate(tables: StoreTables, query: str) -> ColumnElement[bool]:
    """Any query term appears in the business name, description, or a service name."""

    providers = tables.providers
    clauses: list[ColumnElement[bool]] = []
    for term in query_terms(query):
        pattern = f"%{escape_like(term)}%"
        clauses.append(providers.c.business_name.ilike(pattern, escape=LIKE_ESCAPE))
        clauses.append(providers.c.description.ilike(pattern, escape=LIKE_ESCAPE))
        clauses.append(_service_name_matches(tables, pattern))
    return or_(*clauses)


def compile_filters(filters: SearchFilters, tables: StoreTables) -> FilterSpec:
    providers = tables.providers
    predicates: list[ColumnElement[bool]] = []
    applied: list[str] = []

    if filters.query:
        predicates.append(text_predicate(tables, filters.query))
        applied.append("query")
    if filters.category:
        predicates.append(providers.c.category == filters.category)
        applied.append("category")
    if filters.min_rating is not None:
        predicates.append(providers.c.rating >= filters.min_rating)
        applied.append("rating")
    if filters.service:
        predicates.append(_service_name_matches(tables, f"%{escape_like(filters.service)}%"))
        applied.append("service")

    return FilterSpec(tables=tables, predicates=tuple(predicates), applied=tuple(applied))
