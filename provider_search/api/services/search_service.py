# This file implements the provider search service behind the search endpoints.
# A request is compiled once into a FilterSpec, handed to the chosen strategy, and the
# page fetch and total count are then issued concurrently as independent reads.
# Store failures are logged with the request filters and re-raised for the router to map.

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from prometheus_client import Counter, Histogram
from sqlalchemy import desc, func, select

from provider_search.api.api_config import ApiConfig
from provider_search.api.db_access import DatabaseClient
from provider_search.search.filters import FilterSpec, compile_filters
from provider_search.search.normalizer import SearchFilters
from provider_search.search.shaping import shape_search_result
from provider_search.search.strategies import SearchStrategy, select_strategy
from provider_search.store.tables import StoreTables, build_store_tables

LOGGER = logging.getLogger("search")
POPULAR_SERVICES_LIMIT = 10

PROVIDER_SEARCH_REQUESTS_TOTAL = Counter(
    "provider_search_requests_total",
    "Provider searches executed, by execution strategy and outcome.",
    ["strategy", "outcome"],
)
PROVIDER_SEARCH_DURATION_SECONDS = Histogram(
    "provider_search_duration_seconds",
    "Provider search duration in seconds, page fetch and count included.",
    ["strategy"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5),
)


async def _empty_page() -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    return [], []


class SearchService:
    """Provider discovery over the read-only provider store."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db
        self.tables: StoreTables = build_store_tables(
            providers_table=self.config.validate_table_name(self.config.providers_table_name),
            services_table=self.config.validate_table_name(self.config.services_table_name),
            owners_table=self.config.validate_table_name(self.config.owners_table_name),
        )

    async def search_providers(self, filters: SearchFilters) -> dict[str, Any]:
        spec = compile_filters(filters, self.tables)
        strategy = select_strategy(filters)
        pagination = filters.pagination
        started = time.perf_counter()

        # Cancelling the request cancels the gather, but statements already running on
        # worker threads are not interrupted; they finish and their results are dropped.
        try:
            if pagination.fits_sql_range:
                page_read = asyncio.to_thread(
                    self._fetch_page,
                    strategy,
                    spec,
                    pagination.offset,
                    pagination.limit,
                )
            else:
                page_read = _empty_page()
            (rows, service_rows), total_count = await asyncio.gather(
                page_read,
                asyncio.to_thread(self._count, strategy, spec),
            )
            result = shape_search_result(
                rows=rows,
                service_rows=service_rows,
                total_count=total_count,
                pagination=pagination,
            )
        except Exception:
            PROVIDER_SEARCH_REQUESTS_TOTAL.labels(strategy=strategy.name, outcome="error").inc()
            LOGGER.exception(
                "Provider search failed strategy=%s filters=%s",
                strategy.name,
                filters.describe(),
            )
            raise

        elapsed = time.perf_counter() - started
        PROVIDER_SEARCH_REQUESTS_TOTAL.labels(strategy=strategy.name, outcome="success").inc()
        PROVIDER_SEARCH_DURATION_SECONDS.labels(strategy=strategy.name).observe(elapsed)
        LOGGER.info(
            "Provider search strategy=%s filters=%s total=%d returned=%d duration_ms=%.2f",
            strategy.name,
            ",".join(spec.applied) or "none",
            total_count,
            len(rows),
            elapsed * 1000.0,
        )
        return result

    def list_categories(self) -> list[str]:
        providers = self.tables.providers
        query = select(providers.c.category).distinct().order_by(providers.c.category.asc())
        return [str(row["category"]) for row in self.db.fetch_all(query)]

    def list_popular_services(self, *, limit: int = POPULAR_SERVICES_LIMIT) -> list[dict[str, Any]]:
        services = self.tables.services
        offering_count = func.count(services.c.id).label("count")
        query = (
            select(
                services.c.name,
                offering_count,
                func.avg(services.c.price).label("avg_price"),
                func.avg(services.c.duration_minutes).label("avg_duration_minutes"),
            )
            .group_by(services.c.name)
            .order_by(desc(offering_count), services.c.name.asc())
            .limit(limit)
        )
        return [
            {
                "name": row["name"],
                "count": int(row["count"]),
                "avg_price": round(float(row["avg_price"]), 2),
                "avg_duration_minutes": round(float(row["avg_duration_minutes"]), 2),
            }
            for row in self.db.fetch_all(query)
        ]

    def _fetch_page(
        self,
        strategy: SearchStrategy,
        spec: FilterSpec,
        offset: int,
        limit: int,
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        rows = self.db.fetch_all(strategy.page_query(spec, offset=offset, limit=limit))
        if not rows:
            return rows, []
        return rows, self._fetch_services([str(row["id"]) for row in rows])

    def _fetch_services(self, provider_ids: list[str]) -> list[dict[str, Any]]:
        services = self.tables.services
        query = (
            select(
                services.c.id,
                services.c.provider_id,
                services.c.name,
                services.c.duration_minutes,
                services.c.price,
            )
            .where(services.c.provider_id.in_(provider_ids))
            .order_by(services.c.provider_id.asc(), services.c.position.asc(), services.c.id.asc())
        )
        return self.db.fetch_all(query)

    def _count(self, strategy: SearchStrategy, spec: FilterSpec) -> int:
        return int(self.db.fetch_scalar(strategy.count_query(spec)))
