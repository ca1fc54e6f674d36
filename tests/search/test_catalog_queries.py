# This file tests the category listing, popular-service aggregation, and store failure logging.

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest
from sqlalchemy.exc import SQLAlchemyError

from provider_search.api.db_access import DatabaseClient
from provider_search.api.services.search_service import SearchService
from provider_search.search.normalizer import normalize_search_params
from tests.api.support import build_test_config
from tests.search.store_fixtures import build_search_service, make_provider


def test_categories_are_distinct_and_sorted(tmp_path: Path) -> None:
    service = build_search_service(
        tmp_path,
        [
            make_provider("a", category="spa"),
            make_provider("b", category="doctors"),
            make_provider("c", category="spa"),
        ],
    )

    assert service.list_categories() == ["doctors", "spa"]


def test_popular_services_rank_by_offer_count_then_name(tmp_path: Path) -> None:
    service = build_search_service(
        tmp_path,
        [
            make_provider(
                "a",
                services=[
                    {"name": "Haircut", "price": 10.0, "duration_minutes": 30},
                    {"name": "Shave", "price": 5.0, "duration_minutes": 15},
                ],
            ),
            make_provider(
                "b",
                services=[
                    {"name": "Haircut", "price": 15.0, "duration_minutes": 45},
                    {"name": "Facial", "price": 20.0, "duration_minutes": 50},
                ],
            ),
        ],
    )

    popular = service.list_popular_services()

    assert [item["name"] for item in popular] == ["Haircut", "Facial", "Shave"]
    assert popular[0] == {"name": "Haircut", "count": 2, "avg_price": 12.5, "avg_duration_minutes": 37.5}


def test_popular_services_respect_limit(tmp_path: Path) -> None:
    service = build_search_service(
        tmp_path,
        [make_provider("a", services=[{"name": f"Service {index:02d}"} for index in range(12)])],
    )

    popular = service.list_popular_services()

    assert len(popular) == 10
    assert popular[0]["name"] == "Service 00"


def test_store_failure_is_logged_and_raised(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    config = build_test_config(database_url=f"sqlite:///{tmp_path / 'empty.db'}")
    service = SearchService(config=config, db=DatabaseClient(database_url=config.database_url))
    filters = normalize_search_params({"category": "salon"})

    with caplog.at_level(logging.ERROR, logger="search"):
        with pytest.raises(SQLAlchemyError):
            asyncio.run(service.search_providers(filters))

    assert "Provider search failed strategy=attribute" in caplog.text
    assert "'category': 'salon'" in caplog.text


def test_shaping_failure_is_logged_with_filters(
    tmp_path: Path, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    service = build_search_service(tmp_path, [make_provider("a", category="salon")])

    def broken_shape(**_: object) -> dict[str, object]:
        raise ValueError("could not convert string to float: 'n/a'")

    monkeypatch.setattr(
        "provider_search.api.services.search_service.shape_search_result", broken_shape
    )
    filters = normalize_search_params({"category": "salon"})

    with caplog.at_level(logging.ERROR, logger="search"):
        with pytest.raises(ValueError):
            asyncio.run(service.search_providers(filters))

    (record,) = [r for r in caplog.records if r.name == "search" and r.levelno == logging.ERROR]
    assert record.getMessage().startswith("Provider search failed strategy=attribute")
    assert "'category': 'salon'" in record.getMessage()
    assert record.exc_info is not None
