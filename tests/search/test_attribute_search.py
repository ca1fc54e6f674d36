# This file tests provider search without a location.
# Results are filtered by attributes, ranked by rating with id as tie-break, and paginated.

from __future__ import annotations

from pathlib import Path

from tests.search.store_fixtures import build_search_service, make_provider, provider_ids, run_search


def _salon_and_spa_store(tmp_path: Path):
    return build_search_service(
        tmp_path,
        [
            make_provider("A", category="salon", rating=4.5),
            make_provider("B", category="salon", rating=3.0),
            make_provider("C", category="spa", rating=4.8),
        ],
    )


def test_category_filter_returns_matching_providers_by_rating(tmp_path: Path) -> None:
    service = _salon_and_spa_store(tmp_path)

    result = run_search(service, category="salon", limit="10")

    assert provider_ids(result) == ["A", "B"]
    assert result["pagination"] == {"total": 2, "page": 1, "limit": 10, "pages": 1}


def test_no_filters_orders_by_rating_descending(tmp_path: Path) -> None:
    service = _salon_and_spa_store(tmp_path)

    result = run_search(service)

    assert provider_ids(result) == ["C", "A", "B"]
    assert result["pagination"]["total"] == 3


def test_equal_ratings_are_ordered_by_id(tmp_path: Path) -> None:
    service = build_search_service(
        tmp_path,
        [
            make_provider("p-3", rating=4.0),
            make_provider("p-1", rating=4.0),
            make_provider("p-2", rating=4.0),
        ],
    )

    result = run_search(service)

    assert provider_ids(result) == ["p-1", "p-2", "p-3"]


def test_rating_filter_is_inclusive(tmp_path: Path) -> None:
    service = _salon_and_spa_store(tmp_path)

    result = run_search(service, rating="4.5")

    assert provider_ids(result) == ["C", "A"]
    assert all(provider["rating"] >= 4.5 for provider in result["providers"])


def test_second_page_of_one_returns_single_item(tmp_path: Path) -> None:
    service = _salon_and_spa_store(tmp_path)

    result = run_search(service, limit="1", page="2")

    assert provider_ids(result) == ["A"]
    assert result["pagination"] == {"total": 3, "page": 2, "limit": 1, "pages": 3}


def test_page_beyond_last_is_empty_not_an_error(tmp_path: Path) -> None:
    service = _salon_and_spa_store(tmp_path)

    result = run_search(service, limit="2", page="5")

    assert result["providers"] == []
    assert result["pagination"] == {"total": 3, "page": 5, "limit": 2, "pages": 2}


def test_no_matches_yields_zero_pages(tmp_path: Path) -> None:
    service = _salon_and_spa_store(tmp_path)

    result = run_search(service, category="plumbing")

    assert result["providers"] == []
    assert result["pagination"] == {"total": 0, "page": 1, "limit": 10, "pages": 0}


def test_pages_cover_every_match_exactly_once(tmp_path: Path) -> None:
    service = build_search_service(
        tmp_path,
        [make_provider(f"p-{index}", rating=float(index % 5)) for index in range(7)],
    )

    first = run_search(service, limit="3", page="1")
    second = run_search(service, limit="3", page="2")
    third = run_search(service, limit="3", page="3")

    seen = provider_ids(first) + provider_ids(second) + provider_ids(third)
    assert sorted(seen) == sorted(f"p-{index}" for index in range(7))
    assert len(provider_ids(third)) == 1
    assert first["pagination"]["pages"] == 3


def test_page_with_offset_beyond_sql_integer_range_is_empty(tmp_path: Path) -> None:
    service = _salon_and_spa_store(tmp_path)

    result = run_search(service, page="9223372036854775807")

    assert result["providers"] == []
    assert result["pagination"] == {
        "total": 3,
        "page": 9223372036854775807,
        "limit": 10,
        "pages": 1,
    }
