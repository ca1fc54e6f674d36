# This file tests how raw search parameters are validated and coerced.
# A request with several bad fields must report all of them in one error.

from __future__ import annotations

import pytest

from provider_search.search.geo import GeoPoint
from provider_search.search.normalizer import (
    SearchFilters,
    SearchValidationError,
    normalize_search_params,
)


def _error_fields(raw: dict[str, object], **kwargs: int) -> list[str]:
    with pytest.raises(SearchValidationError) as exc_info:
        normalize_search_params(raw, **kwargs)
    return [error.field for error in exc_info.value.errors]


def test_defaults_when_nothing_is_provided() -> None:
    filters = normalize_search_params({})

    assert filters == SearchFilters()
    assert filters.page == 1
    assert filters.limit == 10
    assert filters.pagination.offset == 0


def test_configured_default_limit_is_used() -> None:
    assert normalize_search_params({}, default_limit=25).limit == 25


def test_valid_parameters_are_coerced() -> None:
    filters = normalize_search_params(
        {
            "query": "  hair  ",
            "location": "36.3,33.5",
            "category": "salon",
            "rating": "4.5",
            "service": "cut",
            "page": "3",
            "limit": "20",
        }
    )

    assert filters.query == "hair"
    assert filters.location == GeoPoint(longitude=36.3, latitude=33.5)
    assert filters.category == "salon"
    assert filters.min_rating == 4.5
    assert filters.service == "cut"
    assert filters.pagination.offset == 40


def test_blank_text_fields_count_as_absent() -> None:
    filters = normalize_search_params({"query": "   ", "category": "", "service": None})

    assert filters.query is None
    assert filters.category is None
    assert filters.service is None


def test_all_invalid_fields_are_reported_together() -> None:
    fields = _error_fields({"location": "abc", "rating": "7", "page": "0", "limit": "500"})

    assert fields == ["location", "rating", "page", "limit"]


@pytest.mark.parametrize(
    ("location", "message"),
    [
        ("36.3", "Location must be in format: longitude,latitude"),
        ("36.3, 33.5", "Location must be in format: longitude,latitude"),
        ("1e3,2", "Location must be in format: longitude,latitude"),
        ("181,10", "Longitude must be between -180 and 180"),
        ("10,-91", "Latitude must be between -90 and 90"),
    ],
)
def test_invalid_locations(location: str, message: str) -> None:
    with pytest.raises(SearchValidationError) as exc_info:
        normalize_search_params({"location": location})

    assert exc_info.value.as_details() == [
        {"field": "location", "message": message, "value": location}
    ]


def test_negative_coordinates_are_accepted() -> None:
    filters = normalize_search_params({"location": "-73.98,-40.5"})

    assert filters.location == GeoPoint(longitude=-73.98, latitude=-40.5)


@pytest.mark.parametrize("rating", ["-0.1", "5.01", "high", "nan", "inf"])
def test_invalid_ratings(rating: str) -> None:
    assert _error_fields({"rating": rating}) == ["rating"]


@pytest.mark.parametrize("rating", ["0", "5", "3.75"])
def test_rating_bounds_are_inclusive(rating: str) -> None:
    assert normalize_search_params({"rating": rating}).min_rating == float(rating)


@pytest.mark.parametrize("page", ["0", "-1", "1.5", "two"])
def test_invalid_pages(page: str) -> None:
    assert _error_fields({"page": page}) == ["page"]


def test_limit_bounds_follow_max_limit() -> None:
    assert normalize_search_params({"limit": "50"}).limit == 50
    assert _error_fields({"limit": "51"}) == ["limit"]
    assert _error_fields({"limit": "0"}) == ["limit"]
    assert _error_fields({"limit": "30"}, max_limit=20) == ["limit"]


def test_limit_message_names_the_maximum() -> None:
    with pytest.raises(SearchValidationError) as exc_info:
        normalize_search_params({"limit": "99"}, max_limit=20)

    assert exc_info.value.errors[0].message == "Limit must be between 1 and 20"


def test_describe_is_loggable() -> None:
    filters = normalize_search_params({"location": "36.3,33.5", "rating": "4"})

    assert filters.describe()["location"] == "36.3,33.5"
    assert filters.describe()["rating"] == 4.0
