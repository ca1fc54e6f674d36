# This file turns raw query-string values into a typed SearchFilters value.
# Every field is checked before anything is raised, so a bad request reports all of its problems at once.
# Empty strings count as "not provided" for the free-text fields.

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from provider_search.search.pagination import PaginationSpec
from provider_search.search.geo import GeoPoint

LOCATION_RE = re.compile(r"^-?\d+(\.\d+)?,-?\d+(\.\d+)?$")
INTEGER_RE = re.compile(r"^-?\d+$")
MIN_RATING = 0.0
MAX_RATING = 5.0
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str
    value: str | None = None


class SearchValidationError(ValueError):
    """Raised with every failing field of a search request."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        fields = ", ".join(error.field for error in self.errors)
        super().__init__(f"Invalid search parameters: {fields}")

    def as_details(self) -> list[dict[str, Any]]:
        return [asdict(error) for error in self.errors]


@dataclass(frozen=True)
class SearchFilters:
    query: str | None = None
    location: GeoPoint | None = None
    category: str | None = None
    min_rating: float | None = None
    service: str | None = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def pagination(self) -> PaginationSpec:
        return PaginationSpec(page=self.page, limit=self.limit)

    def describe(self) -> dict[str, Any]:
        """Loggable view of the filters."""

        return {
            "query": self.query,
            "location": (
                f"{self.location.longitude},{self.location.latitude}" if self.location else None
            ),
            "category": self.category,
            "rating": self.min_rating,
            "service": self.service,
            "page": self.page,
            "limit": self.limit,
        }


def _clean_text(raw: Any) -> str | None:
    if raw is None:
        return None
    value = str(raw).strip()
    return value or None


def _parse_location(raw: str, errors: list[FieldError]) -> GeoPoint | None:
    if not LOCATION_RE.match(raw):
        errors.append(
            FieldError("location", "Location must be in format: longitude,latitude", raw)
        )
        return None
    longitude_text, latitude_text = raw.split(",", 1)
    longitude, latitude = float(longitude_text), float(latitude_text)
    if not -180.0 <= longitude <= 180.0:
        errors.append(FieldError("location", "Longitude must be between -180 and 180", raw))
        return None
    if not -90.0 <= latitude <= 90.0:
        errors.append(FieldError("location", "Latitude must be between -90 and 90", raw))
        return None
    return GeoPoint(longitude=longitude, latitude=latitude)


def _parse_rating(raw: str, errors: list[FieldError]) -> float | None:
    message = f"Rating must be between {MIN_RATING:g} and {MAX_RATING:g}"
    try:
        value = float(raw)
    except ValueError:
        errors.append(FieldError("rating", message, raw))
        return None
    if not math.isfinite(value) or not MIN_RATING <= value <= MAX_RATING:
        errors.append(FieldError("rating", message, raw))
        return None
    return value


def _parse_bounded_int(
    raw: str | None,
    *,
    field: str,
    default: int,
    minimum: int,
    maximum: int | None,
    message: str,
    errors: list[FieldError],
) -> int:
    if raw is None:
        return default
    if not INTEGER_RE.match(raw):
        errors.append(FieldError(field, message, raw))
        return default
    value = int(raw)
    if value < minimum or (maximum is not None and value > maximum):
        errors.append(FieldError(field, message, raw))
        return default
    return value


def normalize_search_params(
    raw: Mapping[str, Any],
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> SearchFilters:
    """Validate raw request parameters and coerce them into SearchFilters."""

    errors: list[FieldError] = []

    query = _clean_text(raw.get("query"))
    category = _clean_text(raw.get("category"))
    service = _clean_text(raw.get("service"))

    location_text = _clean_text(raw.get("location"))
    location = _parse_location(location_text, errors) if location_text is not None else None

    rating_text = _clean_text(raw.get("rating"))
    min_rating = _parse_rating(rating_text, errors) if rating_text is not None else None

    page = _parse_bounded_int(
        _clean_text(raw.get("page")),
        field="page",
        default=DEFAULT_PAGE,
        minimum=1,
        maximum=None,
        message="Page must be a positive integer",
        errors=errors,
    )
    limit = _parse_bounded_int(
        _clean_text(raw.get("limit")),
        field="limit",
        default=default_limit,
        minimum=1,
        maximum=max_limit,
        message=f"Limit must be between 1 and {max_limit}",
        errors=errors,
    )

    if errors:
        raise SearchValidationError(errors)

    return SearchFilters(
        query=query,
        location=location,
        category=category,
        min_rating=min_rating,
        service=service,
        page=page,
        limit=limit,
    )
