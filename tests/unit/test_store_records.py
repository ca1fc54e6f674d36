# This file tests provider record validation and the row mapping used to load the store.

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from provider_search.store.ddl import provider_row, service_rows
from provider_search.store.models import ProviderRecord


def _record(**overrides: object) -> ProviderRecord:
    payload = {
        "id": "prov-1",
        "owner_id": "owner-1",
        "business_name": "Jasmine Beauty Salon",
        "description": "Hair and makeup.",
        "category": "beauty",
        "location": {"longitude": 36.3, "latitude": 33.5, "address": "Straight Street"},
        "services": [
            {"id": "svc-1", "name": "Haircut", "duration_minutes": 45, "price": 15.0},
            {"id": "svc-2", "name": "Nails", "duration_minutes": 30, "price": 9.5, "description": "Gel."},
        ],
        "working_hours": [{"day": "friday", "open": "00:00", "close": "00:00", "is_closed": True}],
        "rating": 4.2,
        "images": ["https://images.example.com/a.jpg"],
    }
    payload.update(overrides)
    return ProviderRecord.model_validate(payload)


def test_provider_row_flattens_location_and_encodes_lists() -> None:
    row = provider_row(_record())

    assert row["longitude"] == 36.3
    assert row["address"] == "Straight Street"
    assert json.loads(row["images_json"]) == ["https://images.example.com/a.jpg"]
    assert json.loads(row["working_hours_json"]) == [
        {"day": "friday", "open": "00:00", "close": "00:00", "is_closed": True}
    ]


def test_service_rows_keep_listing_position() -> None:
    rows = service_rows(_record())

    assert [(row["id"], row["position"], row["provider_id"]) for row in rows] == [
        ("svc-1", 0, "prov-1"),
        ("svc-2", 1, "prov-1"),
    ]
    assert rows[1]["description"] == "Gel."


@pytest.mark.parametrize(
    "overrides",
    [
        {"rating": 5.5},
        {"location": {"longitude": 200, "latitude": 0, "address": "x"}},
        {"working_hours": [{"day": "monday", "open": "25:00", "close": "18:00"}]},
        {"working_hours": [{"day": "someday", "open": "09:00", "close": "18:00"}]},
        {"services": [{"id": "s", "name": "Cut", "duration_minutes": 10, "price": -1}]},
    ],
)
def test_invalid_records_are_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        _record(**overrides)
