# This file tests free-text and service-name matching against a real store.

from __future__ import annotations

from pathlib import Path

from tests.search.store_fixtures import build_search_service, make_provider, provider_ids, run_search


def _store(tmp_path: Path):
    return build_search_service(
        tmp_path,
        [
            make_provider(
                "salon",
                rating=4.0,
                business_name="Jasmine Beauty Salon",
                description="Hair styling and bridal makeup.",
                services=[{"name": "Haircut"}, {"name": "Bridal Makeup"}],
            ),
            make_provider(
                "clinic",
                rating=4.5,
                category="doctors",
                business_name="Al Shifa Clinic",
                description="General practice.",
                services=[{"name": "Pediatric Checkup"}],
            ),
            make_provider(
                "discount",
                rating=3.0,
                business_name="Corner Barber",
                description="Every cut is 50% off on Mondays.",
                services=[{"name": "Beard_Trim"}],
            ),
        ],
    )


def test_query_matches_business_name_case_insensitively(tmp_path: Path) -> None:
    result = run_search(_store(tmp_path), query="jasmine")

    assert provider_ids(result) == ["salon"]


def test_query_matches_description_and_service_names(tmp_path: Path) -> None:
    service = _store(tmp_path)

    assert provider_ids(run_search(service, query="practice")) == ["clinic"]
    assert provider_ids(run_search(service, query="pediatric")) == ["clinic"]


def test_query_matches_any_term(tmp_path: Path) -> None:
    result = run_search(_store(tmp_path), query="jasmine pediatric")

    assert provider_ids(result) == ["clinic", "salon"]
    assert result["pagination"]["total"] == 2


def test_service_filter_is_case_insensitive_substring(tmp_path: Path) -> None:
    result = run_search(_store(tmp_path), service="MAKEUP")

    assert provider_ids(result) == ["salon"]


def test_service_filter_ignores_description_and_name(tmp_path: Path) -> None:
    result = run_search(_store(tmp_path), service="clinic")

    assert result["providers"] == []


def test_like_wildcards_in_input_match_literally(tmp_path: Path) -> None:
    service = _store(tmp_path)

    assert provider_ids(run_search(service, query="50%")) == ["discount"]
    assert provider_ids(run_search(service, service="ai_c")) == []
    assert provider_ids(run_search(service, service="D_T")) == ["discount"]
    assert run_search(service, query="%")["pagination"]["total"] == 1


def test_text_and_attribute_filters_combine(tmp_path: Path) -> None:
    result = run_search(_store(tmp_path), query="hair", rating="4.2")

    assert result["providers"] == []
