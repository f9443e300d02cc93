"""
Unit tests for endpoint classification and query building.
"""

import pytest

from street_geometry.classifier import (
    build_house_number_query,
    classify_endpoint,
    has_house_number,
    route_endpoints,
)
from street_geometry.models import EndpointClassification, StreetSection


def section(street, from_, to):
    return StreetSection(street=street, **{"from": from_, "to": to})


class TestHasHouseNumber:
    """Test has_house_number() patterns."""

    @pytest.mark.parametrize("endpoint", [
        "ул. Оборище №111",
        "№38",
        "№  42",
        "сградата с № 65",
        "бл. №38",
        "бл.5",
        "Бл. 15",
        "номер 3",
        "14",
        "25Б",
        "  111  ",
        "бл. 5 №123",
    ])
    def test_detects_house_numbers(self, endpoint):
        assert has_house_number(endpoint) is True

    @pytest.mark.parametrize("endpoint", [
        "ул. Оборище",
        "ул. Граф Игнатиев",
        "кв. Лозенец",
        "",
        "№",
        "бл.",
        "сградата",
        "ул. 6-ти септември",
        "12A",
        "номер",
    ])
    def test_rejects_non_house_numbers(self, endpoint):
        assert has_house_number(endpoint) is False

    def test_latin_suffix_is_not_a_house_number(self):
        assert has_house_number("25b") is False
        assert has_house_number("25б") is True

    @pytest.mark.parametrize("endpoint", ["25Б", "БЛ. №38", "Номер 15", "сградата с № 65", "ул. Оборище"])
    def test_case_insensitive(self, endpoint):
        expected = has_house_number(endpoint)
        for variant in (endpoint.lower(), endpoint.upper(), endpoint.swapcase(), endpoint.title()):
            assert has_house_number(variant) is expected

    def test_idempotent(self):
        results = {has_house_number("бл. 12") for _ in range(5)}
        assert results == {True}

    def test_classify_endpoint(self):
        assert classify_endpoint("111") is EndpointClassification.HOUSE_NUMBER
        assert classify_endpoint("ул. Граф Игнатиев") is EndpointClassification.CROSS_STREET


class TestBuildHouseNumberQuery:
    """Test build_house_number_query()."""

    def test_prefixes_street_name(self):
        assert build_house_number_query("ул. Оборище", "№111") == "ул. Оборище №111"

    def test_endpoint_already_contains_street(self):
        assert build_house_number_query("ул. Оборище", "ул. Оборище №111") == "ул. Оборище №111"

    def test_contains_check_is_case_insensitive(self):
        assert build_house_number_query("ул. Оборище", "УЛ. ОБОРИЩЕ №111") == "УЛ. ОБОРИЩЕ №111"

    def test_trims_inputs(self):
        assert build_house_number_query("  ул. Оборище ", " 25Б ") == "ул. Оборище 25Б"

    @pytest.mark.parametrize("endpoint", ["ул. Оборище 5", "ул. оборище №7", "бл. 3 ул. Оборище"])
    def test_never_duplicates_street(self, endpoint):
        query = build_house_number_query("ул. Оборище", endpoint)
        assert "ул. оборище ул. оборище" not in query.lower()


class TestRouteEndpoints:
    """Test route_endpoints() splitting and deduplication."""

    def test_end_to_end_scenario(self):
        routing = route_endpoints([section("ул. Оборище", "111", "ул. Граф Игнатиев")])

        assert routing.intersections == ["ул. Оборище ∩ ул. Граф Игнатиев"]
        assert routing.house_number_queries == {"ул. Оборище 111": "111"}

    def test_deduplicates_intersections(self):
        streets = [
            section("ул. Оборище", "ул. Граф Игнатиев", "ул. Раковски"),
            section("ул. Оборище", "ул. Раковски", "ул. Граф Игнатиев"),
        ]
        routing = route_endpoints(streets)

        assert routing.intersections == [
            "ул. Оборище ∩ ул. Граф Игнатиев",
            "ул. Оборище ∩ ул. Раковски",
        ]

    def test_house_numbers_keep_street_context(self):
        streets = [
            section("ул. Оборище", "№5", "ул. Раковски"),
            section("ул. Шипка", "№5", "ул. Раковски"),
        ]
        routing = route_endpoints(streets)

        assert routing.house_number_queries == {
            "ул. Оборище №5": "№5",
            "ул. Шипка №5": "№5",
        }
        assert len(routing.intersections) == 2

    def test_skips_pre_resolved_endpoints(self):
        streets = [section("ул. Оборище", "№5", "ул. Раковски")]
        routing = route_endpoints(streets, pre_resolved={"№5": object(), "ул. Раковски": object()})

        assert routing.intersections == []
        assert routing.house_number_queries == {}

    def test_every_endpoint_routed_once(self):
        streets = [section("бул. Васил Левски", "бл. 12", "ул. Шипка")]
        routing = route_endpoints(streets)

        assert routing.intersections == ["бул. Васил Левски ∩ ул. Шипка"]
        assert list(routing.house_number_queries.values()) == ["бл. 12"]
