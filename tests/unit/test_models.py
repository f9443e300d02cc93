"""
Unit tests for the data model and locality registry.
"""

import pytest
from pydantic import ValidationError

from street_geometry.errors import ConfigurationError
from street_geometry.localities import LocalityRegistry
from street_geometry.models import (
    Coordinates,
    IntersectionQuery,
    ResolvedAddress,
    StreetGeometry,
    StreetSection,
)


class TestIntersectionQuery:
    def test_parse(self):
        query = IntersectionQuery.parse("ул. Оборище ∩ ул. Граф Игнатиев")

        assert query == IntersectionQuery("ул. Оборище", "ул. Граф Игнатиев")
        assert query.text == "ул. Оборище ∩ ул. Граф Игнатиев"

    def test_parse_tolerates_spacing(self):
        assert IntersectionQuery.parse("ул. Оборище∩ул. Шипка").text == "ул. Оборище ∩ ул. Шипка"

    @pytest.mark.parametrize("text", ["ул. Оборище", "ул. Оборище ∩ ", "∩", "a ∩ b ∩ c"])
    def test_parse_rejects_malformed(self, text):
        assert IntersectionQuery.parse(text) is None


class TestStreetGeometry:
    def test_rejects_single_point_lines(self):
        with pytest.raises(ValueError):
            StreetGeometry("ул. Оборище", [[(23.33, 42.69)]])

    def test_center_of_bounding_box(self):
        geometry = StreetGeometry("ул. Оборище", [
            [(23.330, 42.696), (23.335, 42.696)],
            [(23.335, 42.696), (23.340, 42.698)],
        ])

        center = geometry.center()

        assert center.lat == pytest.approx(42.697)
        assert center.lng == pytest.approx(23.335)


class TestResolvedAddress:
    def test_to_dict_uses_geojson_axis_order(self):
        address = ResolvedAddress("111", "ул. Оборище 111", Coordinates(lat=42.696, lng=23.3365))

        assert address.to_dict() == {
            "originalText": "111",
            "formattedAddress": "ул. Оборище 111",
            "coordinates": {"lat": 42.696, "lng": 23.3365},
            "geoJson": {"type": "Point", "coordinates": [23.3365, 42.696]},
        }


class TestStreetSection:
    def test_from_alias(self):
        section = StreetSection.model_validate({"street": "ул. Оборище", "from": "111", "to": "ул. Шипка"})

        assert section.endpoints() == ("111", "ул. Шипка")
        assert section.timespans == []

    def test_field_name_also_accepted(self):
        section = StreetSection(street="ул. Оборище", from_="111", to="ул. Шипка")
        assert section.from_ == "111"

    def test_empty_endpoint_rejected(self):
        with pytest.raises(ValidationError):
            StreetSection.model_validate({"street": "ул. Оборище", "from": "", "to": "ул. Шипка"})


class TestLocalityRegistry:
    def test_sofia(self):
        sofia = LocalityRegistry().get("bg.sofia")

        assert sofia.bbox == "42.605,23.188,42.83,23.528"
        assert sofia.viewbox == "23.188,42.605,23.528,42.83"
        assert sofia.contains(42.6977, 23.3219)
        assert not sofia.contains(42.1354, 24.7453)

    def test_unknown_locality(self):
        with pytest.raises(ConfigurationError, match="bg.sofia"):
            LocalityRegistry().get("bg.varna")

    def test_extra_localities(self):
        registry = LocalityRegistry({"bg.varna": {
            "bounds": {"south": 43.15, "west": 27.8, "north": 43.27, "east": 28.0},
            "center": {"lat": 43.2141, "lng": 27.9147},
        }})

        assert list(registry.ids()) == ["bg.sofia", "bg.varna"]
        assert registry.get("bg.varna").contains(43.2141, 27.9147)

    def test_inverted_bounds_rejected(self):
        with pytest.raises(ConfigurationError):
            LocalityRegistry({"bg.bad": {
                "bounds": {"south": 43.27, "west": 27.8, "north": 43.15, "east": 28.0},
                "center": {"lat": 43.2, "lng": 27.9},
            }})
