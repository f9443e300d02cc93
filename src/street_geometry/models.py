"""
Data model for street geometry resolution.

Result types are plain dataclasses produced fresh per call. Input coming from
the extraction step (street sections) is validated with pydantic.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from shapely.geometry import LineString, MultiLineString

# (longitude, latitude), GeoJSON axis order
Position = Tuple[float, float]
Polyline = List[Position]


class EndpointClassification(str, Enum):
    """How a street endpoint is resolved."""
    CROSS_STREET = "CROSS_STREET"
    HOUSE_NUMBER = "HOUSE_NUMBER"


@dataclass(frozen=True)
class Coordinates:
    """A WGS84 point."""
    lat: float
    lng: float

    def to_position(self) -> Position:
        return (self.lng, self.lat)

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass
class StreetGeometry:
    """Named collection of disjoint polylines, one per map way.

    Square-type results are represented by a small synthetic 2-point box so
    every street is a set of polylines.
    """
    name: str
    lines: List[Polyline] = field(default_factory=list)

    def __post_init__(self):
        for index, line in enumerate(self.lines):
            if len(line) < 2:
                raise ValueError(
                    f"Polyline {index} of '{self.name}' has {len(line)} point(s), need at least 2"
                )

    @property
    def point_count(self) -> int:
        return sum(len(line) for line in self.lines)

    def to_shapely(self) -> MultiLineString:
        return MultiLineString([LineString(line) for line in self.lines])

    def center(self) -> Coordinates:
        """Center of the bounding box of all polylines."""
        min_lng, min_lat, max_lng, max_lat = self.to_shapely().bounds
        return Coordinates(lat=(min_lat + max_lat) / 2, lng=(min_lng + max_lng) / 2)

    def to_geojson(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "properties": {"name": self.name},
            "geometry": {
                "type": "MultiLineString",
                "coordinates": [[list(pos) for pos in line] for line in self.lines],
            },
        }


@dataclass(frozen=True)
class IntersectionQuery:
    """Ordered pair of street names: "street ∩ cross_street"."""
    street: str
    cross_street: str

    SEPARATOR = "∩"

    @property
    def text(self) -> str:
        return f"{self.street} {self.SEPARATOR} {self.cross_street}"

    @classmethod
    def parse(cls, text: str) -> Optional["IntersectionQuery"]:
        """Parse "A ∩ B"; returns None when either side is missing."""
        parts = [part.strip() for part in text.split(cls.SEPARATOR)]
        if len(parts) != 2 or not parts[0] or not parts[1]:
            return None
        return cls(street=parts[0], cross_street=parts[1])


@dataclass
class ResolvedAddress:
    """Terminal output of intersection solving and endpoint geocoding."""
    original_text: str
    formatted_address: str
    coordinates: Coordinates

    def to_geojson(self) -> Dict[str, Any]:
        return {
            "type": "Point",
            "coordinates": [self.coordinates.lng, self.coordinates.lat],
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "originalText": self.original_text,
            "formattedAddress": self.formatted_address,
            "coordinates": self.coordinates.to_dict(),
            "geoJson": self.to_geojson(),
        }


@dataclass
class EndpointRouting:
    """Street endpoints split into intersection and house-number lookups."""
    intersections: List[str] = field(default_factory=list)
    # built query -> original endpoint text
    house_number_queries: Dict[str, str] = field(default_factory=dict)


class Timespan(BaseModel):
    """Validity window of an interruption, as extracted from the source text."""
    start: str
    end: str


class StreetSection(BaseModel):
    """A closed or affected stretch of a street between two endpoints."""
    model_config = ConfigDict(populate_by_name=True)

    street: str = Field(min_length=1)
    from_: str = Field(alias="from", min_length=1)
    to: str = Field(min_length=1)
    timespans: List[Timespan] = Field(default_factory=list)

    def endpoints(self) -> Tuple[str, str]:
        return self.from_, self.to
