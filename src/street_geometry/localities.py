"""
Locality registry.

A locality is a named region (bounding box + center) that every query is
constrained to. The registry is read-only after construction.
"""

from typing import Dict, Iterable, Optional

from pydantic import BaseModel, Field, model_validator

from .errors import ConfigurationError


class Bounds(BaseModel):
    south: float = Field(ge=-90, le=90)
    west: float = Field(ge=-180, le=180)
    north: float = Field(ge=-90, le=90)
    east: float = Field(ge=-180, le=180)

    @model_validator(mode="after")
    def _check_order(self) -> "Bounds":
        if self.south >= self.north or self.west >= self.east:
            raise ValueError("Bounds must satisfy south < north and west < east")
        return self


class Center(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class Locality(BaseModel):
    """Bounding box and center of a configured locality."""
    id: str
    bounds: Bounds
    center: Center

    @property
    def bbox(self) -> str:
        """Overpass bbox string: south,west,north,east."""
        b = self.bounds
        return f"{b.south},{b.west},{b.north},{b.east}"

    @property
    def viewbox(self) -> str:
        """Nominatim viewbox string: west,south,east,north."""
        b = self.bounds
        return f"{b.west},{b.south},{b.east},{b.north}"

    def contains(self, lat: float, lng: float) -> bool:
        b = self.bounds
        return b.south <= lat <= b.north and b.west <= lng <= b.east


BUILTIN_LOCALITIES: Dict[str, Dict] = {
    "bg.sofia": {
        "bounds": {"south": 42.605, "west": 23.188, "north": 42.83, "east": 23.528},
        "center": {"lat": 42.6977, "lng": 23.3219},
    },
}


class LocalityRegistry:
    """Lookup of localities by identifier."""

    def __init__(self, extra: Optional[Dict[str, Dict]] = None):
        definitions = dict(BUILTIN_LOCALITIES)
        definitions.update(extra or {})

        self._localities: Dict[str, Locality] = {}
        for locality_id, definition in definitions.items():
            try:
                self._localities[locality_id] = Locality(id=locality_id, **definition)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid locality '{locality_id}': {e}") from e

    def get(self, locality_id: str) -> Locality:
        if locality_id not in self._localities:
            raise ConfigurationError(
                f"Unknown locality: {locality_id}. "
                f"Valid localities: {', '.join(sorted(self._localities))}"
            )
        return self._localities[locality_id]

    def ids(self) -> Iterable[str]:
        return sorted(self._localities)
