"""Typed domain records passed between resolver, converter and callers."""

from dataclasses import dataclass, field
from typing import Any, Optional

CALCULATION_ERROR = "Calculation Error"


@dataclass(frozen=True)
class LookupResult:
    """A found postcode as reported by the lookup service."""

    postcode: str
    eastings: Optional[float]    # OS National Grid, may be absent for some postcodes
    northings: Optional[float]
    latitude: Optional[float]    # service-supplied WGS84, used for map centring
    longitude: Optional[float]
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_service(cls, query: str, result: dict) -> "LookupResult":
        return cls(
            postcode=result.get("postcode") or query,
            eastings=result.get("eastings"),
            northings=result.get("northings"),
            latitude=result.get("latitude"),
            longitude=result.get("longitude"),
            raw=result,
        )


@dataclass(frozen=True)
class Conversion:
    """Grid reference and WGS84 position derived from one easting/northing."""

    easting: float
    northing: float
    grid_ref: str
    latitude: float   # 6 dp
    longitude: float  # 6 dp


@dataclass(frozen=True)
class PostcodeLookup:
    """Combined result of one postcode submission."""

    postcode: str
    eastings: Optional[float]
    northings: Optional[float]
    ngr_formatted: str
    geo_lat: Optional[float]
    geo_lon: Optional[float]
    latitude: Optional[float]
    longitude: Optional[float]

    @property
    def converted(self) -> bool:
        return self.ngr_formatted != CALCULATION_ERROR

    def to_dict(self) -> dict:
        """Plain dictionary using the camel-case keys the web client reads."""
        return {
            "postcode": self.postcode,
            "eastings": self.eastings,
            "northings": self.northings,
            "ngrFormatted": self.ngr_formatted,
            "geoLat": self.geo_lat,
            "geoLon": self.geo_lon,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }
