from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Responses use camel-case keys (ngrFormatted, geoLat, ...) for the web client


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Postcode lookup ---

class PostcodeLookupOut(_CamelModel):
    postcode: str
    # Passed through as sent; a non-numeric value comes back unchanged
    eastings: Optional[Union[float, str]] = None
    northings: Optional[Union[float, str]] = None
    ngr_formatted: str
    geo_lat: Optional[float] = None
    geo_lon: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


# --- Grid reference conversion ---

class GridConversionOut(_CamelModel):
    easting: float
    northing: float
    ngr_formatted: str
    geo_lat: float
    geo_lon: float


class GridRefParseOut(_CamelModel):
    grid_ref: str
    easting: float
    northing: float


class LatLonToGridOut(_CamelModel):
    latitude: float
    longitude: float
    easting: float
    northing: float
    ngr_formatted: str


# --- Service ---

class HealthOut(_CamelModel):
    status: str
    version: str
    postcodes_api: str
