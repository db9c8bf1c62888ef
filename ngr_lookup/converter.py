"""Easting/northing -> National Grid Reference + WGS84 lat/lon."""

import logging

from .exceptions import ConversionError
from .geodesy import format_grid_ref, osgb36_grid_to_wgs84
from .models import Conversion

logger = logging.getLogger(__name__)

GRID_REF_DIGITS = 10
COORD_DECIMALS = 6


def convert(easting, northing) -> Conversion:
    """Convert one OSGB36 easting/northing pair.

    Both the grid reference and the WGS84 position come from the same pair.
    Raises ConversionError (never the underlying geodesy error) when the
    input is non-numeric, NaN or off the National Grid.
    """
    try:
        ngr = format_grid_ref(easting, northing, GRID_REF_DIGITS)
        lat, lon = osgb36_grid_to_wgs84(easting, northing)
    except (TypeError, ValueError, OverflowError) as e:
        logger.warning("Grid conversion failed for (%r, %r): %s", easting, northing, e)
        raise ConversionError(easting, northing, str(e)) from e

    return Conversion(
        easting=float(easting),
        northing=float(northing),
        grid_ref=ngr,
        latitude=round(lat, COORD_DECIMALS),
        longitude=round(lon, COORD_DECIMALS),
    )
