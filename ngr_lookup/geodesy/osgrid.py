"""Conversion between British National Grid (OSGB36) and WGS84 lat/lon.

Transverse Mercator on the Airy 1830 ellipsoid plus a Helmert 7-parameter
datum shift, following the Ordnance Survey "Guide to coordinate systems in
Great Britain". Helmert accuracy is ~5m against OSTN15.
"""

import math

from .datum import AIRY_1830, OSGB36_TO_WGS84, WGS84, WGS84_TO_OSGB36, convert_datum
from .gridref import GridRef, grid_ref

# National Grid projection constants
_N0 = -100000.0  # northing of true origin
_E0 = 400000.0   # easting of true origin
_F0 = 0.9996012717  # scale factor on central meridian
_PHI0 = math.radians(49.0)  # latitude of true origin
_LAMBDA0 = math.radians(-2.0)  # longitude of true origin

_A = AIRY_1830.a
_B = AIRY_1830.b
_E2 = 1 - (_B ** 2) / (_A ** 2)


def _meridional_arc(phi):
    """Compute meridional arc distance from the true origin to phi."""
    n = (_A - _B) / (_A + _B)
    n2 = n * n
    n3 = n2 * n

    dphi = phi - _PHI0
    sphi = phi + _PHI0

    ma = (1 + n + (5.0 / 4.0) * n2 + (5.0 / 4.0) * n3) * dphi
    mb = (3 * n + 3 * n2 + (21.0 / 8.0) * n3) * math.sin(dphi) * math.cos(sphi)
    mc = ((15.0 / 8.0) * n2 + (15.0 / 8.0) * n3) * math.sin(2 * dphi) * math.cos(2 * sphi)
    md = (35.0 / 24.0) * n3 * math.sin(3 * dphi) * math.cos(3 * sphi)

    return _B * _F0 * (ma - mb + mc - md)


def _grid_to_osgb36(easting, northing):
    """Convert BNG easting/northing to OSGB36 lat/lon in radians."""
    phi = _PHI0
    m = 0.0
    # Iterate until the residual northing is under 0.01mm
    while True:
        phi = (northing - _N0 - m) / (_A * _F0) + phi
        m = _meridional_arc(phi)
        if abs(northing - _N0 - m) < 0.00001:
            break

    sin_phi = math.sin(phi)
    cos_phi = math.cos(phi)
    tan_phi = math.tan(phi)

    nu = _A * _F0 / math.sqrt(1 - _E2 * sin_phi ** 2)
    rho = _A * _F0 * (1 - _E2) / (1 - _E2 * sin_phi ** 2) ** 1.5
    eta2 = nu / rho - 1

    de = easting - _E0

    VII = tan_phi / (2 * rho * nu)
    VIII = tan_phi / (24 * rho * nu ** 3) * (5 + 3 * tan_phi ** 2 + eta2 - 9 * tan_phi ** 2 * eta2)
    IX = tan_phi / (720 * rho * nu ** 5) * (61 + 90 * tan_phi ** 2 + 45 * tan_phi ** 4)
    X = 1 / (cos_phi * nu)
    XI = 1 / (6 * cos_phi * nu ** 3) * (nu / rho + 2 * tan_phi ** 2)
    XII = 1 / (120 * cos_phi * nu ** 5) * (5 + 28 * tan_phi ** 2 + 24 * tan_phi ** 4)
    XIIA = 1 / (5040 * cos_phi * nu ** 7) * (61 + 662 * tan_phi ** 2 + 1320 * tan_phi ** 4 + 720 * tan_phi ** 6)

    lat = phi - VII * de ** 2 + VIII * de ** 4 - IX * de ** 6
    lon = _LAMBDA0 + X * de - XI * de ** 3 + XII * de ** 5 - XIIA * de ** 7

    return lat, lon


def _osgb36_to_grid(lat, lon):
    """Convert OSGB36 lat/lon in radians to BNG easting/northing (metres)."""
    sin_phi = math.sin(lat)
    cos_phi = math.cos(lat)
    tan2 = math.tan(lat) ** 2
    tan4 = tan2 * tan2

    nu = _A * _F0 / math.sqrt(1 - _E2 * sin_phi ** 2)
    rho = _A * _F0 * (1 - _E2) / (1 - _E2 * sin_phi ** 2) ** 1.5
    eta2 = nu / rho - 1

    m = _meridional_arc(lat)
    cos3 = cos_phi ** 3
    cos5 = cos_phi ** 5

    I = m + _N0  # noqa: E741
    II = (nu / 2) * sin_phi * cos_phi
    III = (nu / 24) * sin_phi * cos3 * (5 - tan2 + 9 * eta2)
    IIIA = (nu / 720) * sin_phi * cos5 * (61 - 58 * tan2 + tan4)
    IV = nu * cos_phi
    V = (nu / 6) * cos3 * (nu / rho - tan2)
    VI = (nu / 120) * cos5 * (5 - 18 * tan2 + tan4 + 14 * eta2 - 58 * tan2 * eta2)

    dl = lon - _LAMBDA0

    northing = I + II * dl ** 2 + III * dl ** 4 + IIIA * dl ** 6
    easting = _E0 + IV * dl + V * dl ** 3 + VI * dl ** 5
    return easting, northing


def osgb36_grid_to_wgs84(easting, northing):
    """Convert British National Grid easting/northing to WGS84 (lat, lon) in degrees.

    Args:
        easting: BNG easting in metres
        northing: BNG northing in metres

    Returns:
        Tuple of (latitude, longitude) in decimal degrees, unrounded.

    Raises:
        TypeError, ValueError: input is not a point on the National Grid.
    """
    e, n = grid_ref(easting, northing)

    lat_osgb, lon_osgb = _grid_to_osgb36(e, n)
    lat_wgs, lon_wgs, _ = convert_datum(lat_osgb, lon_osgb, 0.0, AIRY_1830, WGS84, OSGB36_TO_WGS84)

    return math.degrees(lat_wgs), math.degrees(lon_wgs)


def wgs84_to_osgb36_grid(latitude, longitude) -> GridRef:
    """Convert WGS84 latitude/longitude (degrees) to a National Grid position.

    Easting and northing are rounded to the millimetre. Raises ValueError
    if the point falls outside the grid.
    """
    lat = float(latitude)
    lon = float(longitude)
    if not (math.isfinite(lat) and math.isfinite(lon)) or not -90 <= lat <= 90:
        raise ValueError(f"invalid latitude/longitude '{latitude}, {longitude}'")

    lat_osgb, lon_osgb, _ = convert_datum(
        math.radians(lat), math.radians(lon), 0.0, WGS84, AIRY_1830, WGS84_TO_OSGB36
    )
    easting, northing = _osgb36_to_grid(lat_osgb, lon_osgb)
    return grid_ref(round(easting, 3), round(northing, 3))
