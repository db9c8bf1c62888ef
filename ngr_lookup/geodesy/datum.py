"""Ellipsoids, geocentric Cartesian conversion and Helmert datum shifts.

Only the two datums the National Grid needs are defined: OSGB36 (Airy 1830)
and WGS84. Helmert parameters are the Ordnance Survey published
WGS84 -> OSGB36 set; the reverse shift negates every parameter.
"""

import math
from typing import NamedTuple


class Ellipsoid(NamedTuple):
    a: float  # semi-major axis (m)
    b: float  # semi-minor axis (m)
    f: float  # flattening


AIRY_1830 = Ellipsoid(a=6377563.396, b=6356256.909, f=1 / 299.3249646)
WGS84 = Ellipsoid(a=6378137.0, b=6356752.314245, f=1 / 298.257223563)


class Helmert(NamedTuple):
    tx: float  # metres
    ty: float
    tz: float
    s: float   # ppm
    rx: float  # arcseconds
    ry: float
    rz: float

    def inverse(self) -> "Helmert":
        return Helmert(*(-p for p in self))


# WGS84 -> OSGB36
WGS84_TO_OSGB36 = Helmert(
    tx=-446.448, ty=125.157, tz=-542.060,
    s=20.4894,
    rx=-0.1502, ry=-0.2470, rz=-0.8421,
)
OSGB36_TO_WGS84 = WGS84_TO_OSGB36.inverse()


def to_cartesian(lat_rad, lon_rad, height, ellipsoid):
    """Geodetic (radians, metres) to geocentric x, y, z on *ellipsoid*."""
    a, f = ellipsoid.a, ellipsoid.f
    sin_lat = math.sin(lat_rad)
    cos_lat = math.cos(lat_rad)

    e2 = 2 * f - f * f
    nu = a / math.sqrt(1 - e2 * sin_lat * sin_lat)

    x = (nu + height) * cos_lat * math.cos(lon_rad)
    y = (nu + height) * cos_lat * math.sin(lon_rad)
    z = (nu * (1 - e2) + height) * sin_lat
    return x, y, z


def from_cartesian(x, y, z, ellipsoid):
    """Geocentric x, y, z to geodetic (lat rad, lon rad, height m).

    Bowring's (1985) closed form, accurate to well under a millimetre
    anywhere on the ellipsoid.
    """
    a, b, f = ellipsoid
    e2 = 2 * f - f * f
    eps2 = e2 / (1 - e2)
    p = math.sqrt(x * x + y * y)
    r = math.sqrt(p * p + z * z)

    if p == 0:
        # On the polar axis
        lat = math.copysign(math.pi / 2, z)
    else:
        tan_beta = (b * z) / (a * p) * (1 + eps2 * b / r)
        sin_beta = tan_beta / math.sqrt(1 + tan_beta * tan_beta)
        cos_beta = sin_beta / tan_beta if tan_beta else 1.0
        lat = math.atan2(
            z + eps2 * b * sin_beta ** 3,
            p - e2 * a * cos_beta ** 3,
        )
    lon = math.atan2(y, x)

    sin_lat = math.sin(lat)
    nu = a / math.sqrt(1 - e2 * sin_lat * sin_lat)
    height = p * math.cos(lat) + z * sin_lat - (a * a / nu)
    return lat, lon, height


def apply_helmert(x, y, z, t):
    """Apply a 7-parameter Helmert transform to geocentric coordinates."""
    s1 = t.s / 1e6 + 1
    rx = math.radians(t.rx / 3600)
    ry = math.radians(t.ry / 3600)
    rz = math.radians(t.rz / 3600)

    x2 = t.tx + x * s1 - y * rz + z * ry
    y2 = t.ty + x * rz + y * s1 - z * rx
    z2 = t.tz - x * ry + y * rx + z * s1
    return x2, y2, z2


def convert_datum(lat_rad, lon_rad, height, src, dst, transform):
    """Shift a geodetic position from the *src* to the *dst* ellipsoid."""
    x, y, z = to_cartesian(lat_rad, lon_rad, height, src)
    x2, y2, z2 = apply_helmert(x, y, z, transform)
    return from_cartesian(x2, y2, z2, dst)
