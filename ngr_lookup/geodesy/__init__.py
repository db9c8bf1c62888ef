"""OSGB36 National Grid references and OSGB36 <-> WGS84 conversion."""

from .gridref import GridRef, format_grid_ref, grid_ref, parse_grid_ref
from .osgrid import osgb36_grid_to_wgs84, wgs84_to_osgb36_grid

__all__ = [
    "GridRef",
    "grid_ref",
    "format_grid_ref",
    "parse_grid_ref",
    "osgb36_grid_to_wgs84",
    "wgs84_to_osgb36_grid",
]
