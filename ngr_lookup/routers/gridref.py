"""Grid reference endpoints: conversion, parsing and reverse lookup."""

from fastapi import APIRouter, HTTPException, Query

from ..converter import GRID_REF_DIGITS, convert
from ..exceptions import ConversionError
from ..geodesy import format_grid_ref, parse_grid_ref, wgs84_to_osgb36_grid
from ..schemas import GridConversionOut, GridRefParseOut, LatLonToGridOut

router = APIRouter(prefix="/gridref", tags=["gridref"])


@router.get("", response_model=GridConversionOut)
def convert_grid(
    easting: float = Query(..., description="OSGB36 easting in metres"),
    northing: float = Query(..., description="OSGB36 northing in metres"),
):
    """Easting/northing -> 10-digit grid reference and WGS84 lat/lon."""
    try:
        conv = convert(easting, northing)
    except ConversionError as e:
        raise HTTPException(status_code=422, detail=e.reason)

    return GridConversionOut(
        easting=conv.easting,
        northing=conv.northing,
        ngr_formatted=conv.grid_ref,
        geo_lat=conv.latitude,
        geo_lon=conv.longitude,
    )


@router.get("/parse", response_model=GridRefParseOut)
def parse_grid(ref: str = Query(..., min_length=1, description="e.g. TQ 30047 80339")):
    """Grid reference (lettered or numeric) -> easting/northing."""
    try:
        gr = parse_grid_ref(ref)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return GridRefParseOut(
        grid_ref=format_grid_ref(gr.easting, gr.northing, GRID_REF_DIGITS),
        easting=gr.easting,
        northing=gr.northing,
    )


@router.get("/from-latlon", response_model=LatLonToGridOut)
def from_latlon(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
):
    """WGS84 lat/lon -> OSGB36 easting/northing and grid reference."""
    try:
        gr = wgs84_to_osgb36_grid(lat, lon)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return LatLonToGridOut(
        latitude=lat,
        longitude=lon,
        easting=gr.easting,
        northing=gr.northing,
        ngr_formatted=format_grid_ref(gr.easting, gr.northing, GRID_REF_DIGITS),
    )
