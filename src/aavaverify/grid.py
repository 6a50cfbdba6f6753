"""DIGIPIN grid-code derivation and coordinate validation."""

import math

from aavaverify.exceptions import InvalidCoordinate
from aavaverify.models import Coordinate, DigipinResult, GridBoundary

SCALE = 10000                 # cells per degree
CELL_EDGE_DEGREES = 0.000036  # boundary square edge, independent of SCALE
PRECISION_METERS = 4          # nominal, not recomputed per latitude
CODE_PREFIX = "DP"


def is_valid_coordinate(latitude: float, longitude: float) -> bool:
    """Return True if both values are finite and within WGS84 range."""
    return Coordinate(latitude, longitude).is_valid()


def parse_coordinate(lat_raw: str, lon_raw: str) -> Coordinate:
    """
    Parse user-typed latitude/longitude text into a Coordinate.

    Raises InvalidCoordinate if either value is not a number or is out of range.
    """
    try:
        lat = float(lat_raw.strip())
        lon = float(lon_raw.strip())
    except (AttributeError, ValueError):
        raise InvalidCoordinate(lat_raw, lon_raw) from None
    if not is_valid_coordinate(lat, lon):
        raise InvalidCoordinate(lat, lon)
    return Coordinate(lat, lon)


def cell_index(latitude: float, longitude: float) -> tuple[int, int]:
    """Grid cell of a point; values on a cell edge fall in the lower cell."""
    return (
        math.floor((latitude + 90.0) * SCALE),
        math.floor((longitude + 180.0) * SCALE),
    )


def encode(coordinate: Coordinate) -> DigipinResult:
    """
    Derive the grid code and boundary for *coordinate*.

    Pure function of (latitude, longitude); the boundary is centred on the
    input point, so the point always lies inside it.
    Raises InvalidCoordinate for out-of-range input.
    """
    lat, lon = coordinate.latitude, coordinate.longitude
    if not coordinate.is_valid():
        raise InvalidCoordinate(lat, lon)

    cell_lat, cell_lon = cell_index(lat, lon)
    code = f"{CODE_PREFIX}{cell_lat:X}{cell_lon:X}"

    half = CELL_EDGE_DEGREES / 2
    boundary = GridBoundary(
        lat_min=lat - half,
        lat_max=lat + half,
        lon_min=lon - half,
        lon_max=lon + half,
    )
    return DigipinResult(
        digipin=code,
        latitude=lat,
        longitude=lon,
        boundary=boundary,
        precision_meters=PRECISION_METERS,
    )
