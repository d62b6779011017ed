"""Coordinate notation readers: decimal degrees, UTM and DMS.

Each reader raises :class:`CoordinateFormatError` on malformed or
out-of-range input; callers turn that into a per-line error.
"""

from __future__ import annotations

import re
from enum import Enum

DECIMAL_PRECISION = 6
UTM_PRECISION = 4

MIN_UTM_EASTING = 166_000.0
MAX_UTM_EASTING = 834_000.0
MAX_UTM_NORTHING = 10_000_000.0

_UTM_PATTERN = re.compile(r"^(\d{1,2})([C-HJ-NP-X])\s+(\d+(?:\.\d+)?)$", re.IGNORECASE)
_DMS_PART = r"(\d+)°\s*(\d+)['′]\s*(\d+(?:\.\d+)?)[\"″]?\s*"
_DMS_PATTERN = re.compile(
    rf"^{_DMS_PART}([NS])\s*,?\s*{_DMS_PART}([EW])$",
    re.IGNORECASE,
)


class CoordinateFormatError(Exception):
    """Raised when a coordinate value cannot be read."""


class CoordinateFormat(str, Enum):
    DECIMAL = "decimal"
    UTM = "utm"
    DMS = "dms"


def _to_float(text: str, label: str) -> float:
    try:
        return float(text.strip())
    except ValueError as exc:
        raise CoordinateFormatError(f"Invalid {label}: {text.strip()!r}") from exc


def parse_decimal(latitude: str, longitude: str) -> tuple[float, float]:
    """Read decimal degrees.  Returns ``(longitude, latitude)`` as ``(x, y)``."""
    lat = _to_float(latitude, "latitude")
    lon = _to_float(longitude, "longitude")
    if not -90.0 <= lat <= 90.0:
        raise CoordinateFormatError(f"Latitude {lat} outside [-90, 90]")
    if not -180.0 <= lon <= 180.0:
        raise CoordinateFormatError(f"Longitude {lon} outside [-180, 180]")
    return round(lon, DECIMAL_PRECISION), round(lat, DECIMAL_PRECISION)


def parse_utm(easting_cell: str, northing_cell: str) -> tuple[float, float, str]:
    """Read ``"<zone><band> <easting>"`` plus a northing.

    Returns ``(easting, northing, zone)`` where zone is e.g. ``"35K"``.
    """
    match = _UTM_PATTERN.match(easting_cell.strip())
    if match is None:
        raise CoordinateFormatError(
            f"Invalid UTM easting {easting_cell.strip()!r}, expected e.g. '35K 500000.0'"
        )
    zone_number = int(match.group(1))
    if not 1 <= zone_number <= 60:
        raise CoordinateFormatError(f"UTM zone {zone_number} outside 1-60")
    easting = float(match.group(3))
    northing = _to_float(northing_cell, "northing")
    if not MIN_UTM_EASTING <= easting <= MAX_UTM_EASTING:
        raise CoordinateFormatError(
            f"Easting {easting} outside {MIN_UTM_EASTING:.0f}-{MAX_UTM_EASTING:.0f}"
        )
    if not 0.0 <= northing <= MAX_UTM_NORTHING:
        raise CoordinateFormatError(f"Northing {northing} outside 0-{MAX_UTM_NORTHING:.0f}")
    zone = f"{zone_number}{match.group(2).upper()}"
    return round(easting, UTM_PRECISION), round(northing, UTM_PRECISION), zone


def _dms_to_decimal(degrees: str, minutes: str, seconds: str, hemisphere: str) -> float:
    mins = int(minutes)
    secs = float(seconds)
    if mins >= 60 or secs >= 60:
        raise CoordinateFormatError(f"Minutes and seconds must be below 60, got {mins}'{secs}\"")
    value = int(degrees) + mins / 60 + secs / 3600
    if hemisphere.upper() in ("S", "W"):
        value = -value
    return value


def parse_dms(text: str) -> tuple[float, float]:
    """Read ``DD°MM'SS.S"N DD°MM'SS.S"E``.  Returns ``(longitude, latitude)``."""
    match = _DMS_PATTERN.match(text.strip())
    if match is None:
        raise CoordinateFormatError(f"Invalid DMS coordinate {text.strip()!r}")
    lat = _dms_to_decimal(*match.group(1, 2, 3, 4))
    lon = _dms_to_decimal(*match.group(5, 6, 7, 8))
    if abs(lat) > 90.0:
        raise CoordinateFormatError(f"Latitude {lat} outside [-90, 90]")
    if abs(lon) > 180.0:
        raise CoordinateFormatError(f"Longitude {lon} outside [-180, 180]")
    return round(lon, DECIMAL_PRECISION), round(lat, DECIMAL_PRECISION)
