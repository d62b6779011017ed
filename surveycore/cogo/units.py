"""Angle and distance unit conversions."""

from __future__ import annotations

import math
from enum import Enum

FEET_PER_METRE = 1 / 0.3048


class AngleUnit(str, Enum):
    DEGREES = "degrees"
    GRADIANS = "gradians"
    RADIANS = "radians"


class DistanceUnit(str, Enum):
    METERS = "meters"
    FEET = "feet"


def to_degrees(value: float, unit: AngleUnit | str) -> float:
    unit = AngleUnit(unit)
    if unit is AngleUnit.GRADIANS:
        return value * 0.9
    if unit is AngleUnit.RADIANS:
        return math.degrees(value)
    return value


def from_degrees(value: float, unit: AngleUnit | str) -> float:
    unit = AngleUnit(unit)
    if unit is AngleUnit.GRADIANS:
        return value / 0.9
    if unit is AngleUnit.RADIANS:
        return math.radians(value)
    return value


def convert_distance(value: float, from_unit: DistanceUnit | str, to_unit: DistanceUnit | str) -> float:
    from_unit = DistanceUnit(from_unit)
    to_unit = DistanceUnit(to_unit)
    if from_unit is to_unit:
        return value
    if from_unit is DistanceUnit.METERS:
        return value * FEET_PER_METRE
    return value * 0.3048


def normalize_bearing(bearing: float) -> float:
    """Map any angle in degrees into ``[0, 360)``."""
    result = bearing % 360.0
    # -1e-17 % 360 rounds up to 360.0
    return 0.0 if result >= 360.0 else result


def format_bearing(bearing: float) -> str:
    """Render a bearing as whole-second DMS text, e.g. ``45°30'15"``."""
    total_seconds = round(normalize_bearing(bearing) * 3600)
    degrees, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{degrees % 360}°{minutes:02d}'{seconds:02d}\""
