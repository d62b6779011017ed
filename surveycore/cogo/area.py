"""Planar polygon area by the shoelace formula."""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from pydantic import BaseModel

from surveycore.models.geometry import InvalidGeometryError, Point, as_point, is_ring_closed

SQUARE_METRES_PER_HECTARE = 10_000.0
SQUARE_METRES_PER_ACRE = 4_046.8564224
SQUARE_FEET_PER_SQUARE_METRE = 10.763910417


class AreaUnit(str, Enum):
    SQUARE_METERS = "square_meters"
    SQUARE_FEET = "square_feet"
    HECTARES = "hectares"
    ACRES = "acres"


class AreaResult(BaseModel):
    area: float
    """Always non-negative, in ``unit``."""

    unit: AreaUnit = AreaUnit.SQUARE_METERS
    perimeter: float = 0.0
    """Closed-ring perimeter in metres."""


def convert_area(square_metres: float, unit: AreaUnit | str) -> float:
    unit = AreaUnit(unit)
    if unit is AreaUnit.SQUARE_FEET:
        return square_metres * SQUARE_FEET_PER_SQUARE_METRE
    if unit is AreaUnit.HECTARES:
        return square_metres / SQUARE_METRES_PER_HECTARE
    if unit is AreaUnit.ACRES:
        return square_metres / SQUARE_METRES_PER_ACRE
    return square_metres


def polygon_area(points: Sequence[Point | Sequence[float]]) -> float:
    """Unsigned shoelace area in square metres of the auto-closed ring."""
    pts = [as_point(p) for p in points]
    if is_ring_closed(pts):
        pts = pts[:-1]
    n = len(pts)
    if n < 3:
        return 0.0
    # Work relative to the first vertex to keep projected coordinates small
    ox, oy = pts[0].x, pts[0].y
    twice_area = 0.0
    for i in range(n):
        j = (i + 1) % n
        twice_area += (pts[i].x - ox) * (pts[j].y - oy) - (pts[j].x - ox) * (pts[i].y - oy)
    return abs(twice_area) / 2.0


def compute_area(
    points: Sequence[Point | Sequence[float]],
    unit: AreaUnit | str = AreaUnit.SQUARE_METERS,
) -> AreaResult:
    """Area and perimeter of a polygon.

    Raises
    ------
    InvalidGeometryError
        If fewer than 3 points are supplied.
    """
    pts = [as_point(p) for p in points]
    if len(pts) < 3:
        raise InvalidGeometryError(f"At least 3 points are required to compute area, got {len(pts)}")

    ring = pts if is_ring_closed(pts) else pts + [pts[0]]
    perimeter = sum(a.distance_to(b) for a, b in zip(ring, ring[1:]))

    return AreaResult(
        area=convert_area(polygon_area(pts), unit),
        unit=AreaUnit(unit),
        perimeter=perimeter,
    )
