"""Traverse primitives: bearings, forward computation, closure and angles.

Bearings are measured clockwise from grid north, so a leg of bearing
``b`` and length ``d`` moves ``d·sin(b)`` east and ``d·cos(b)`` north.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from pydantic import BaseModel

from surveycore.cogo.units import DistanceUnit, convert_distance, normalize_bearing
from surveycore.models.geometry import Point, as_point, is_ring_closed

logger = logging.getLogger(__name__)

DEFAULT_CLOSURE_TOLERANCE = 0.0001  # 1:10,000
ANGLE_SUM_TOLERANCE = 0.01  # degrees


class BearingDistance(BaseModel):
    bearing: float
    """Degrees clockwise from grid north, in ``[0, 360)``."""

    distance: float


class TraverseClosure(BaseModel):
    """Misclosure of a traverse ring."""

    closure_error: float = 0.0
    """Linear misclosure in metres."""

    closure_error_ratio: float = 0.0
    """``N`` of the conventional ``1:N`` ratio; ``inf`` for a perfect closure."""

    error_fraction: float = 0.0
    """closure_error / total_distance."""

    closure_distance: float = 0.0
    closure_bearing: float = 0.0
    total_distance: float = 0.0
    is_within_tolerance: bool = False
    tolerance: float = DEFAULT_CLOSURE_TOLERANCE

    def ratio_label(self) -> str:
        """Conventional ``1:N`` text."""
        if math.isinf(self.closure_error_ratio):
            return "1:∞"
        return f"1:{round(self.closure_error_ratio):,}"


def bearing_distance(
    start: Point | Sequence[float],
    end: Point | Sequence[float],
    unit: DistanceUnit | str = DistanceUnit.METERS,
) -> BearingDistance:
    """Grid bearing and horizontal distance from *start* to *end*."""
    a = as_point(start)
    b = as_point(end)
    dx = b.x - a.x
    dy = b.y - a.y
    distance = math.hypot(dx, dy)
    bearing = normalize_bearing(math.degrees(math.atan2(dx, dy)))
    return BearingDistance(
        bearing=bearing,
        distance=convert_distance(distance, DistanceUnit.METERS, unit),
    )


def calculate_coordinates(start: Point | Sequence[float], bearing: float, distance: float) -> Point:
    """Forward computation: the point *distance* metres along *bearing*."""
    origin = as_point(start)
    rad = math.radians(bearing)
    return Point(x=origin.x + distance * math.sin(rad), y=origin.y + distance * math.cos(rad))


def compute_closure(
    points: Sequence[Point | Sequence[float]],
    tolerance: float = DEFAULT_CLOSURE_TOLERANCE,
) -> TraverseClosure:
    """Compute the misclosure of a traverse.

    A closed ring (first point repeated) is checked by summing the
    latitude and departure of every leg recomputed from its bearing and
    distance.  An open ring's misclosure is the gap from its last point
    back to its first.

    Parameters
    ----------
    points:
        Traverse stations in order.
    tolerance:
        Maximum acceptable fractional error (``0.0001`` is 1:10,000).

    Returns
    -------
    TraverseClosure
        An all-zero result outside tolerance when fewer than 3 points
        are supplied or every point coincides.
    """
    pts = [as_point(p) for p in points]
    if len(pts) < 3:
        logger.debug("Closure requested for %d points, returning empty result", len(pts))
        return TraverseClosure(tolerance=tolerance, is_within_tolerance=False)

    total_distance = 0.0
    for a, b in zip(pts, pts[1:]):
        total_distance += a.distance_to(b)

    if is_ring_closed(pts):
        sum_dx = 0.0
        sum_dy = 0.0
        for a, b in zip(pts, pts[1:]):
            leg = bearing_distance(a, b)
            rad = math.radians(leg.bearing)
            sum_dx += leg.distance * math.sin(rad)
            sum_dy += leg.distance * math.cos(rad)
        closure_error = math.hypot(sum_dx, sum_dy)
        closure_bearing = (
            normalize_bearing(math.degrees(math.atan2(sum_dx, sum_dy))) if closure_error > 0 else 0.0
        )
    else:
        gap = bearing_distance(pts[0], pts[-1])
        closure_error = gap.distance
        closure_bearing = gap.bearing

    if total_distance <= 0:
        logger.debug("Closure requested for coincident points, returning empty result")
        return TraverseClosure(tolerance=tolerance, is_within_tolerance=False)

    error_fraction = closure_error / total_distance
    if closure_error > 0:
        ratio = total_distance / closure_error
    else:
        ratio = math.inf

    return TraverseClosure(
        closure_error=closure_error,
        closure_error_ratio=ratio,
        error_fraction=error_fraction,
        closure_distance=closure_error,
        closure_bearing=closure_bearing,
        total_distance=total_distance,
        is_within_tolerance=error_fraction <= tolerance,
        tolerance=tolerance,
    )


def calculate_interior_angles(points: Sequence[Point | Sequence[float]]) -> list[float]:
    """Interior angle in degrees at each vertex of a polygon.

    Works for either winding; a closing repeat point is ignored.
    """
    pts = [as_point(p) for p in points]
    if is_ring_closed(pts):
        pts = pts[:-1]
    n = len(pts)
    if n < 3:
        return []

    signed_area = sum(pts[i].x * pts[(i + 1) % n].y - pts[(i + 1) % n].x * pts[i].y for i in range(n))
    clockwise = signed_area < 0

    angles: list[float] = []
    for i in range(n):
        prev_pt = pts[i - 1]
        curr = pts[i]
        next_pt = pts[(i + 1) % n]
        back = bearing_distance(curr, prev_pt).bearing
        ahead = bearing_distance(curr, next_pt).bearing
        if clockwise:
            angle = normalize_bearing(back - ahead)
        else:
            angle = normalize_bearing(ahead - back)
        angles.append(angle)
    return angles


def sum_interior_angles(vertex_count: int) -> float:
    """Theoretical interior angle sum, ``(n - 2) * 180``."""
    return (vertex_count - 2) * 180.0


def validate_traverse_angles(
    angles: Sequence[float], tolerance: float = ANGLE_SUM_TOLERANCE
) -> tuple[bool, float]:
    """Check measured angles against the theoretical sum.

    Returns ``(is_valid, misclosure_degrees)``.
    """
    misclosure = sum(angles) - sum_interior_angles(len(angles))
    return abs(misclosure) <= tolerance, misclosure
