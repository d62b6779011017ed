"""Geometric value types shared by every stage of the pipeline.

A :class:`Ring` is always closed: its last point repeats its first.
Open point sequences are closed by :meth:`Ring.from_points`; a ring that
arrives open any other way is rejected at construction.

Coordinates are projected metres.  Vertex matching uses an absolute
:data:`VERTEX_TOLERANCE` of one millimetre, so geographic (degree)
coordinates must be reprojected before they are turned into rings.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator
from shapely import wkt as shapely_wkt
from shapely.errors import ShapelyError
from shapely.geometry import Polygon

# Metres; coordinates closer than this on both axes are the same vertex
VERTEX_TOLERANCE = 0.001


class InvalidGeometryError(Exception):
    """Raised when coordinates cannot form a valid polygon ring."""


class Point(BaseModel):
    """A planar survey point in projected metres."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    id: str | None = None

    def distance_to(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def coincides(self, other: Point, tolerance: float = VERTEX_TOLERANCE) -> bool:
        """True when both axes differ by less than *tolerance*."""
        return abs(self.x - other.x) < tolerance and abs(self.y - other.y) < tolerance


class ParsedCoordinate(Point):
    """A point read from a coordinate file, with its provenance."""

    z: float | None = None
    point_number: str = ""
    description: str | None = None
    original_format: str = "decimal"


class BoundingBox(BaseModel):
    """Axis-aligned bounding box in plan."""

    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def contains(self, other: BoundingBox, tolerance: float = 0.0) -> bool:
        """True when *other* lies inside this box (edges inclusive)."""
        return (
            other.min_x >= self.min_x - tolerance
            and other.min_y >= self.min_y - tolerance
            and other.max_x <= self.max_x + tolerance
            and other.max_y <= self.max_y + tolerance
        )

    def overlap_area(self, other: BoundingBox) -> float:
        """Area shared with *other*; 0.0 for disjoint or edge-touching boxes."""
        overlap_x = max(0.0, min(self.max_x, other.max_x) - max(self.min_x, other.min_x))
        overlap_y = max(0.0, min(self.max_y, other.max_y) - max(self.min_y, other.min_y))
        return overlap_x * overlap_y

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> BoundingBox:
        pts = list(points)
        if not pts:
            return cls()
        xs = [p.x for p in pts]
        ys = [p.y for p in pts]
        return cls(min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys))


def as_point(value: Point | Sequence[float]) -> Point:
    """Coerce a ``Point`` or an ``(x, y)`` pair into a ``Point``."""
    if isinstance(value, Point):
        return value
    return Point(x=float(value[0]), y=float(value[1]))


def is_ring_closed(points: Sequence[Point], tolerance: float = VERTEX_TOLERANCE) -> bool:
    """True when the first and last points coincide."""
    if len(points) < 2:
        return False
    return points[0].coincides(points[-1], tolerance)


class Ring(BaseModel):
    """A closed polygon ring (last point equals first)."""

    model_config = ConfigDict(frozen=True)

    points: list[Point] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_closed(self) -> Ring:
        if len(self.points) < 4:
            raise InvalidGeometryError(
                f"A ring needs at least 3 distinct vertices, got {max(len(self.points) - 1, 0)}"
            )
        if not is_ring_closed(self.points):
            raise InvalidGeometryError("Ring is not closed: first and last points differ")
        distinct: list[Point] = []
        for p in self.points:
            if not any(p.coincides(q) for q in distinct):
                distinct.append(p)
        if len(distinct) < 3:
            raise InvalidGeometryError("A ring needs at least 3 distinct vertices")
        return self

    @classmethod
    def from_points(cls, points: Iterable[Point | Sequence[float]]) -> Ring:
        """Build a ring, appending the first point when the sequence is open."""
        pts = [as_point(p) for p in points]
        if len(pts) < 3:
            raise InvalidGeometryError(
                f"At least 3 coordinates are required to form a polygon, got {len(pts)}"
            )
        if not is_ring_closed(pts):
            pts.append(pts[0])
        return cls(points=pts)

    @classmethod
    def from_wkt(cls, text: str) -> Ring:
        """Re-hydrate the outer ring of a WKT ``POLYGON``."""
        try:
            geom = shapely_wkt.loads(text)
        except ShapelyError as exc:
            raise InvalidGeometryError(f"Unreadable WKT: {exc}") from exc
        if not isinstance(geom, Polygon):
            raise InvalidGeometryError(f"Expected a POLYGON, got {geom.geom_type}")
        return cls.from_shapely(geom)

    @classmethod
    def from_shapely(cls, polygon: Polygon) -> Ring:
        return cls(points=[Point(x=x, y=y) for x, y, *_ in polygon.exterior.coords])

    @property
    def vertices(self) -> list[Point]:
        """Distinct corner points, without the closing repeat."""
        return list(self.points[:-1])

    @property
    def bounds(self) -> BoundingBox:
        return BoundingBox.from_points(self.points)

    def coords(self) -> list[tuple[float, float]]:
        return [(p.x, p.y) for p in self.points]

    def to_shapely(self) -> Polygon:
        return Polygon(self.coords())

    def to_wkt(self) -> str:
        """Encode as ``POLYGON((x y, ...))`` with the ring closed."""
        body = ", ".join(f"{p.x} {p.y}" for p in self.points)
        return f"POLYGON(({body}))"
