"""Abstract TopologyRule interface and the shared validation context."""

from __future__ import annotations

import abc
from typing import Any

from shapely import make_valid
from shapely.geometry import MultiPolygon, Point as ShapelyPoint, Polygon
from shapely.geometry.base import BaseGeometry

from surveycore.topology.models import ErrorLocation, TopologyError, TopologyOptions


class UnitShape:
    """A section prepared for spatial checks."""

    def __init__(self, section_number: str, floor_level: int, polygon: Polygon, source: Any = None) -> None:
        self.section_number = section_number
        self.floor_level = floor_level
        self.raw = polygon
        # Spatial predicates need valid input; validity itself is checked on ``raw``
        self.polygon = polygon if polygon.is_valid else make_valid(polygon)
        self.source = source


class TopologyContext:
    """Parent parcel, units and options shared by every rule."""

    def __init__(self, parent: Polygon, units: list[UnitShape], options: TopologyOptions) -> None:
        self.parent_raw = parent
        self.parent = parent if parent.is_valid else make_valid(parent)
        self.units = units
        self.options = options


def polygon_location(geom: BaseGeometry, description: str) -> ErrorLocation:
    """Locate *geom* by its largest polygon ring, or by a representative point."""
    polygons: list[Polygon] = []
    if isinstance(geom, Polygon):
        polygons = [geom]
    elif isinstance(geom, MultiPolygon):
        polygons = list(geom.geoms)
    elif hasattr(geom, "geoms"):
        polygons = [g for g in geom.geoms if isinstance(g, Polygon)]

    polygons = [p for p in polygons if not p.is_empty]
    if polygons:
        largest = max(polygons, key=lambda p: p.area)
        return ErrorLocation(
            type="polygon",
            coordinates=[(x, y) for x, y, *_ in largest.exterior.coords],
            description=description,
        )
    return point_location(geom, description)


def point_location(geom: BaseGeometry, description: str) -> ErrorLocation:
    if geom.is_empty:
        return ErrorLocation(type="point", coordinates=[], description=description)
    pt: ShapelyPoint = geom.representative_point()
    return ErrorLocation(type="point", coordinates=[(pt.x, pt.y)], description=description)


class TopologyRule(abc.ABC):
    """Base class for all topology rules."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short rule identifier."""

    def enabled(self, options: TopologyOptions) -> bool:
        """Whether the rule runs under *options*."""
        return True

    @abc.abstractmethod
    def check(self, context: TopologyContext) -> list[TopologyError]:
        """Run this rule against the scheme.

        Returns list of findings (empty if passing).
        """
