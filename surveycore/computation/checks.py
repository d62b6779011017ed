"""Advisory quality-control checks over a coordinate ring.

Each check is a pluggable rule; the engine runs every registered rule
and records its outcome.  All checks here are warning severity.
"""

from __future__ import annotations

import abc
import math
from typing import Sequence

from pydantic import BaseModel

from surveycore.config import ComputationConfig
from surveycore.models.geometry import Point, is_ring_closed


class QualityCheck(BaseModel):
    """Outcome of one quality-control check."""

    name: str
    passed: bool
    message: str
    severity: str = "info"
    """'error', 'warning' or 'info'."""


class QualityCheckRule(abc.ABC):
    """Base class for coordinate quality checks."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Check name as shown in reports."""

    @abc.abstractmethod
    def check(self, points: Sequence[Point], config: ComputationConfig) -> QualityCheck:
        """Evaluate *points* and return the outcome."""


def _distinct(points: Sequence[Point], config: ComputationConfig) -> list[Point]:
    """Drop the closing repeat of a closed ring."""
    pts = list(points)
    if len(pts) > 1 and is_ring_closed(pts, config.ring_close_tolerance):
        return pts[:-1]
    return pts


def _label(point: Point, index: int) -> str:
    return point.id or str(index + 1)


class DuplicateCoordinatesCheck(QualityCheckRule):
    """Flag distinct stations closer than the duplicate tolerance."""

    @property
    def name(self) -> str:
        return "Duplicate Coordinates"

    def check(self, points: Sequence[Point], config: ComputationConfig) -> QualityCheck:
        pts = _distinct(points, config)
        pairs: list[str] = []
        for i in range(len(pts)):
            for j in range(i + 1, len(pts)):
                if pts[i].distance_to(pts[j]) < config.duplicate_tolerance:
                    pairs.append(f"{_label(pts[i], i)}/{_label(pts[j], j)}")
        if pairs:
            return QualityCheck(
                name=self.name,
                passed=False,
                severity="warning",
                message=f"Duplicate points within {config.duplicate_tolerance * 100:.0f} cm: {', '.join(pairs)}",
            )
        return QualityCheck(name=self.name, passed=True, severity="warning", message="No duplicate coordinates")


class CollinearPointsCheck(QualityCheckRule):
    """Flag any three stations lying on one straight line."""

    @property
    def name(self) -> str:
        return "Collinear Points"

    def check(self, points: Sequence[Point], config: ComputationConfig) -> QualityCheck:
        pts = _distinct(points, config)
        triples: list[str] = []
        n = len(pts)
        for i in range(n):
            for j in range(i + 1, n):
                for k in range(j + 1, n):
                    if self._collinear(pts[i], pts[j], pts[k], config.collinear_tolerance):
                        triples.append(
                            f"{_label(pts[i], i)}-{_label(pts[j], j)}-{_label(pts[k], k)}"
                        )
        if triples:
            return QualityCheck(
                name=self.name,
                passed=False,
                severity="warning",
                message=f"{len(triples)} collinear point set(s): {', '.join(triples[:10])}",
            )
        return QualityCheck(name=self.name, passed=True, severity="warning", message="No collinear points")

    @staticmethod
    def _collinear(a: Point, b: Point, c: Point, tolerance: float) -> bool:
        ux, uy = b.x - a.x, b.y - a.y
        vx, vy = c.x - a.x, c.y - a.y
        norms = math.hypot(ux, uy) * math.hypot(vx, vy)
        if norms == 0:
            return False
        # |u x v| / (|u||v|) is the sine of the angle between the legs
        return abs(ux * vy - uy * vx) / norms < tolerance


class CoordinateConsistencyCheck(QualityCheckRule):
    """Flag stations outside the jurisdiction's plausible envelope."""

    @property
    def name(self) -> str:
        return "Coordinate Consistency"

    def check(self, points: Sequence[Point], config: ComputationConfig) -> QualityCheck:
        bounds = config.jurisdiction_bounds
        outside = [
            _label(p, i) for i, p in enumerate(_distinct(points, config)) if not bounds.contains(p.x, p.y)
        ]
        if outside:
            return QualityCheck(
                name=self.name,
                passed=False,
                severity="warning",
                message=(
                    f"{len(outside)} point(s) outside expected range "
                    f"E {bounds.min_easting:.0f}-{bounds.max_easting:.0f}, "
                    f"N {bounds.min_northing:.0f}-{bounds.max_northing:.0f}: {', '.join(outside[:10])}"
                ),
            )
        return QualityCheck(
            name=self.name, passed=True, severity="warning", message="All coordinates within expected range"
        )


def default_checks() -> list[QualityCheckRule]:
    return [DuplicateCoordinatesCheck(), CollinearPointsCheck(), CoordinateConsistencyCheck()]
