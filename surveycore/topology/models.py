"""Topology findings, options and re-hydrated section geometry."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class TopologyErrorType(str, Enum):
    OVERLAP = "overlap"
    GAP = "gap"
    CONTAINMENT = "containment"
    INVALID_GEOMETRY = "invalid_geometry"
    TOUCHING_BOUNDARY = "touching_boundary"
    SELF_INTERSECTION = "self_intersection"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ErrorLocation(BaseModel):
    """Where a finding is: a single point or a polygon ring."""

    type: str = "point"
    """'point' or 'polygon'."""

    coordinates: list[tuple[float, float]] = Field(default_factory=list)
    description: str = ""


class CorrectionSuggestion(BaseModel):
    action: str
    description: str
    priority: Priority


class TopologyError(BaseModel):
    type: TopologyErrorType
    severity: str = "error"
    """'error', 'warning' or 'info'."""

    message: str
    affected_sections: list[str] = Field(default_factory=list)
    location: ErrorLocation = Field(default_factory=ErrorLocation)
    area: float | None = None
    """m² involved, where the finding has an extent."""

    suggestion: CorrectionSuggestion | None = None


class TopologyOptions(BaseModel):
    check_overlaps: bool = True
    check_containment: bool = True
    check_gaps: bool = True
    check_geometry: bool = True
    tolerance: float = 0.01
    """Metres; intersections below tolerance² m² are contact, not overlap."""

    min_gap_area: float = 1.0
    """Uncovered pieces smaller than this (m²) are not reported."""

    allow_touching: bool = True
    """Point contact, and units meeting the parent boundary, are acceptable."""

    allow_shared_walls: bool = True
    """Units sharing an edge get an informational note instead of an error."""

    cross_floor_overlaps: bool = True
    """Report plan overlaps between different floor levels, as warnings."""


class SectionGeometry(BaseModel):
    """A stored section re-hydrated for validation."""

    section_number: str
    floor_level: int = 0
    geometry: str
    """WKT POLYGON."""
