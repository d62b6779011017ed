"""Shared geometric value types."""

from surveycore.models.geometry import (
    BoundingBox,
    InvalidGeometryError,
    ParsedCoordinate,
    Point,
    Ring,
)

__all__ = [
    "BoundingBox",
    "InvalidGeometryError",
    "ParsedCoordinate",
    "Point",
    "Ring",
]
