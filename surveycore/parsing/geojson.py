"""GeoJSON boundary reader."""

from __future__ import annotations

import json
import logging
from typing import Any

from shapely.errors import GeometryTypeError
from shapely.geometry import MultiPolygon, Polygon, shape

from surveycore.models.geometry import ParsedCoordinate
from surveycore.parsing.delimited import CoordinateParseResult

logger = logging.getLogger(__name__)


def _first_geometry(document: dict[str, Any]) -> dict[str, Any] | None:
    kind = document.get("type")
    if kind == "FeatureCollection":
        for feature in document.get("features", []):
            geometry = (feature or {}).get("geometry")
            if geometry:
                return geometry
        return None
    if kind == "Feature":
        return document.get("geometry")
    return document


def parse_geojson_coordinates(content: str) -> CoordinateParseResult:
    """Read the outer ring of the first polygon in a GeoJSON document.

    Feature properties are ignored; vertices are numbered from 1.
    """
    result = CoordinateParseResult(format="geojson")
    try:
        document = json.loads(content)
    except json.JSONDecodeError as exc:
        result.errors.append(f"Invalid JSON: {exc.msg} at line {exc.lineno}")
        return result

    geometry = _first_geometry(document) if isinstance(document, dict) else None
    if geometry is None:
        result.errors.append("No geometry found in GeoJSON document")
        return result

    try:
        geom = shape(geometry)
    except (GeometryTypeError, KeyError, TypeError, ValueError) as exc:
        result.errors.append(f"Unreadable geometry: {exc}")
        return result

    if isinstance(geom, MultiPolygon):
        if len(geom.geoms) > 1:
            result.warnings.append(
                f"MultiPolygon has {len(geom.geoms)} parts; only the first is used"
            )
        geom = geom.geoms[0]
    if not isinstance(geom, Polygon):
        result.errors.append(f"Expected a Polygon geometry, got {geom.geom_type}")
        return result
    if geom.interiors:
        result.warnings.append("Polygon holes are ignored; only the outer ring is used")

    for number, (x, y, *rest) in enumerate(geom.exterior.coords, start=1):
        result.coordinates.append(
            ParsedCoordinate(
                x=x,
                y=y,
                z=rest[0] if rest else None,
                id=str(number),
                point_number=str(number),
                original_format="geojson",
            )
        )

    result.success = True
    logger.debug("Read %d vertices from GeoJSON", len(result.coordinates))
    return result
