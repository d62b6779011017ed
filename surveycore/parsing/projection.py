"""Reprojection into the canonical projected CRS."""

from __future__ import annotations

import logging
from typing import Sequence

from pyproj import Transformer
from pyproj.exceptions import CRSError, ProjError

from surveycore.models.geometry import ParsedCoordinate

logger = logging.getLogger(__name__)

CANONICAL_EPSG = 32735  # WGS 84 / UTM zone 35S
OUTPUT_PRECISION = 4  # millimetres

_transformers: dict[tuple[int, int], Transformer] = {}


class ProjectionError(Exception):
    """Raised when coordinates cannot be transformed between systems."""


def get_transformer(source_epsg: int, target_epsg: int) -> Transformer:
    """Return a cached (x, y)-ordered transformer between two EPSG codes."""
    key = (source_epsg, target_epsg)
    if key not in _transformers:
        try:
            _transformers[key] = Transformer.from_crs(
                f"EPSG:{source_epsg}", f"EPSG:{target_epsg}", always_xy=True
            )
        except CRSError as exc:
            raise ProjectionError(f"Unknown coordinate system EPSG:{source_epsg} or EPSG:{target_epsg}") from exc
    return _transformers[key]


def reproject_coordinates(
    coordinates: Sequence[ParsedCoordinate],
    source_epsg: int,
    target_epsg: int = CANONICAL_EPSG,
) -> list[ParsedCoordinate]:
    """Transform *coordinates* from *source_epsg* into *target_epsg*.

    A no-op copy when both codes match.  Output is rounded to the
    millimetre.

    Raises
    ------
    ProjectionError
        If either CRS is unknown or any point fails to transform.
    """
    if source_epsg == target_epsg:
        return list(coordinates)

    transformer = get_transformer(source_epsg, target_epsg)
    projected: list[ParsedCoordinate] = []
    for coord in coordinates:
        try:
            x, y = transformer.transform(coord.x, coord.y, errcheck=True)
        except ProjError as exc:
            raise ProjectionError(
                f"Point {coord.point_number or '?'} could not be transformed: {exc}"
            ) from exc
        projected.append(
            coord.model_copy(update={"x": round(x, OUTPUT_PRECISION), "y": round(y, OUTPUT_PRECISION)})
        )

    logger.debug("Reprojected %d points EPSG:%d -> EPSG:%d", len(projected), source_epsg, target_epsg)
    return projected
