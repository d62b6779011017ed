"""Format routing for coordinate uploads.

Delimited text and GeoJSON are read here.  Shapefile and KML readers
are external collaborators plugged in with :func:`register_parser`.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from surveycore.config import ComputationConfig
from surveycore.models.geometry import ParsedCoordinate, Ring
from surveycore.parsing.delimited import (
    CoordinateParseResult,
    DelimitedParseOptions,
    parse_delimited_coordinates,
)
from surveycore.parsing.formats import FileFormat, validate_coordinate_file
from surveycore.parsing.geojson import parse_geojson_coordinates

logger = logging.getLogger(__name__)

Parser = Callable[[str], CoordinateParseResult]

_parsers: dict[FileFormat, Parser] = {
    FileFormat.GEOJSON: parse_geojson_coordinates,
}


def register_parser(file_format: FileFormat | str, parser: Parser) -> None:
    """Plug in a reader for *file_format*, replacing any existing one."""
    _parsers[FileFormat(file_format)] = parser


def parse_coordinate_file(
    filename: str,
    content: str,
    options: DelimitedParseOptions | None = None,
    config: ComputationConfig | None = None,
) -> CoordinateParseResult:
    """Validate *filename* and parse *content* with the matching reader."""
    config = config or ComputationConfig()
    check = validate_coordinate_file(filename, len(content.encode("utf-8")), config.max_file_size)
    if not check.valid or check.format is None:
        return CoordinateParseResult(format="unknown", errors=[check.error or "Invalid file"])

    if check.format is FileFormat.CSV:
        return parse_delimited_coordinates(content, options, config)

    parser = _parsers.get(check.format)
    if parser is None:
        logger.debug("No parser registered for %s", check.format.value)
        return CoordinateParseResult(
            format=check.format.value,
            errors=[f"No parser registered for format '{check.format.value}'"],
        )
    return parser(content)


def coordinates_to_ring(coordinates: Sequence[ParsedCoordinate]) -> Ring:
    """Closed ring through *coordinates*; raises ``InvalidGeometryError`` below 3."""
    return Ring.from_points(coordinates)
