"""Coordinate ingestion: file validation, notation parsing, reprojection."""

from surveycore.parsing.delimited import (
    CoordinateParseResult,
    DelimitedParseOptions,
    parse_delimited_coordinates,
)
from surveycore.parsing.formats import FileFormat, FileValidation, validate_coordinate_file
from surveycore.parsing.geojson import parse_geojson_coordinates
from surveycore.parsing.notation import (
    CoordinateFormat,
    CoordinateFormatError,
    parse_decimal,
    parse_dms,
    parse_utm,
)
from surveycore.parsing.projection import ProjectionError, reproject_coordinates
from surveycore.parsing.reader import coordinates_to_ring, parse_coordinate_file, register_parser

__all__ = [
    "CoordinateFormat",
    "CoordinateFormatError",
    "CoordinateParseResult",
    "DelimitedParseOptions",
    "FileFormat",
    "FileValidation",
    "ProjectionError",
    "coordinates_to_ring",
    "parse_coordinate_file",
    "parse_decimal",
    "parse_delimited_coordinates",
    "parse_dms",
    "parse_geojson_coordinates",
    "parse_utm",
    "register_parser",
    "reproject_coordinates",
    "validate_coordinate_file",
]
