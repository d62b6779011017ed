"""Delimited (CSV-style) coordinate file parser.

Usage::

    from surveycore.parsing import DelimitedParseOptions, parse_delimited_coordinates

    result = parse_delimited_coordinates(
        text,
        DelimitedParseOptions(x_column="easting", y_column="northing", id_column="point"),
    )
    result.coordinates  # every row that parsed
    result.errors       # "Line 7: Invalid northing: 'abc'"
"""

from __future__ import annotations

import csv
import logging

from pydantic import BaseModel, Field

from surveycore.cogo.traverse import TraverseClosure, compute_closure
from surveycore.config import ComputationConfig
from surveycore.models.geometry import ParsedCoordinate, is_ring_closed
from surveycore.parsing.notation import (
    CoordinateFormat,
    CoordinateFormatError,
    parse_decimal,
    parse_dms,
    parse_utm,
)

logger = logging.getLogger(__name__)

Column = int | str


class DelimitedParseOptions(BaseModel):
    """Column layout and notation of a delimited coordinate file."""

    has_header: bool = True
    x_column: Column = 0
    y_column: Column = 1
    z_column: Column | None = None
    id_column: Column | None = None
    description_column: Column | None = None
    coordinate_format: CoordinateFormat = CoordinateFormat.DECIMAL
    delimiter: str = ","
    skip_rows: int = 0
    """Non-empty lines discarded before the header (or first data row)."""


class CoordinateParseResult(BaseModel):
    """Outcome of parsing a coordinate file."""

    success: bool = False
    coordinates: list[ParsedCoordinate] = Field(default_factory=list)
    format: str = "csv"
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    closure_result: TraverseClosure | None = None


def _resolve_column(column: Column | None, header: list[str] | None, label: str) -> int | None:
    if column is None or isinstance(column, int):
        return column
    if header is None:
        raise CoordinateFormatError(f"{label} column {column!r} is named but the file has no header row")
    wanted = column.strip().lower()
    for index, name in enumerate(header):
        if name.strip().lower() == wanted:
            return index
    raise CoordinateFormatError(f"{label} column {column!r} not found in header {header}")


def _cell(parts: list[str], index: int | None) -> str | None:
    if index is None or index >= len(parts):
        return None
    value = parts[index].strip()
    return value or None


def _read_row(
    parts: list[str],
    columns: dict[str, int | None],
    options: DelimitedParseOptions,
    ordinal: int,
) -> ParsedCoordinate:
    x_cell = _cell(parts, columns["x"])
    y_cell = _cell(parts, columns["y"])
    if x_cell is None or y_cell is None:
        raise CoordinateFormatError("Missing X or Y coordinate")

    fmt = options.coordinate_format
    if fmt is CoordinateFormat.DECIMAL:
        x, y = parse_decimal(y_cell, x_cell)
    elif fmt is CoordinateFormat.UTM:
        x, y, _zone = parse_utm(x_cell, y_cell)
    else:
        x, y = parse_dms(f"{y_cell} {x_cell}")

    z = None
    z_cell = _cell(parts, columns["z"])
    if z_cell is not None:
        try:
            z = float(z_cell)
        except ValueError as exc:
            raise CoordinateFormatError(f"Invalid elevation: {z_cell!r}") from exc

    point_number = _cell(parts, columns["id"]) or str(ordinal)
    return ParsedCoordinate(
        x=x,
        y=y,
        id=point_number,
        z=z,
        point_number=point_number,
        description=_cell(parts, columns["description"]),
        original_format=fmt.value,
    )


def parse_delimited_coordinates(
    content: str,
    options: DelimitedParseOptions | None = None,
    config: ComputationConfig | None = None,
) -> CoordinateParseResult:
    """Parse delimited text into coordinates, isolating failures per line.

    Rows that fail are reported as ``"Line N: <reason>"`` (N is the
    physical line in *content*) and the remaining rows are still
    returned.  With three or more coordinates the ring is checked for
    closure; problems found there are warnings, never errors.
    """
    options = options or DelimitedParseOptions()
    config = config or ComputationConfig()
    result = CoordinateParseResult()

    numbered = [
        (number, line)
        for number, line in enumerate(content.splitlines(), start=1)
        if line.strip()
    ]
    numbered = numbered[options.skip_rows:]

    header: list[str] | None = None
    if options.has_header and numbered:
        header_line = numbered.pop(0)[1]
        header = next(csv.reader([header_line], delimiter=options.delimiter))

    try:
        columns = {
            "x": _resolve_column(options.x_column, header, "X"),
            "y": _resolve_column(options.y_column, header, "Y"),
            "z": _resolve_column(options.z_column, header, "Z"),
            "id": _resolve_column(options.id_column, header, "ID"),
            "description": _resolve_column(options.description_column, header, "Description"),
        }
    except CoordinateFormatError as exc:
        result.errors.append(str(exc))
        return result

    reader = csv.reader((line for _, line in numbered), delimiter=options.delimiter)
    for ordinal, ((number, _line), parts) in enumerate(zip(numbered, reader), start=1):
        try:
            result.coordinates.append(_read_row(parts, columns, options, ordinal))
        except CoordinateFormatError as exc:
            result.errors.append(f"Line {number}: {exc}")

    if len(result.coordinates) >= 3:
        if not is_ring_closed(result.coordinates, config.ring_close_tolerance):
            result.warnings.append("Polygon is not closed. First and last points do not match.")
        closure = compute_closure(result.coordinates, config.closure_tolerance)
        result.closure_result = closure
        if not closure.is_within_tolerance:
            result.warnings.append(
                f"Closure error {closure.closure_error:.4f} m ({closure.ratio_label()}) "
                f"exceeds tolerance 1:{round(1 / config.closure_tolerance):,}"
            )

    result.success = not result.errors
    logger.info(
        "Parsed %d coordinates (%d errors, %d warnings)",
        len(result.coordinates),
        len(result.errors),
        len(result.warnings),
    )
    return result
