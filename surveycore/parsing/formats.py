"""Upload pre-validation: extension allow-list and size ceiling."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath

from pydantic import BaseModel

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB


class FileFormat(str, Enum):
    CSV = "csv"
    SHAPEFILE = "shapefile"
    KML = "kml"
    GEOJSON = "geojson"


_EXTENSIONS: dict[str, FileFormat] = {
    "csv": FileFormat.CSV,
    "shp": FileFormat.SHAPEFILE,
    "zip": FileFormat.SHAPEFILE,
    "kml": FileFormat.KML,
    "geojson": FileFormat.GEOJSON,
    "json": FileFormat.GEOJSON,
}


class FileValidation(BaseModel):
    valid: bool
    format: FileFormat | None = None
    error: str | None = None


def validate_coordinate_file(filename: str, size: int, max_size: int = MAX_FILE_SIZE) -> FileValidation:
    """Check a coordinate upload before any content is parsed."""
    if size > max_size:
        return FileValidation(
            valid=False,
            error=f"File size {size} bytes exceeds maximum of {max_size // (1024 * 1024)} MB",
        )
    extension = PurePath(filename).suffix.lower().lstrip(".")
    file_format = _EXTENSIONS.get(extension)
    if file_format is None:
        allowed = ", ".join(sorted(_EXTENSIONS))
        return FileValidation(
            valid=False,
            error=f"Unsupported file type '.{extension}'. Allowed: {allowed}",
        )
    return FileValidation(valid=True, format=file_format)
