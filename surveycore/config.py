"""Engine configuration: regulatory tolerances and computation constants.

Every tolerance the engine applies lives on :class:`ComputationConfig`
and is passed explicitly into each entry point.  Jurisdictions override
values through a project ``surveycore.json`` or ``SURVEYCORE_*``
environment variables.

Usage::

    from surveycore.config import load_config

    config = load_config("/path/to/project")
    config.closure_tolerance  # 0.0001 unless overridden
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "surveycore.json"
ENV_PREFIX = "SURVEYCORE_"

# Default UTM zone 35S envelope for coordinate consistency checks
DEFAULT_MIN_EASTING = 200_000.0
DEFAULT_MAX_EASTING = 800_000.0
DEFAULT_MIN_NORTHING = 7_500_000.0
DEFAULT_MAX_NORTHING = 8_500_000.0


class JurisdictionBounds(BaseModel):
    """Plausible coordinate envelope for the survey jurisdiction."""

    min_easting: float = DEFAULT_MIN_EASTING
    max_easting: float = DEFAULT_MAX_EASTING
    min_northing: float = DEFAULT_MIN_NORTHING
    max_northing: float = DEFAULT_MAX_NORTHING

    def contains(self, x: float, y: float) -> bool:
        return (
            self.min_easting <= x <= self.max_easting
            and self.min_northing <= y <= self.max_northing
        )


class ComputationConfig(BaseModel):
    """Tolerances and constants applied by the computation pipeline."""

    closure_tolerance: float = 0.0001
    """Maximum fractional closure error (1:10,000)."""

    excellent_ratio: float = 0.00005
    """Fractional error at or below which accuracy is graded excellent."""

    good_ratio: float = 0.0001
    """Fractional error at or below which accuracy is graded good."""

    adjustment_trigger: float = 0.001
    """Closure error in metres above which least-squares adjustment runs."""

    ring_close_tolerance: float = 0.001
    """First/last point coincidence tolerance in metres."""

    duplicate_tolerance: float = 0.01
    """Points closer than this (metres) are reported as duplicates."""

    collinear_tolerance: float = 0.001
    """Sine of the deviation angle below which three points are collinear."""

    jurisdiction_bounds: JurisdictionBounds = Field(default_factory=JurisdictionBounds)

    canonical_epsg: int = 32735
    """Canonical projected CRS (WGS 84 / UTM zone 35S)."""

    quota_precision: int = 4
    """Decimal places for participation quotas."""

    area_drift_threshold: float = 0.1
    """Declared-vs-computed area difference (m²) that triggers a warning."""

    max_floor_span: int = 50
    """Floor-level spread beyond which a scheme is flagged for review."""

    max_file_size: int = 10 * 1024 * 1024
    """Upload ceiling for coordinate files, in bytes."""

    log_level: str = "INFO"


# Environment keys mapped onto config fields
_ENV_FIELDS: dict[str, str] = {
    "CLOSURE_TOLERANCE": "closure_tolerance",
    "EXCELLENT_RATIO": "excellent_ratio",
    "GOOD_RATIO": "good_ratio",
    "ADJUSTMENT_TRIGGER": "adjustment_trigger",
    "RING_CLOSE_TOLERANCE": "ring_close_tolerance",
    "DUPLICATE_TOLERANCE": "duplicate_tolerance",
    "COLLINEAR_TOLERANCE": "collinear_tolerance",
    "CANONICAL_EPSG": "canonical_epsg",
    "QUOTA_PRECISION": "quota_precision",
    "AREA_DRIFT_THRESHOLD": "area_drift_threshold",
    "MAX_FLOOR_SPAN": "max_floor_span",
    "MAX_FILE_SIZE": "max_file_size",
    "LOG_LEVEL": "log_level",
}


def load_config(project_path: str | Path | None = None) -> ComputationConfig:
    """Load merged config: defaults -> surveycore.json -> env vars.

    Parameters
    ----------
    project_path:
        Directory that may contain ``surveycore.json``.  Skipped when
        *None*.

    Returns
    -------
    ComputationConfig
    """
    values: dict[str, Any] = {}

    if project_path is not None:
        config_json = Path(project_path) / CONFIG_FILENAME
        if config_json.is_file():
            try:
                data = json.loads(config_json.read_text(encoding="utf-8"))
                values.update(data)
            except (json.JSONDecodeError, OSError):
                logger.debug("Could not read %s", config_json, exc_info=True)

    for suffix, field_name in _ENV_FIELDS.items():
        env_val = os.environ.get(ENV_PREFIX + suffix)
        if env_val is not None:
            values[field_name] = env_val

    return ComputationConfig.model_validate(values)


def apply_log_level(config: ComputationConfig) -> None:
    """Set the package logger level from *config*."""
    level = logging.getLevelName(config.log_level.upper())
    if isinstance(level, int):
        logging.getLogger("surveycore").setLevel(level)
    else:
        logger.warning("Unknown log level %r, leaving logger unchanged", config.log_level)
