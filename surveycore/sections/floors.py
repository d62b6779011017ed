"""Floor-level grouping and consistency checks."""

from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from pydantic import BaseModel, Field

from surveycore.config import ComputationConfig
from surveycore.sections.models import GeneratedUnitGeometry
from surveycore.sections.screening import BoxScreen


class FloorLevelValidation(BaseModel):
    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def group_units_by_floor_level(
    units: Sequence[GeneratedUnitGeometry],
) -> dict[int, list[GeneratedUnitGeometry]]:
    """Units keyed by floor level, lowest floor first."""
    groups: dict[int, list[GeneratedUnitGeometry]] = defaultdict(list)
    for unit in units:
        groups[unit.floor_level].append(unit)
    return dict(sorted(groups.items()))


def validate_floor_levels(
    units: Sequence[GeneratedUnitGeometry],
    config: ComputationConfig | None = None,
) -> FloorLevelValidation:
    """Same-floor bounding-box overlaps are errors; an unusual floor span is a warning."""
    config = config or ComputationConfig()
    result = FloorLevelValidation()
    groups = group_units_by_floor_level(units)
    screen = BoxScreen()

    for level, members in groups.items():
        for conflict in screen.detect(members):
            result.errors.append(f"Floor {level}: {conflict.message}")

    if groups:
        span = max(groups) - min(groups)
        if span > config.max_floor_span:
            result.warnings.append(
                f"Floor levels span {span} floors ({min(groups)} to {max(groups)}); please verify"
            )

    result.is_valid = not result.errors
    return result
