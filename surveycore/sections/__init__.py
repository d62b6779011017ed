"""Sectional unit geometry generation and floor-level checks."""

from surveycore.sections.floors import (
    FloorLevelValidation,
    group_units_by_floor_level,
    validate_floor_levels,
)
from surveycore.sections.generator import (
    ParentGeometryError,
    UnitGeometryError,
    generate_sectional_geometries,
    resolve_parent,
)
from surveycore.sections.models import (
    CommonProperty,
    ExclusiveUseArea,
    ExclusiveUsePolygon,
    GeneratedUnitGeometry,
    GeometryGenerationResult,
    SectionType,
    UnitDimensions,
    UnitSpecification,
)
from surveycore.sections.screening import BoxConflict, BoxScreen

__all__ = [
    "BoxConflict",
    "BoxScreen",
    "CommonProperty",
    "ExclusiveUseArea",
    "ExclusiveUsePolygon",
    "FloorLevelValidation",
    "GeneratedUnitGeometry",
    "GeometryGenerationResult",
    "ParentGeometryError",
    "SectionType",
    "UnitDimensions",
    "UnitGeometryError",
    "UnitSpecification",
    "generate_sectional_geometries",
    "group_units_by_floor_level",
    "resolve_parent",
    "validate_floor_levels",
]
