"""Sectional geometry generator.

Turns planned unit specifications into validated unit polygons within a
parent parcel.  Each unit is generated in isolation: one malformed
specification is reported and the rest of the scheme still generates.

Usage::

    from surveycore.sections import generate_sectional_geometries

    result = generate_sectional_geometries(parent_ring, unit_specs)
    result.units                   # generated units
    result.common_property.area    # parent minus exclusive units
    result.validation.errors       # "Unit 3: At least 3 coordinates ..."
"""

from __future__ import annotations

import logging
from typing import Sequence

from surveycore.cogo.area import polygon_area
from surveycore.config import ComputationConfig
from surveycore.models.geometry import InvalidGeometryError, Point, Ring
from surveycore.sections.models import (
    CommonProperty,
    ExclusiveUsePolygon,
    GeneratedUnitGeometry,
    GenerationValidation,
    GeometryGenerationResult,
    SectionType,
    UnitDimensions,
    UnitSpecification,
)
from surveycore.sections.screening import BoxScreen

logger = logging.getLogger(__name__)

ParentInput = Ring | str | Sequence[Point]


class ParentGeometryError(Exception):
    """Raised when the parent parcel is not a single polygon."""


class UnitGeometryError(Exception):
    """Raised when one unit specification cannot be turned into geometry."""


def resolve_parent(parent: ParentInput) -> Ring:
    """Accept a ring, a WKT polygon or a point sequence as the parent parcel."""
    try:
        if isinstance(parent, Ring):
            return parent
        if isinstance(parent, str):
            return Ring.from_wkt(parent)
        return Ring.from_points(parent)
    except InvalidGeometryError as exc:
        raise ParentGeometryError(f"Parent parcel must be a single polygon: {exc}") from exc


def _dimensions(spec: UnitSpecification, ring: Ring) -> UnitDimensions:
    box = ring.bounds
    given = spec.dimensions or UnitDimensions()
    return UnitDimensions(
        length=given.length if given.length is not None else box.width,
        width=given.width if given.width is not None else box.height,
        height=given.height,
    )


def _generate_unit(spec: UnitSpecification, config: ComputationConfig) -> GeneratedUnitGeometry:
    if len(spec.coordinates) < 3:
        raise UnitGeometryError(
            f"At least 3 coordinates are required to form a polygon, got {len(spec.coordinates)}"
        )
    try:
        ring = Ring.from_points(spec.coordinates)
    except InvalidGeometryError as exc:
        raise UnitGeometryError(str(exc)) from exc

    area = polygon_area(ring.points)
    if area <= 0:
        raise UnitGeometryError("Unit boundary encloses zero area")

    warnings: list[str] = []
    difference = None
    if spec.declared_area is not None:
        difference = area - spec.declared_area
        if abs(difference) > config.area_drift_threshold:
            logger.warning(
                "Section %s computed area %.4f m² differs from declared %.4f m²",
                spec.section_number,
                area,
                spec.declared_area,
            )
            warnings.append(
                f"Computed area {area:.4f} m² differs from declared area "
                f"{spec.declared_area:.4f} m² by {difference:+.4f} m²"
            )

    exclusive: list[ExclusiveUsePolygon] = []
    for use_area in spec.exclusive_use_areas:
        try:
            use_ring = Ring.from_points(use_area.coordinates)
        except InvalidGeometryError as exc:
            warnings.append(f"Exclusive use area '{use_area.type}' skipped: {exc}")
            continue
        exclusive.append(
            ExclusiveUsePolygon(type=use_area.type, boundary=use_ring, area=polygon_area(use_ring.points))
        )

    return GeneratedUnitGeometry(
        section_number=spec.section_number,
        section_type=spec.section_type,
        floor_level=spec.floor_level,
        boundary=ring,
        computed_area=area,
        declared_area=spec.declared_area,
        area_difference=difference,
        dimensions=_dimensions(spec, ring),
        exclusive_use_areas=exclusive,
        exclusive_use_area_total=sum(e.area for e in exclusive),
        validation_warnings=warnings,
    )


def _screen(
    parent: Ring,
    units: list[GeneratedUnitGeometry],
    validation: GenerationValidation,
) -> None:
    """Bounding-box containment and overlap pre-screen; sets unit flags."""
    screen = BoxScreen()

    outside = set(screen.outside_parent(parent.bounds, units))
    if outside:
        validation.errors.append(
            "Units not contained within parent parcel: " + ", ".join(sorted(outside))
        )

    overlapping: set[str] = set()
    for conflict in screen.detect(units):
        if conflict.same_floor:
            overlapping.update((conflict.section_a, conflict.section_b))
            validation.errors.append(f"Overlapping units detected: {conflict.message}")
        else:
            validation.warnings.append(f"Stacked units: {conflict.message}")

    for unit in units:
        unit.containment_validated = unit.section_number not in outside
        unit.overlap_validated = unit.section_number not in overlapping
        if not unit.containment_validated:
            unit.validation_errors.append("Bounding box extends beyond parent parcel")
        if not unit.overlap_validated:
            unit.validation_errors.append("Bounding box overlaps another unit on the same floor")

    validation.all_contained = not outside
    validation.no_overlaps = not overlapping


def generate_sectional_geometries(
    parent_parcel: ParentInput,
    units: Sequence[UnitSpecification],
    config: ComputationConfig | None = None,
) -> GeometryGenerationResult:
    """Generate unit geometries within a parent parcel.

    Parameters
    ----------
    parent_parcel:
        Parent parcel as a :class:`Ring`, WKT ``POLYGON`` or points.
    units:
        Planned unit specifications.
    config:
        Tolerances to apply.

    Returns
    -------
    GeometryGenerationResult
        ``success`` is False when any unit failed or the pre-screen
        found containment or same-floor overlap problems.  A parent that
        is not a polygon yields a failure with no units.
    """
    config = config or ComputationConfig()
    validation = GenerationValidation()

    try:
        parent = resolve_parent(parent_parcel)
    except ParentGeometryError as exc:
        validation.errors.append(str(exc))
        return GeometryGenerationResult(success=False, validation=validation)

    generated: list[GeneratedUnitGeometry] = []
    for spec in units:
        try:
            unit = _generate_unit(spec, config)
        except UnitGeometryError as exc:
            logger.debug("Section %s skipped: %s", spec.section_number, exc)
            validation.errors.append(f"Unit {spec.section_number}: {exc}")
            continue
        generated.append(unit)
        validation.warnings.extend(
            f"Unit {unit.section_number}: {w}" for w in unit.validation_warnings
        )

    _screen(parent, generated, validation)

    parent_area = polygon_area(parent.points)
    unit_total = sum(u.computed_area for u in generated if u.section_type is not SectionType.COMMON)
    common_area = parent_area - unit_total
    if common_area < 0:
        validation.warnings.append(
            f"Unit areas exceed parent parcel area by {-common_area:.4f} m²"
        )
        common_area = 0.0

    logger.info(
        "Generated %d of %d units, common property %.4f m²",
        len(generated),
        len(units),
        common_area,
    )
    return GeometryGenerationResult(
        success=not validation.errors,
        units=generated,
        common_property=CommonProperty(area=common_area),
        validation=validation,
    )
