"""Scheme topology validator — main entry point for topology checks.

Usage::

    from surveycore.topology import SchemeTopologyValidator

    v = SchemeTopologyValidator()
    report = v.validate(parent_ring, generated_units)
    report.is_valid
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Sequence

from shapely import wkt as shapely_wkt
from shapely.errors import ShapelyError

from surveycore.models.geometry import InvalidGeometryError, Ring, as_point
from surveycore.sections.generator import ParentGeometryError, ParentInput, resolve_parent
from surveycore.sections.models import GeneratedUnitGeometry
from surveycore.topology.models import (
    ErrorLocation,
    SectionGeometry,
    TopologyError,
    TopologyErrorType,
    TopologyOptions,
)
from surveycore.topology.report import SchemeValidationReport, TopologySummary, ValidationMetadata
from surveycore.topology.rules import TopologyContext, TopologyRule, UnitShape, default_rules
from surveycore.topology.rules.base import point_location
from surveycore.topology.suggestions import suggest

logger = logging.getLogger(__name__)

UnitInput = (
    Sequence[GeneratedUnitGeometry | SectionGeometry]
    | Mapping[int, Sequence[GeneratedUnitGeometry | SectionGeometry]]
)


def _flatten(units: UnitInput) -> list[GeneratedUnitGeometry | SectionGeometry]:
    if isinstance(units, Mapping):
        return [u for level in sorted(units) for u in units[level]]
    return list(units)


def _to_shape(unit: GeneratedUnitGeometry | SectionGeometry) -> UnitShape:
    if isinstance(unit, GeneratedUnitGeometry):
        return UnitShape(unit.section_number, unit.floor_level, unit.boundary.to_shapely(), unit)
    ring = Ring.from_wkt(unit.geometry)
    return UnitShape(unit.section_number, unit.floor_level, ring.to_shapely(), unit)


def _fallback_location(source: Any, description: str) -> ErrorLocation:
    """A representative point for input that never became a ring."""
    if isinstance(source, str):
        try:
            return point_location(shapely_wkt.loads(source), description)
        except ShapelyError:
            return ErrorLocation(description=description)
    points = source.points if isinstance(source, Ring) else list(source)
    if not points:
        return ErrorLocation(description=description)
    first = as_point(points[0])
    return ErrorLocation(coordinates=[(first.x, first.y)], description=description)


class SchemeTopologyValidator:
    """Topology engine with pluggable rule registry.

    Loads default rules on init.  Additional rules can be registered
    via :meth:`add_rule`.
    """

    def __init__(self, options: TopologyOptions | None = None) -> None:
        self.options = options or TopologyOptions()
        self.rules: list[TopologyRule] = default_rules()

    def add_rule(self, rule: TopologyRule) -> None:
        """Register an additional topology rule."""
        self.rules.append(rule)

    def validate(self, parent_parcel: ParentInput, units: UnitInput) -> SchemeValidationReport:
        """Validate units against each other and the parent parcel.

        Parameters
        ----------
        parent_parcel:
            Parent parcel as a :class:`Ring`, WKT or points.
        units:
            Generated units, re-hydrated :class:`SectionGeometry`
            records, or either grouped by floor level.

        Returns
        -------
        SchemeValidationReport
            Generated units passed in have their ``containment_validated``
            and ``overlap_validated`` flags set from the result.
        """
        started = time.perf_counter()
        opts = self.options
        findings: list[TopologyError] = []

        try:
            parent = resolve_parent(parent_parcel).to_shapely()
        except ParentGeometryError as exc:
            findings.append(TopologyError(
                type=TopologyErrorType.INVALID_GEOMETRY,
                message=str(exc),
                location=_fallback_location(parent_parcel, "Parent parcel"),
            ))
            return self._build_report(findings, [], started)

        shapes: list[UnitShape] = []
        for unit in _flatten(units):
            try:
                shapes.append(_to_shape(unit))
            except InvalidGeometryError as exc:
                findings.append(TopologyError(
                    type=TopologyErrorType.INVALID_GEOMETRY,
                    message=f"Section {unit.section_number}: {exc}",
                    affected_sections=[unit.section_number],
                    location=_fallback_location(
                        unit.geometry if isinstance(unit, SectionGeometry) else unit.boundary,
                        f"Section {unit.section_number}",
                    ),
                ))

        context = TopologyContext(parent, shapes, opts)
        for rule in self.rules:
            if not rule.enabled(opts):
                continue
            try:
                findings.extend(rule.check(context))
            except ShapelyError:
                logger.warning("Topology rule %s failed", rule.name, exc_info=True)

        report = self._build_report(findings, shapes, started)
        self._update_flags(shapes, report)
        logger.info(
            "Validated %d sections: %d errors, %d warnings",
            len(shapes),
            report.summary.total_errors,
            report.summary.total_warnings,
        )
        return report

    def _build_report(
        self,
        findings: list[TopologyError],
        shapes: list[UnitShape],
        started: float,
    ) -> SchemeValidationReport:
        for finding in findings:
            finding.suggestion = suggest(finding)

        errors = [f for f in findings if f.severity == "error"]
        warnings = [f for f in findings if f.severity == "warning"]
        notices = [f for f in findings if f.severity == "info"]

        return SchemeValidationReport(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            notices=notices,
            suggestions=[f.suggestion for f in findings if f.suggestion is not None],
            summary=TopologySummary(
                total_errors=len(errors),
                total_warnings=len(warnings),
                total_notices=len(notices),
                total_geometries=len(shapes),
                total_area=sum(s.raw.area for s in shapes),
            ),
            validation_metadata=ValidationMetadata(
                duration_ms=(time.perf_counter() - started) * 1000,
                options=self.options,
            ),
        )

    @staticmethod
    def _update_flags(shapes: list[UnitShape], report: SchemeValidationReport) -> None:
        outside: set[str] = set()
        overlapping: set[str] = set()
        for error in report.errors:
            if error.type is TopologyErrorType.CONTAINMENT:
                outside.update(error.affected_sections)
            elif error.type is TopologyErrorType.OVERLAP:
                overlapping.update(error.affected_sections)

        for shape in shapes:
            source: Any = shape.source
            if isinstance(source, GeneratedUnitGeometry):
                source.containment_validated = shape.section_number not in outside
                source.overlap_validated = shape.section_number not in overlapping


def validate_scheme_topology(
    parent_parcel: ParentInput,
    unit_geometries: UnitInput,
    options: TopologyOptions | None = None,
) -> SchemeValidationReport:
    """Validate a scheme with the default rule set."""
    return SchemeTopologyValidator(options).validate(parent_parcel, unit_geometries)
