"""Tests for scheme topology validation."""

from __future__ import annotations

import json

import pytest

from surveycore.models.geometry import Point
from surveycore.sections import SectionType, UnitSpecification, generate_sectional_geometries
from surveycore.topology import (
    Priority,
    SchemeTopologyValidator,
    SectionGeometry,
    TopologyError,
    TopologyErrorType,
    TopologyOptions,
    validate_scheme_topology,
)
from surveycore.topology.rules import TopologyContext, TopologyRule

SCHEME_PARENT = "POLYGON((0 0, 40 0, 40 25, 0 25, 0 0))"
STRIP_PARENT = "POLYGON((0 0, 20 0, 20 10, 0 10, 0 0))"


def _box(number: str, x0: float, y0: float, x1: float, y1: float, floor: int = 0) -> SectionGeometry:
    return SectionGeometry(
        section_number=number,
        floor_level=floor,
        geometry=f"POLYGON(({x0} {y0}, {x1} {y0}, {x1} {y1}, {x0} {y1}, {x0} {y0}))",
    )


def _rect(x0: float, y0: float, x1: float, y1: float) -> list[Point]:
    return [Point(x=x0, y=y0), Point(x=x1, y=y0), Point(x=x1, y=y1), Point(x=x0, y=y1)]


def _scheme():
    specs = [
        UnitSpecification(section_number="A", coordinates=_rect(0, 0, 12, 25)),
        UnitSpecification(section_number="B", coordinates=_rect(12, 0, 24, 25)),
        UnitSpecification(section_number="C", coordinates=_rect(24, 0, 38, 25)),
        UnitSpecification(
            section_number="D", section_type=SectionType.COMMON, coordinates=_rect(38, 0, 40, 25)
        ),
    ]
    return generate_sectional_geometries(SCHEME_PARENT, specs).units


def _of_type(findings: list[TopologyError], kind: TopologyErrorType) -> list[TopologyError]:
    return [f for f in findings if f.type is kind]


# ---------------------------------------------------------------------------
# Valid scheme
# ---------------------------------------------------------------------------

class TestValidScheme:

    def test_scheme_is_valid(self):
        report = validate_scheme_topology(SCHEME_PARENT, _scheme())
        assert report.is_valid is True
        assert report.errors == []
        assert report.warnings == []
        assert report.summary.total_geometries == 4
        assert report.summary.total_area == pytest.approx(1000)

    def test_shared_walls_are_notices(self):
        report = validate_scheme_topology(SCHEME_PARENT, _scheme())
        assert len(report.notices) == 3
        assert all(n.type is TopologyErrorType.TOUCHING_BOUNDARY for n in report.notices)
        assert report.notices[0].affected_sections == ["A", "B"]
        assert all(s.priority is Priority.LOW for s in report.suggestions)

    def test_shared_walls_disallowed(self):
        report = validate_scheme_topology(
            SCHEME_PARENT, _scheme(), TopologyOptions(allow_shared_walls=False)
        )
        assert report.is_valid is False
        assert len(report.errors) == 3
        assert report.summary.total_errors == 3

    def test_flags_set_on_generated_units(self):
        units = _scheme()
        validate_scheme_topology(SCHEME_PARENT, units)
        assert all(u.containment_validated and u.overlap_validated for u in units)

    def test_floor_mapping_input(self):
        units = _scheme()
        report = validate_scheme_topology(SCHEME_PARENT, {0: units})
        assert report.is_valid is True
        assert report.summary.total_geometries == 4
        assert len(report.notices) == 3


# ---------------------------------------------------------------------------
# Findings
# ---------------------------------------------------------------------------

class TestFindings:

    def test_overlap(self):
        units = generate_sectional_geometries(
            STRIP_PARENT,
            [
                UnitSpecification(section_number="1", coordinates=_rect(0, 0, 10, 10)),
                UnitSpecification(section_number="2", coordinates=_rect(8, 0, 18, 10)),
            ],
        ).units
        report = validate_scheme_topology(STRIP_PARENT, units)
        overlaps = _of_type(report.errors, TopologyErrorType.OVERLAP)
        assert report.is_valid is False
        assert len(overlaps) == 1
        assert overlaps[0].area == pytest.approx(20)
        assert overlaps[0].location.type == "polygon"
        assert overlaps[0].suggestion.priority is Priority.HIGH
        assert all(u.overlap_validated is False for u in units)
        assert all(u.containment_validated is True for u in units)

    def test_containment(self):
        report = validate_scheme_topology(STRIP_PARENT, [_box("1", 12, 0, 22, 10)])
        errors = _of_type(report.errors, TopologyErrorType.CONTAINMENT)
        assert len(errors) == 1
        assert errors[0].area == pytest.approx(20)
        assert errors[0].affected_sections == ["1"]

    def test_within_tolerance_is_contained(self):
        report = validate_scheme_topology(STRIP_PARENT, [_box("1", 0, 0, 20.005, 10)])
        assert _of_type(report.errors, TopologyErrorType.CONTAINMENT) == []

    def test_gap(self):
        report = validate_scheme_topology(STRIP_PARENT, [_box("1", 0, 0, 10, 10)])
        gaps = _of_type(report.warnings, TopologyErrorType.GAP)
        assert report.is_valid is True
        assert len(gaps) == 1
        assert gaps[0].area == pytest.approx(100)
        assert gaps[0].suggestion.priority is Priority.MEDIUM

    def test_small_gap_ignored(self):
        report = validate_scheme_topology(STRIP_PARENT, [_box("1", 0, 0, 19.95, 10)])
        assert _of_type(report.warnings, TopologyErrorType.GAP) == []

    def test_self_intersection(self):
        bowtie = SectionGeometry(section_number="X", geometry="POLYGON((0 0, 10 10, 10 0, 0 10, 0 0))")
        report = validate_scheme_topology(STRIP_PARENT, [bowtie])
        errors = _of_type(report.errors, TopologyErrorType.SELF_INTERSECTION)
        assert len(errors) == 1
        assert errors[0].affected_sections == ["X"]
        assert errors[0].location.coordinates == [(5.0, 5.0)]

    def test_degenerate_polygon(self):
        flat = SectionGeometry(section_number="F", geometry="POLYGON((0 0, 5 0, 10 0, 0 0))")
        report = validate_scheme_topology(STRIP_PARENT, [flat])
        errors = _of_type(report.errors, TopologyErrorType.INVALID_GEOMETRY)
        assert len(errors) == 1
        assert "zero area" in errors[0].message

    def test_unreadable_section(self):
        broken = SectionGeometry(section_number="Z", geometry="LINESTRING(0 0, 1 1)")
        report = validate_scheme_topology(STRIP_PARENT, [broken, _box("1", 0, 0, 20, 10)])
        assert report.is_valid is False
        assert report.errors[0].type is TopologyErrorType.INVALID_GEOMETRY
        assert report.errors[0].affected_sections == ["Z"]
        assert report.summary.total_geometries == 1
        (x, y), = report.errors[0].location.coordinates
        assert 0 <= x <= 1 and 0 <= y <= 1

    def test_invalid_parent(self):
        report = validate_scheme_topology("LINESTRING(0 0, 1 1)", [_box("1", 0, 0, 1, 1)])
        assert report.is_valid is False
        assert report.errors[0].type is TopologyErrorType.INVALID_GEOMETRY
        assert len(report.errors[0].location.coordinates) == 1
        assert report.errors[0].location.description == "Parent parcel"

    def test_parent_points_too_few(self):
        report = validate_scheme_topology([Point(x=3, y=4), Point(x=5, y=6)], [_box("1", 0, 0, 1, 1)])
        assert report.is_valid is False
        assert report.errors[0].location.coordinates == [(3.0, 4.0)]


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class TestOptions:

    def test_cross_floor_overlap_reported_as_warning_by_default(self):
        units = [_box("1", 0, 0, 10, 10, floor=0), _box("2", 5, 0, 15, 10, floor=1)]
        report = validate_scheme_topology(STRIP_PARENT, units)
        overlaps = _of_type(report.warnings, TopologyErrorType.OVERLAP)
        assert report.is_valid is True
        assert len(overlaps) == 1
        assert overlaps[0].area == pytest.approx(50)
        assert "(floors 0 and 1)" in overlaps[0].message

    def test_cross_floor_overlap_can_be_ignored(self):
        units = [_box("1", 0, 0, 10, 10, floor=0), _box("2", 5, 0, 15, 10, floor=1)]
        report = validate_scheme_topology(
            STRIP_PARENT, units, TopologyOptions(cross_floor_overlaps=False)
        )
        assert _of_type(report.findings(), TopologyErrorType.OVERLAP) == []

    def test_disabled_checks(self):
        options = TopologyOptions(check_gaps=False, check_containment=False)
        report = validate_scheme_topology(STRIP_PARENT, [_box("1", 12, 0, 22, 10)], options)
        assert report.findings() == []

    def test_point_touch_when_touching_not_allowed(self):
        parent = "POLYGON((0 0, 20 0, 20 20, 0 20, 0 0))"
        units = [_box("1", 0, 0, 10, 10), _box("2", 10, 10, 20, 20)]
        report = validate_scheme_topology(
            parent, units, TopologyOptions(allow_touching=False, check_gaps=False)
        )
        touches = [w for w in report.warnings if "touch at a point" in w.message]
        assert len(touches) == 1
        assert report.is_valid is True

    def test_parent_boundary_contact_when_touching_not_allowed(self):
        report = validate_scheme_topology(
            STRIP_PARENT, [_box("1", 0, 0, 20, 10)], TopologyOptions(allow_touching=False)
        )
        assert any("parent boundary" in w.message for w in report.warnings)


# ---------------------------------------------------------------------------
# Registry and output
# ---------------------------------------------------------------------------

class MaxSectionsRule(TopologyRule):
    @property
    def name(self) -> str:
        return "max_sections"

    def check(self, context: TopologyContext) -> list[TopologyError]:
        if len(context.units) <= 2:
            return []
        return [TopologyError(
            type=TopologyErrorType.INVALID_GEOMETRY,
            severity="warning",
            message="Too many sections",
        )]


class TestValidatorOutput:

    def test_custom_rule(self):
        validator = SchemeTopologyValidator()
        validator.add_rule(MaxSectionsRule())
        report = validator.validate(SCHEME_PARENT, _scheme())
        assert any(w.message == "Too many sections" for w in report.warnings)

    def test_markdown(self):
        report = validate_scheme_topology(SCHEME_PARENT, _scheme())
        md = report.to_markdown()
        assert md.startswith("# Scheme Topology Report")
        assert "**Status:** VALID" in md
        assert "touching_boundary" in md

    def test_markdown_without_findings(self):
        report = validate_scheme_topology(STRIP_PARENT, [_box("1", 0, 0, 20, 10)])
        assert "No findings" in report.to_markdown()

    def test_json(self):
        report = validate_scheme_topology(STRIP_PARENT, [_box("1", 0, 0, 10, 10)])
        data = json.loads(report.to_json())
        assert data["is_valid"] is True
        assert data["warnings"][0]["type"] == "gap"
        assert data["validation_metadata"]["options"]["tolerance"] == 0.01
