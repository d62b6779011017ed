"""Tests for the outside-figure computation engine."""

from __future__ import annotations

import logging
from typing import Sequence

import pytest

from surveycore.cogo import AccuracyGrade, Observation
from surveycore.computation import (
    ComputationEngine,
    ComputationInput,
    QualityCheck,
    QualityCheckRule,
    compute_outside_figure,
)
from surveycore.config import ComputationConfig
from surveycore.models.geometry import Point

E0 = 500_000.0
N0 = 8_000_000.0


def _square(size: float = 100.0, closed: bool = True) -> list[Point]:
    pts = [
        Point(x=E0, y=N0, id="A"),
        Point(x=E0 + size, y=N0, id="B"),
        Point(x=E0 + size, y=N0 + size, id="C"),
        Point(x=E0, y=N0 + size, id="D"),
    ]
    if closed:
        pts.append(Point(x=E0, y=N0, id="A"))
    return pts


def _check(result, name: str) -> QualityCheck:
    return next(c for c in result.quality_control.checks if c.name == name)


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

class TestComputeOutsideFigure:

    def test_closed_square(self):
        result = compute_outside_figure(ComputationInput(coordinates=_square()))
        assert result.success is True
        assert result.area.area == pytest.approx(10_000)
        assert result.area.perimeter == pytest.approx(400)
        assert result.closure.is_within_tolerance is True
        assert result.accuracy.grade is AccuracyGrade.EXCELLENT
        assert result.quality_control.passed is True
        assert result.errors == []
        assert result.warnings == []
        assert result.adjusted_coordinates == []

    def test_all_checks_recorded(self):
        result = compute_outside_figure(ComputationInput(coordinates=_square()))
        names = [c.name for c in result.quality_control.checks]
        assert names == [
            "Closure Tolerance",
            "Minimum Area",
            "Accuracy Assessment",
            "Duplicate Coordinates",
            "Collinear Points",
            "Coordinate Consistency",
        ]

    def test_too_few_coordinates(self):
        result = compute_outside_figure(ComputationInput(coordinates=_square()[:2]))
        assert result.success is False
        assert result.closure is None
        assert "At least 3 coordinates" in result.errors[0]


# ---------------------------------------------------------------------------
# Failures and advisories
# ---------------------------------------------------------------------------

class TestQualityControl:

    def test_closure_failure_is_an_error(self):
        pts = _square(closed=False) + [Point(x=E0, y=N0 + 1.0)]
        result = compute_outside_figure(ComputationInput(coordinates=pts))
        assert result.success is False
        assert result.quality_control.passed is False
        assert _check(result, "Closure Tolerance").severity == "error"
        assert result.accuracy.grade is AccuracyGrade.POOR
        assert any("Accuracy below acceptable standard" in w for w in result.warnings)

    def test_outside_jurisdiction_is_only_a_warning(self):
        pts = [Point(x=0, y=0), Point(x=10, y=0), Point(x=10, y=10), Point(x=0, y=10), Point(x=0, y=0)]
        result = compute_outside_figure(ComputationInput(coordinates=pts))
        assert result.success is True
        assert result.quality_control.passed is True
        check = _check(result, "Coordinate Consistency")
        assert check.passed is False
        assert check.severity == "warning"
        assert check.message in result.warnings

    def test_collinear_points_warned(self):
        pts = _square(closed=False)
        pts.insert(1, Point(x=E0 + 50, y=N0, id="M"))
        pts.append(pts[0])
        result = compute_outside_figure(ComputationInput(coordinates=pts))
        check = _check(result, "Collinear Points")
        assert check.passed is False
        assert "A-M-B" in check.message
        assert result.success is True

    def test_duplicates_warned(self):
        pts = _square(closed=False)
        pts.insert(2, Point(x=E0 + 100.005, y=N0, id="B2"))
        pts.append(pts[0])
        result = compute_outside_figure(ComputationInput(coordinates=pts))
        check = _check(result, "Duplicate Coordinates")
        assert check.passed is False
        assert "B/B2" in check.message

    def test_closing_point_is_not_a_duplicate(self):
        result = compute_outside_figure(ComputationInput(coordinates=_square()))
        assert _check(result, "Duplicate Coordinates").passed is True

    def test_tolerance_from_config(self):
        pts = _square(closed=False) + [Point(x=E0, y=N0 + 0.1)]
        strict = compute_outside_figure(ComputationInput(coordinates=pts))
        relaxed = compute_outside_figure(
            ComputationInput(coordinates=pts), ComputationConfig(closure_tolerance=0.001)
        )
        assert strict.closure.is_within_tolerance is False
        assert relaxed.closure.is_within_tolerance is True
        assert relaxed.accuracy.grade is AccuracyGrade.ACCEPTABLE


# ---------------------------------------------------------------------------
# Adjustment
# ---------------------------------------------------------------------------

def _loop_observations() -> list[Observation]:
    return [
        Observation(from_index=0, to_index=1, distance=100),
        Observation(from_index=1, to_index=2, distance=100),
        Observation(from_index=2, to_index=3, distance=100),
        Observation(from_index=3, to_index=0, distance=100),
    ]


class TestAdjustmentStep:

    def test_adjustment_improves_closure(self):
        pts = _square(closed=False) + [Point(x=E0 + 0.05, y=N0)]
        result = compute_outside_figure(
            ComputationInput(coordinates=pts, measured_distances=_loop_observations())
        )
        check = _check(result, "Least Squares Adjustment")
        assert check.passed is True
        assert check.severity == "info"
        assert len(result.adjusted_coordinates) == 5

    def test_adjustment_failure_downgraded_to_warning(self):
        pts = _square(closed=False) + [Point(x=E0 + 0.05, y=N0)]
        broken = [
            Observation(from_index=0, to_index=1, distance=100),
            Observation(from_index=2, to_index=3, distance=100),
        ]
        result = compute_outside_figure(ComputationInput(coordinates=pts, measured_distances=broken))
        assert any(w.startswith("Least squares adjustment failed") for w in result.warnings)
        assert result.adjusted_coordinates == []
        assert all(c.name != "Least Squares Adjustment" for c in result.quality_control.checks)

    def test_no_adjustment_below_trigger(self):
        result = compute_outside_figure(
            ComputationInput(coordinates=_square(), measured_distances=_loop_observations())
        )
        assert result.adjusted_coordinates == []


# ---------------------------------------------------------------------------
# Engine registry and report
# ---------------------------------------------------------------------------

class MinimumVertexCheck(QualityCheckRule):
    @property
    def name(self) -> str:
        return "Minimum Vertices"

    def check(self, points: Sequence[Point], config: ComputationConfig) -> QualityCheck:
        return QualityCheck(name=self.name, passed=len(points) >= 6, severity="warning", message="Too few vertices")


class BrokenCheck(QualityCheckRule):
    @property
    def name(self) -> str:
        return "Broken"

    def check(self, points: Sequence[Point], config: ComputationConfig) -> QualityCheck:
        raise ValueError("bad input")


class TestEngine:

    def test_custom_check(self):
        engine = ComputationEngine()
        engine.add_check(MinimumVertexCheck())
        result = engine.compute(ComputationInput(coordinates=_square()))
        assert "Too few vertices" in result.warnings
        assert result.success is True

    def test_failing_check_is_recorded(self, caplog):
        engine = ComputationEngine()
        engine.add_check(BrokenCheck())
        with caplog.at_level(logging.WARNING, logger="surveycore.computation.engine"):
            result = engine.compute(ComputationInput(coordinates=_square()))
        broken = _check(result, "Broken")
        assert broken.passed is False
        assert broken.severity == "warning"
        assert broken.message == "Check Broken could not run: bad input"
        assert broken.message in result.warnings
        assert result.success is True
        assert result.quality_control.passed is True
        assert "Broken" in caplog.text

    def test_report_text(self):
        result = compute_outside_figure(ComputationInput(coordinates=_square()))
        report = result.to_report()
        assert "SURVEY COMPUTATION REPORT" in report
        assert "Status: PASSED" in report
        assert "1.0000 ha" in report
        assert "[PASS] Closure Tolerance" in report
        assert "Grade: EXCELLENT" in report
