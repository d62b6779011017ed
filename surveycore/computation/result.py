"""Computation input and result models, and the text computation report."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from surveycore.cogo.accuracy import AccuracyAssessment, AccuracyGrade
from surveycore.cogo.adjustment import Observation
from surveycore.cogo.area import AreaResult, convert_area
from surveycore.cogo.traverse import TraverseClosure
from surveycore.computation.checks import QualityCheck
from surveycore.models.geometry import Point


class ComputationInput(BaseModel):
    """Coordinates of an outside figure plus optional field measurements."""

    coordinates: list[Point] = Field(default_factory=list)
    survey_method: str | None = None
    control_points: list[Point] = Field(default_factory=list)
    measured_distances: list[Observation] = Field(default_factory=list)
    """Measured legs referencing ``coordinates`` by index."""


class QualityControl(BaseModel):
    passed: bool = False
    checks: list[QualityCheck] = Field(default_factory=list)


class AccuracySummary(BaseModel):
    grade: AccuracyGrade = AccuracyGrade.POOR
    assessment: AccuracyAssessment | None = None


class ComputationResult(BaseModel):
    """Full outcome of an outside-figure computation."""

    success: bool = False
    closure: TraverseClosure | None = None
    area: AreaResult | None = None
    adjusted_coordinates: list[Point] = Field(default_factory=list)
    """Present only when least-squares adjustment ran successfully."""

    accuracy: AccuracySummary = Field(default_factory=AccuracySummary)
    quality_control: QualityControl = Field(default_factory=QualityControl)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_report(self) -> str:
        """Render the plain-text computation report."""
        lines: list[str] = []
        lines.append("SURVEY COMPUTATION REPORT")
        lines.append("=" * 40)
        lines.append(f"Computed: {self.computed_at.strftime('%Y-%m-%d %H:%M UTC')}")
        lines.append(f"Status: {'PASSED' if self.success and self.quality_control.passed else 'FAILED'}")
        lines.append("")

        if self.closure is not None:
            c = self.closure
            lines.append("CLOSURE")
            lines.append("-" * 40)
            lines.append(f"Closure error:    {c.closure_error:.4f} m")
            lines.append(f"Closure ratio:    {c.ratio_label()}")
            lines.append(f"Closure bearing:  {c.closure_bearing:.4f}°")
            lines.append(f"Total distance:   {c.total_distance:.3f} m")
            lines.append(f"Within tolerance: {'Yes' if c.is_within_tolerance else 'No'}")
            lines.append("")

        if self.area is not None:
            sq_m = self.area.area
            lines.append("AREA")
            lines.append("-" * 40)
            lines.append(f"Area:      {sq_m:.4f} m²")
            lines.append(f"Area:      {convert_area(sq_m, 'hectares'):.4f} ha")
            lines.append(f"Perimeter: {self.area.perimeter:.3f} m")
            lines.append("")

        lines.append("ACCURACY")
        lines.append("-" * 40)
        lines.append(f"Grade: {self.accuracy.grade.value.upper()}")
        if self.accuracy.assessment is not None:
            lines.append(self.accuracy.assessment.message)
        lines.append("")

        if self.quality_control.checks:
            lines.append("QUALITY CONTROL")
            lines.append("-" * 40)
            for check in self.quality_control.checks:
                mark = "PASS" if check.passed else "FAIL"
                lines.append(f"[{mark}] {check.name}: {check.message}")
            lines.append("")

        if self.errors:
            lines.append("ERRORS")
            lines.append("-" * 40)
            lines.extend(f"- {e}" for e in self.errors)
            lines.append("")

        if self.warnings:
            lines.append("WARNINGS")
            lines.append("-" * 40)
            lines.extend(f"- {w}" for w in self.warnings)
            lines.append("")

        return "\n".join(lines)
