"""Outside-figure computation: closure, area, adjustment and QC.

Usage::

    from surveycore.computation import ComputationEngine, ComputationInput

    engine = ComputationEngine()
    result = engine.compute(ComputationInput(coordinates=points))
    print(result.to_report())
"""

from __future__ import annotations

import logging

from surveycore.cogo.accuracy import assess_accuracy, grade_accuracy
from surveycore.cogo.adjustment import least_squares_adjustment
from surveycore.cogo.area import compute_area
from surveycore.cogo.traverse import compute_closure
from surveycore.computation.checks import QualityCheck, QualityCheckRule, default_checks
from surveycore.computation.result import (
    AccuracySummary,
    ComputationInput,
    ComputationResult,
    QualityControl,
)
from surveycore.config import ComputationConfig

logger = logging.getLogger(__name__)


class ComputationEngine:
    """Run the outside-figure computation with a pluggable QC registry.

    Parameters
    ----------
    config:
        Tolerances to apply.  Defaults to :class:`ComputationConfig`.
    """

    def __init__(self, config: ComputationConfig | None = None) -> None:
        self.config = config or ComputationConfig()
        self.checks: list[QualityCheckRule] = default_checks()

    def add_check(self, rule: QualityCheckRule) -> None:
        """Register an additional advisory check."""
        self.checks.append(rule)

    def compute(self, computation_input: ComputationInput) -> ComputationResult:
        """Compute closure, area, accuracy and quality control.

        Never raises: structural problems come back as ``errors`` and
        advisory findings as ``warnings``.
        """
        try:
            return self._compute(computation_input)
        except Exception as exc:
            logger.error("Computation failed unexpectedly", exc_info=True)
            return ComputationResult(success=False, errors=[f"Computation failed: {exc}"])

    def _compute(self, computation_input: ComputationInput) -> ComputationResult:
        cfg = self.config
        coords = computation_input.coordinates
        if len(coords) < 3:
            return ComputationResult(
                success=False,
                errors=[f"At least 3 coordinates are required for computation, got {len(coords)}"],
            )

        errors: list[str] = []
        warnings: list[str] = []
        checks: list[QualityCheck] = []

        # Closure
        closure = compute_closure(coords, cfg.closure_tolerance)
        tolerance_label = f"1:{round(1 / cfg.closure_tolerance):,}"
        closure_check = QualityCheck(
            name="Closure Tolerance",
            passed=closure.is_within_tolerance,
            severity="info" if closure.is_within_tolerance else "error",
            message=(
                f"Closure {closure.ratio_label()} within tolerance {tolerance_label}"
                if closure.is_within_tolerance
                else f"Closure error {closure.closure_error:.4f} m ({closure.ratio_label()}) "
                f"exceeds tolerance {tolerance_label}"
            ),
        )
        checks.append(closure_check)
        if not closure_check.passed:
            errors.append(closure_check.message)

        # Area
        area = compute_area(coords)
        area_check = QualityCheck(
            name="Minimum Area",
            passed=area.area > 0,
            severity="info" if area.area > 0 else "error",
            message=f"Area {area.area:.4f} m²" if area.area > 0 else "Computed area is zero",
        )
        checks.append(area_check)
        if not area_check.passed:
            errors.append("Invalid area computed")

        # Adjustment
        adjusted = []
        if closure.closure_error > cfg.adjustment_trigger and computation_input.measured_distances:
            outcome = least_squares_adjustment(coords, computation_input.measured_distances)
            if outcome.success:
                adjusted = outcome.points
                adjusted_closure = compute_closure(adjusted, cfg.closure_tolerance)
                improvement = closure.closure_error - adjusted_closure.closure_error
                improved = improvement > 0
                checks.append(
                    QualityCheck(
                        name="Least Squares Adjustment",
                        passed=improved,
                        severity="info" if improved else "warning",
                        message=(
                            f"Adjustment improved closure by {improvement:.6f} m"
                            if improved
                            else "Adjustment did not improve closure"
                        ),
                    )
                )
                if not improved:
                    logger.warning("Least squares adjustment did not improve closure")
                    warnings.append("Least squares adjustment did not improve closure")
            else:
                logger.warning("Least squares adjustment failed: %s", outcome.error)
                warnings.append(f"Least squares adjustment failed: {outcome.error}")

        # Accuracy
        assessment = assess_accuracy(closure, cfg.closure_tolerance)
        grade = grade_accuracy(closure, cfg.excellent_ratio, cfg.good_ratio)
        checks.append(
            QualityCheck(
                name="Accuracy Assessment",
                passed=assessment.meets_standard,
                severity="info" if assessment.meets_standard else "warning",
                message=f"Accuracy ratio: {closure.ratio_label()} ({grade.value})",
            )
        )
        if not assessment.meets_standard:
            warnings.append(f"Accuracy below acceptable standard: {grade.value}")

        # Advisory checks, isolated per rule
        for rule in self.checks:
            try:
                outcome_check = rule.check(coords, cfg)
            except Exception as exc:
                logger.warning("Check %s could not run: %s", rule.name, exc, exc_info=True)
                message = f"Check {rule.name} could not run: {exc}"
                checks.append(
                    QualityCheck(name=rule.name, passed=False, severity="warning", message=message)
                )
                warnings.append(message)
                continue
            checks.append(outcome_check)
            if not outcome_check.passed:
                warnings.append(outcome_check.message)

        qc_passed = (
            all(c.passed for c in checks if c.severity == "error")
            and closure.is_within_tolerance
            and area.area > 0
        )

        logger.info(
            "Computed figure of %d points: area %.4f m², closure %s, grade %s",
            len(coords),
            area.area,
            closure.ratio_label(),
            grade.value,
        )
        return ComputationResult(
            success=not errors,
            closure=closure,
            area=area,
            adjusted_coordinates=adjusted,
            accuracy=AccuracySummary(grade=grade, assessment=assessment),
            quality_control=QualityControl(passed=qc_passed, checks=checks),
            errors=errors,
            warnings=warnings,
        )


def compute_outside_figure(
    computation_input: ComputationInput,
    config: ComputationConfig | None = None,
) -> ComputationResult:
    """Compute an outside figure with the default check registry."""
    return ComputationEngine(config).compute(computation_input)
