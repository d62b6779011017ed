"""Accuracy assessment against a required closure standard."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from surveycore.cogo.traverse import TraverseClosure


class AccuracyGrade(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    POOR = "poor"


class AccuracyAssessment(BaseModel):
    meets_standard: bool
    actual_ratio: float
    """Fractional closure error achieved."""

    required_ratio: float
    """Maximum fractional error allowed."""

    message: str


def _one_in(fraction: float) -> str:
    if fraction <= 0:
        return "1:∞"
    return f"1:{round(1 / fraction):,}"


def assess_accuracy(closure: TraverseClosure, required_ratio: float) -> AccuracyAssessment:
    """Compare the achieved fractional error with *required_ratio*."""
    actual = closure.error_fraction
    if closure.total_distance <= 0:
        return AccuracyAssessment(
            meets_standard=False,
            actual_ratio=actual,
            required_ratio=required_ratio,
            message="Survey accuracy cannot be assessed: traverse has no length",
        )
    meets = actual <= required_ratio
    if meets:
        message = f"Survey accuracy {_one_in(actual)} meets required standard {_one_in(required_ratio)}"
    else:
        message = f"Survey accuracy {_one_in(actual)} does not meet required standard {_one_in(required_ratio)}"
    return AccuracyAssessment(
        meets_standard=meets,
        actual_ratio=actual,
        required_ratio=required_ratio,
        message=message,
    )


def grade_accuracy(
    closure: TraverseClosure,
    excellent_ratio: float = 0.00005,
    good_ratio: float = 0.0001,
) -> AccuracyGrade:
    """Grade a closure: excellent, good, acceptable (within tolerance), or poor."""
    fraction = closure.error_fraction
    if not closure.is_within_tolerance:
        return AccuracyGrade.POOR
    if fraction <= excellent_ratio:
        return AccuracyGrade.EXCELLENT
    if fraction <= good_ratio:
        return AccuracyGrade.GOOD
    return AccuracyGrade.ACCEPTABLE
