"""Outside-figure computation engine and quality-control checks."""

from surveycore.computation.checks import (
    CollinearPointsCheck,
    CoordinateConsistencyCheck,
    DuplicateCoordinatesCheck,
    QualityCheck,
    QualityCheckRule,
)
from surveycore.computation.engine import ComputationEngine, compute_outside_figure
from surveycore.computation.result import ComputationInput, ComputationResult

__all__ = [
    "CollinearPointsCheck",
    "ComputationEngine",
    "ComputationInput",
    "ComputationResult",
    "CoordinateConsistencyCheck",
    "DuplicateCoordinatesCheck",
    "QualityCheck",
    "QualityCheckRule",
    "compute_outside_figure",
]
