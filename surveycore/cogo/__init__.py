"""Coordinate geometry (COGO) primitives.

Usage::

    from surveycore.cogo import compute_area, compute_closure

    closure = compute_closure(points, tolerance=0.0001)
    area = compute_area(points, unit="hectares")
"""

from surveycore.cogo.accuracy import AccuracyAssessment, AccuracyGrade, assess_accuracy, grade_accuracy
from surveycore.cogo.adjustment import (
    AdjustmentError,
    AdjustmentResult,
    Observation,
    least_squares_adjustment,
)
from surveycore.cogo.area import AreaResult, AreaUnit, compute_area, convert_area, polygon_area
from surveycore.cogo.traverse import (
    BearingDistance,
    TraverseClosure,
    bearing_distance,
    calculate_coordinates,
    calculate_interior_angles,
    compute_closure,
    sum_interior_angles,
    validate_traverse_angles,
)
from surveycore.cogo.units import (
    AngleUnit,
    DistanceUnit,
    convert_distance,
    format_bearing,
    from_degrees,
    normalize_bearing,
    to_degrees,
)

__all__ = [
    "AccuracyAssessment",
    "AccuracyGrade",
    "AdjustmentError",
    "AdjustmentResult",
    "AngleUnit",
    "AreaResult",
    "AreaUnit",
    "BearingDistance",
    "DistanceUnit",
    "Observation",
    "TraverseClosure",
    "assess_accuracy",
    "bearing_distance",
    "calculate_coordinates",
    "calculate_interior_angles",
    "compute_area",
    "compute_closure",
    "convert_area",
    "convert_distance",
    "format_bearing",
    "from_degrees",
    "grade_accuracy",
    "least_squares_adjustment",
    "normalize_bearing",
    "polygon_area",
    "sum_interior_angles",
    "to_degrees",
    "validate_traverse_angles",
]
