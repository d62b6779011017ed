"""surveycore — survey computation and validation for sectional title schemes."""

__version__ = "1.0.0"

from surveycore.api.facade import SurveyEngine
from surveycore.cogo import (
    AreaResult,
    TraverseClosure,
    bearing_distance,
    compute_area,
    compute_closure,
    least_squares_adjustment,
)
from surveycore.computation import ComputationInput, ComputationResult, compute_outside_figure
from surveycore.config import ComputationConfig, load_config
from surveycore.models import BoundingBox, InvalidGeometryError, ParsedCoordinate, Point, Ring
from surveycore.parsing import (
    DelimitedParseOptions,
    parse_coordinate_file,
    parse_delimited_coordinates,
    reproject_coordinates,
    validate_coordinate_file,
)
from surveycore.quota import (
    UnitAreaData,
    adjust_quota,
    calculate_participation_quotas,
    validate_quota_sum,
)
from surveycore.sealing import SurveyFacts, seal_survey_plan, verify_seal
from surveycore.sections import (
    GeneratedUnitGeometry,
    SectionType,
    UnitSpecification,
    generate_sectional_geometries,
)
from surveycore.topology import SchemeValidationReport, TopologyOptions, validate_scheme_topology

__all__ = [
    "AreaResult",
    "BoundingBox",
    "ComputationConfig",
    "ComputationInput",
    "ComputationResult",
    "DelimitedParseOptions",
    "GeneratedUnitGeometry",
    "InvalidGeometryError",
    "ParsedCoordinate",
    "Point",
    "Ring",
    "SchemeValidationReport",
    "SectionType",
    "SurveyEngine",
    "SurveyFacts",
    "TopologyOptions",
    "TraverseClosure",
    "UnitAreaData",
    "UnitSpecification",
    "adjust_quota",
    "bearing_distance",
    "calculate_participation_quotas",
    "compute_area",
    "compute_closure",
    "compute_outside_figure",
    "generate_sectional_geometries",
    "least_squares_adjustment",
    "load_config",
    "parse_coordinate_file",
    "parse_delimited_coordinates",
    "reproject_coordinates",
    "seal_survey_plan",
    "validate_coordinate_file",
    "validate_quota_sum",
    "validate_scheme_topology",
    "verify_seal",
]
