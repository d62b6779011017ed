"""Scheme topology validation on true polygon geometry."""

from surveycore.topology.models import (
    CorrectionSuggestion,
    ErrorLocation,
    Priority,
    SectionGeometry,
    TopologyError,
    TopologyErrorType,
    TopologyOptions,
)
from surveycore.topology.report import SchemeValidationReport, TopologySummary
from surveycore.topology.suggestions import suggest
from surveycore.topology.validator import SchemeTopologyValidator, validate_scheme_topology

__all__ = [
    "CorrectionSuggestion",
    "ErrorLocation",
    "Priority",
    "SchemeTopologyValidator",
    "SchemeValidationReport",
    "SectionGeometry",
    "TopologyError",
    "TopologyErrorType",
    "TopologyOptions",
    "TopologySummary",
    "suggest",
    "validate_scheme_topology",
]
