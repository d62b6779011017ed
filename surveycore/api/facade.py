"""SurveyEngine — the single unified entry point for survey computations.

Usage::

    from surveycore import SurveyEngine

    engine = SurveyEngine()
    parsed = engine.parse_coordinates("boundary.csv", text)
    figure = engine.compute(parsed.coordinates)
    generated = engine.generate_geometries(parent, unit_specs)
    quotas = engine.calculate_quotas(generated)
    report = engine.validate_topology(parent, generated.units)
    seal = engine.seal(generated, figure.area.area)
    engine.verify_seal(seal.facts, seal.seal_hash, seal.sealed_at)
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Sequence

from surveycore.cogo.adjustment import Observation
from surveycore.computation.engine import ComputationEngine
from surveycore.computation.result import ComputationInput, ComputationResult
from surveycore.config import ComputationConfig, apply_log_level, load_config
from surveycore.models.geometry import ParsedCoordinate, Point
from surveycore.parsing.delimited import CoordinateParseResult, DelimitedParseOptions
from surveycore.parsing.projection import reproject_coordinates
from surveycore.parsing.reader import parse_coordinate_file
from surveycore.quota.calculator import adjust_quota, calculate_participation_quotas
from surveycore.quota.models import QuotaCalculationResult, UnitAreaData
from surveycore.sealing.service import (
    SealResult,
    SealVerification,
    SurveyFacts,
    facts_from_generation,
    seal_survey_plan,
    verify_seal,
)
from surveycore.sections.generator import ParentInput, generate_sectional_geometries
from surveycore.sections.models import GeometryGenerationResult, UnitSpecification
from surveycore.topology.models import TopologyOptions
from surveycore.topology.report import SchemeValidationReport
from surveycore.topology.validator import UnitInput, validate_scheme_topology

logger = logging.getLogger(__name__)


class SurveyEngine:
    """Facade over every pipeline stage, sharing one configuration.

    Parameters
    ----------
    config:
        Explicit configuration.  When *None*, loaded from
        *project_path* and the environment.
    project_path:
        Directory holding an optional ``surveycore.json``.
    """

    def __init__(
        self,
        config: ComputationConfig | None = None,
        project_path: str | Path | None = None,
    ) -> None:
        self.config = config or load_config(project_path)
        apply_log_level(self.config)
        self._computation = ComputationEngine(self.config)

    # -- Parsing -----------------------------------------------------------

    def parse_coordinates(
        self,
        filename: str,
        content: str,
        options: DelimitedParseOptions | None = None,
    ) -> CoordinateParseResult:
        return parse_coordinate_file(filename, content, options, self.config)

    def reproject(self, coordinates: Sequence[ParsedCoordinate], source_epsg: int) -> list[ParsedCoordinate]:
        """Transform into the canonical CRS; raises ``ProjectionError``."""
        return reproject_coordinates(coordinates, source_epsg, self.config.canonical_epsg)

    # -- Computation -------------------------------------------------------

    def compute(
        self,
        coordinates: Sequence[Point],
        measured_distances: Sequence[Observation] | None = None,
        survey_method: str | None = None,
    ) -> ComputationResult:
        return self._computation.compute(ComputationInput(
            coordinates=list(coordinates),
            measured_distances=list(measured_distances or []),
            survey_method=survey_method,
        ))

    # -- Sections and quotas ------------------------------------------------

    def generate_geometries(
        self, parent_parcel: ParentInput, units: Sequence[UnitSpecification]
    ) -> GeometryGenerationResult:
        return generate_sectional_geometries(parent_parcel, units, self.config)

    def calculate_quotas(
        self,
        generated: GeometryGenerationResult,
        exclude_common_units: bool = True,
    ) -> QuotaCalculationResult:
        """Quotas for generated units, apportioning the generated common property."""
        units = [
            UnitAreaData(
                id=u.section_number,
                section_number=u.section_number,
                area=u.computed_area,
                section_type=u.section_type,
            )
            for u in generated.units
        ]
        return calculate_participation_quotas(
            units,
            generated.common_property.area,
            exclude_common_units=exclude_common_units,
            precision=self.config.quota_precision,
        )

    def adjust_quota(
        self,
        units: Sequence[UnitAreaData],
        unit_id: str,
        new_quota: float,
        common_property_area: float,
    ) -> QuotaCalculationResult:
        return adjust_quota(units, unit_id, new_quota, common_property_area, self.config.quota_precision)

    # -- Topology and sealing ----------------------------------------------

    def validate_topology(
        self,
        parent_parcel: ParentInput,
        units: UnitInput,
        options: TopologyOptions | None = None,
    ) -> SchemeValidationReport:
        return validate_scheme_topology(parent_parcel, units, options)

    def seal(
        self,
        generated: GeometryGenerationResult,
        parent_parcel_area: float,
        sealed_at: datetime | None = None,
    ) -> SealResult:
        return seal_survey_plan(facts_from_generation(generated, parent_parcel_area), sealed_at)

    def verify_seal(self, facts: SurveyFacts, expected_hash: str, sealed_at: datetime) -> SealVerification:
        return verify_seal(facts, expected_hash, sealed_at)
