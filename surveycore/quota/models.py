"""Participation quota models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from surveycore.sections.models import SectionType


class UnitAreaData(BaseModel):
    id: str
    section_number: str
    area: float
    """Exclusive floor area in m²."""

    section_type: SectionType = SectionType.RESIDENTIAL


class QuotaResult(BaseModel):
    unit_id: str
    section_number: str
    area: float
    participation_quota: float
    """Percentage share of the scheme."""

    common_area_share: float
    """m² of common property attributable to the unit, to 2 decimals."""


class QuotaCalculationResult(BaseModel):
    success: bool = False
    quotas: list[QuotaResult] = Field(default_factory=list)
    total_unit_area: float = 0.0
    total_quota: float = 0.0
    common_property_area: float = 0.0
    is_valid: bool = False
    """True when quotas sum to exactly 100 at the working precision."""

    adjustment_applied: bool = False
    adjustment_details: str | None = None
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class QuotaSumCheck(BaseModel):
    is_valid: bool
    total: float
    difference: float
    """Signed ``100 - total``."""

    message: str
