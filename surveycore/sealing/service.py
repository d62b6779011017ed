"""Tamper-evident sealing of survey facts.

A seal is the SHA-256 of the canonical JSON of four facts: parent parcel
area, section count, total unit area and the seal timestamp.  The
timestamp is stored with the seal so verification recomputes from the
recorded facts rather than the current time.

Sealing is meant for plans whose topology validated cleanly
(:func:`is_sealable`); the engine documents that precondition but does
not enforce workflow state.

Usage::

    from surveycore.sealing import seal_survey_plan, verify_seal

    seal = seal_survey_plan(facts)
    verify_seal(seal.facts, seal.seal_hash, seal.sealed_at).is_valid  # True
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import BaseModel

from surveycore.sealing.hasher import Hasher
from surveycore.sections.models import GeometryGenerationResult, SectionType
from surveycore.topology.report import SchemeValidationReport

logger = logging.getLogger(__name__)

SEAL_MISMATCH = "seal_hash_mismatch"
SEAL_MISMATCH_MESSAGE = "Seal hash mismatch - data may have been modified"


class SurveyFacts(BaseModel):
    """The survey facts a seal covers."""

    parent_parcel_area: float
    section_count: int
    total_unit_area: float


class SealResult(BaseModel):
    seal_hash: str
    """Lowercase hex SHA-256."""

    sealed_at: datetime
    facts: SurveyFacts


class SealVerification(BaseModel):
    is_valid: bool
    error: str | None = None
    error_kind: str | None = None


def _timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def compute_seal_hash(facts: SurveyFacts, sealed_at: datetime) -> str:
    """SHA-256 over the canonical serialisation of *facts* and *sealed_at*."""
    return Hasher.hash_canonical({
        "parentParcelArea": facts.parent_parcel_area,
        "sectionCount": facts.section_count,
        "totalUnitArea": facts.total_unit_area,
        "timestamp": _timestamp(sealed_at),
    })


def seal_survey_plan(facts: SurveyFacts, sealed_at: datetime | None = None) -> SealResult:
    """Seal *facts* at *sealed_at* (now, in UTC, when omitted)."""
    sealed_at = sealed_at or datetime.now(timezone.utc)
    seal_hash = compute_seal_hash(facts, sealed_at)
    logger.info("Sealed survey of %d sections: %s", facts.section_count, seal_hash[:12])
    return SealResult(seal_hash=seal_hash, sealed_at=sealed_at, facts=facts)


def verify_seal(facts: SurveyFacts, expected_hash: str, sealed_at: datetime) -> SealVerification:
    """Recompute the seal from stored facts and compare with *expected_hash*."""
    actual = compute_seal_hash(facts, sealed_at)
    if actual != expected_hash.strip().lower():
        logger.warning("Seal verification failed for hash %s", expected_hash[:12])
        return SealVerification(is_valid=False, error=SEAL_MISMATCH_MESSAGE, error_kind=SEAL_MISMATCH)
    return SealVerification(is_valid=True)


def facts_from_generation(result: GeometryGenerationResult, parent_parcel_area: float) -> SurveyFacts:
    """Facts for a generated scheme; common sections are not counted."""
    sections = [u for u in result.units if u.section_type is not SectionType.COMMON]
    return SurveyFacts(
        parent_parcel_area=parent_parcel_area,
        section_count=len(sections),
        total_unit_area=sum(u.computed_area for u in sections),
    )


def is_sealable(report: SchemeValidationReport) -> bool:
    """True when the topology report permits sealing."""
    return report.is_valid
