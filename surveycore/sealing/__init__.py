"""Tamper-evident sealing of survey facts."""

from surveycore.sealing.hasher import Hasher
from surveycore.sealing.service import (
    SEAL_MISMATCH,
    SealResult,
    SealVerification,
    SurveyFacts,
    compute_seal_hash,
    facts_from_generation,
    is_sealable,
    seal_survey_plan,
    verify_seal,
)

__all__ = [
    "Hasher",
    "SEAL_MISMATCH",
    "SealResult",
    "SealVerification",
    "SurveyFacts",
    "compute_seal_hash",
    "facts_from_generation",
    "is_sealable",
    "seal_survey_plan",
    "verify_seal",
]
