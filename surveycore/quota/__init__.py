"""Participation quota calculation."""

from surveycore.quota.calculator import adjust_quota, calculate_participation_quotas, validate_quota_sum
from surveycore.quota.models import QuotaCalculationResult, QuotaResult, QuotaSumCheck, UnitAreaData

__all__ = [
    "QuotaCalculationResult",
    "QuotaResult",
    "QuotaSumCheck",
    "UnitAreaData",
    "adjust_quota",
    "calculate_participation_quotas",
    "validate_quota_sum",
]
