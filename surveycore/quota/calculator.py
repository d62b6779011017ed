"""Participation quota calculator.

Quotas are each unit's share of the scheme as a percentage of the total
exclusive area.  Arithmetic is decimal with half-up rounding, and the
rounding slack is absorbed by the unit holding the largest quota so the
scheme always sums to exactly 100.

Usage::

    from surveycore.quota import calculate_participation_quotas

    result = calculate_participation_quotas(units, common_property_area=50.0)
    [q.participation_quota for q in result.quotas]  # [31.5789, 31.5789, 36.8422]
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from surveycore.quota.models import QuotaCalculationResult, QuotaResult, QuotaSumCheck, UnitAreaData
from surveycore.sections.models import SectionType

logger = logging.getLogger(__name__)

HUNDRED = Decimal(100)
DEFAULT_PRECISION = 4
SHARE_PRECISION = 2


def _dec(value: float) -> Decimal:
    return Decimal(repr(value))


def _round(value: Decimal, places: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _share(quota: Decimal, common_area: Decimal) -> Decimal:
    return _round(quota / HUNDRED * common_area, SHARE_PRECISION)


def _absorb_slack(
    quotas: dict[int, Decimal],
    target: Decimal,
) -> tuple[int, Decimal] | None:
    """Add ``target - sum(quotas)`` to the largest quota (first on ties).

    *quotas* is keyed by position in the unit list so units sharing an id
    stay distinct.  Returns ``(index, difference)`` when an adjustment was
    made.
    """
    difference = target - sum(quotas.values(), Decimal(0))
    if difference == 0 or not quotas:
        return None
    largest = max(quotas, key=lambda i: quotas[i])
    quotas[largest] += difference
    return largest, difference


def _check_areas(units: Sequence[UnitAreaData], result: QuotaCalculationResult) -> None:
    for unit in units:
        if unit.area < 0:
            result.errors.append(f"Unit {unit.section_number} has negative area {unit.area}")
        elif unit.area == 0:
            result.warnings.append(f"Unit {unit.section_number} has zero area")


def calculate_participation_quotas(
    units: Sequence[UnitAreaData],
    common_property_area: float,
    exclude_common_units: bool = True,
    precision: int = DEFAULT_PRECISION,
    adjust_to_100: bool = True,
) -> QuotaCalculationResult:
    """Compute each unit's participation quota.

    Parameters
    ----------
    units:
        Units with their exclusive areas.
    common_property_area:
        Common property in m², apportioned by quota.
    exclude_common_units:
        Leave ``common`` sections out of the calculation.
    precision:
        Decimal places for quotas.
    adjust_to_100:
        Let the largest-quota unit absorb the rounding slack.

    Returns
    -------
    QuotaCalculationResult
    """
    result = QuotaCalculationResult(common_property_area=common_property_area)
    eligible = [
        u for u in units
        if not (exclude_common_units and u.section_type is SectionType.COMMON)
    ]
    if not eligible:
        result.errors.append("No eligible units for quota calculation")
        return result

    _check_areas(eligible, result)
    if result.errors:
        return result

    total_area = sum((_dec(u.area) for u in eligible), Decimal(0))
    if total_area <= 0:
        result.errors.append("Total unit area must be greater than zero")
        return result

    common = _dec(common_property_area)
    quotas = {
        i: _round(_dec(u.area) / total_area * HUNDRED, precision) for i, u in enumerate(eligible)
    }

    if adjust_to_100:
        adjusted = _absorb_slack(quotas, HUNDRED)
        if adjusted is not None:
            index, difference = adjusted
            section = eligible[index].section_number
            result.adjustment_applied = True
            result.adjustment_details = (
                f"Adjusted unit {section} by {difference:+f}% to make quotas sum to 100%"
            )
            result.warnings.append(result.adjustment_details)
            logger.debug(result.adjustment_details)

    result.quotas = [
        QuotaResult(
            unit_id=u.id,
            section_number=u.section_number,
            area=u.area,
            participation_quota=float(quotas[i]),
            common_area_share=float(_share(quotas[i], common)),
        )
        for i, u in enumerate(eligible)
    ]
    result.total_unit_area = float(total_area)

    check = validate_quota_sum([q.participation_quota for q in result.quotas], precision)
    result.total_quota = check.total
    result.is_valid = check.is_valid
    if not check.is_valid:
        result.errors.append(check.message)
    result.success = not result.errors

    logger.info("Calculated quotas for %d units (sum %s)", len(result.quotas), check.total)
    return result


def adjust_quota(
    units: Sequence[UnitAreaData],
    adjusted_unit_id: str,
    new_quota: float,
    common_property_area: float,
    precision: int = DEFAULT_PRECISION,
) -> QuotaCalculationResult:
    """Fix one unit's quota and redistribute the remainder by area.

    The other units share ``100 - new_quota`` in proportion to their
    areas; any rounding slack goes to the largest of them.
    """
    result = QuotaCalculationResult(common_property_area=common_property_area)

    target_index = next((i for i, u in enumerate(units) if u.id == adjusted_unit_id), None)
    if target_index is None:
        result.errors.append(f"Unit {adjusted_unit_id} not found")
        return result
    if not 0 <= new_quota <= 100:
        result.errors.append(f"New quota must be between 0 and 100, got {new_quota}")
        return result

    _check_areas(units, result)
    if result.errors:
        return result

    target = units[target_index]
    others = {i: u for i, u in enumerate(units) if i != target_index}
    fixed = _round(_dec(new_quota), precision)
    remaining = HUNDRED - fixed
    remaining_area = sum((_dec(u.area) for u in others.values()), Decimal(0))
    if remaining_area <= 0:
        result.errors.append("Remaining units have zero total area; cannot redistribute")
        return result

    quotas = {
        i: _round(_dec(u.area) / remaining_area * remaining, precision) for i, u in others.items()
    }
    _absorb_slack(quotas, remaining)
    quotas[target_index] = fixed

    common = _dec(common_property_area)
    result.quotas = [
        QuotaResult(
            unit_id=u.id,
            section_number=u.section_number,
            area=u.area,
            participation_quota=float(quotas[i]),
            common_area_share=float(_share(quotas[i], common)),
        )
        for i, u in enumerate(units)
    ]
    result.total_unit_area = float(sum((_dec(u.area) for u in units), Decimal(0)))
    result.adjustment_applied = True
    result.adjustment_details = (
        f"Unit {target.section_number} set to {fixed}%; {remaining}% redistributed across "
        f"{len(others)} unit(s)"
    )

    check = validate_quota_sum([q.participation_quota for q in result.quotas], precision)
    result.total_quota = check.total
    result.is_valid = check.is_valid
    if not check.is_valid:
        result.errors.append(check.message)
    result.success = not result.errors
    return result


def validate_quota_sum(quotas: Sequence[float], precision: int = DEFAULT_PRECISION) -> QuotaSumCheck:
    """Check that *quotas* sum to exactly 100 at *precision* decimals."""
    total = _round(sum((_dec(q) for q in quotas), Decimal(0)), precision)
    difference = HUNDRED - total
    is_valid = difference == 0
    if is_valid:
        message = "Participation quotas sum to 100%"
    else:
        message = f"Participation quotas sum to {total}%, {difference:+f}% from 100%"
    return QuotaSumCheck(
        is_valid=is_valid,
        total=float(total),
        difference=float(difference),
        message=message,
    )
