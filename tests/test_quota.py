"""Tests for participation quota calculation and redistribution."""

from __future__ import annotations

import random

import pytest

from surveycore.quota import (
    UnitAreaData,
    adjust_quota,
    calculate_participation_quotas,
    validate_quota_sum,
)
from surveycore.sections import SectionType


def _units(*areas: float) -> list[UnitAreaData]:
    return [
        UnitAreaData(id=f"u{i}", section_number=chr(ord("A") + i), area=area)
        for i, area in enumerate(areas)
    ]


def _quotas(result) -> list[float]:
    return [q.participation_quota for q in result.quotas]


# ---------------------------------------------------------------------------
# calculate_participation_quotas
# ---------------------------------------------------------------------------

class TestCalculateQuotas:

    def test_largest_unit_absorbs_slack(self):
        result = calculate_participation_quotas(_units(300, 300, 350), 50.0)
        assert result.success is True
        assert _quotas(result) == [31.5789, 31.5789, 36.8422]
        assert result.adjustment_applied is True
        assert result.adjustment_details == "Adjusted unit C by +0.0001% to make quotas sum to 100%"
        assert result.is_valid is True
        assert result.total_quota == 100.0
        assert result.total_unit_area == 950.0

    def test_common_area_shares(self):
        result = calculate_participation_quotas(_units(300, 300, 350), 50.0)
        assert [q.common_area_share for q in result.quotas] == [15.79, 15.79, 18.42]

    def test_balanced_scheme_needs_no_adjustment(self):
        result = calculate_participation_quotas(_units(100, 100, 100, 100), 0.0)
        assert _quotas(result) == [25.0, 25.0, 25.0, 25.0]
        assert result.adjustment_applied is False
        assert result.adjustment_details is None
        assert result.warnings == []

    def test_tie_goes_to_first_unit(self):
        result = calculate_participation_quotas(_units(100, 100, 100), 0.0)
        assert _quotas(result) == [33.3334, 33.3333, 33.3333]

    def test_without_adjustment_sum_is_reported(self):
        result = calculate_participation_quotas(_units(100, 100, 100), 0.0, adjust_to_100=False)
        assert result.success is False
        assert result.is_valid is False
        assert result.total_quota == pytest.approx(99.9999)
        assert any("99.9999" in e for e in result.errors)
        assert len(result.quotas) == 3

    def test_units_sharing_an_id_keep_separate_quotas(self):
        units = [
            UnitAreaData(id="x", section_number="A", area=100),
            UnitAreaData(id="x", section_number="B", area=100),
        ]
        result = calculate_participation_quotas(units, 0.0)
        assert result.success is True
        assert _quotas(result) == [50.0, 50.0]
        assert result.total_quota == 100.0

    def test_precision(self):
        result = calculate_participation_quotas(_units(100, 200), 0.0, precision=2)
        assert _quotas(result) == [33.33, 66.67]
        assert result.is_valid is True

    @pytest.mark.parametrize("seed", range(20))
    def test_random_schemes_sum_to_exactly_100(self, seed):
        rng = random.Random(seed)
        areas = [round(rng.uniform(10, 500), 2) for _ in range(rng.randint(2, 50))]
        result = calculate_participation_quotas(_units(*areas), 123.45)
        check = validate_quota_sum(_quotas(result))
        assert check.is_valid is True
        assert check.difference == 0.0
        assert all(q >= 0 for q in _quotas(result))

    def test_common_units_excluded_by_default(self):
        units = _units(300, 300, 350)
        units.append(UnitAreaData(id="d", section_number="D", area=50, section_type=SectionType.COMMON))
        result = calculate_participation_quotas(units, 50.0)
        assert [q.section_number for q in result.quotas] == ["A", "B", "C"]

    def test_common_units_included_on_request(self):
        units = _units(300, 300, 350)
        units.append(UnitAreaData(id="d", section_number="D", area=50, section_type=SectionType.COMMON))
        result = calculate_participation_quotas(units, 50.0, exclude_common_units=False)
        assert len(result.quotas) == 4
        assert sum(_quotas(result)) == pytest.approx(100)

    def test_only_common_units(self):
        units = [UnitAreaData(id="d", section_number="D", area=50, section_type=SectionType.COMMON)]
        result = calculate_participation_quotas(units, 50.0)
        assert result.success is False
        assert "No eligible units" in result.errors[0]

    def test_negative_area_is_an_error(self):
        result = calculate_participation_quotas(_units(100, -5), 0.0)
        assert result.success is False
        assert result.errors == ["Unit B has negative area -5.0"]

    def test_zero_area_is_a_warning(self):
        result = calculate_participation_quotas(_units(100, 0), 0.0)
        assert result.success is True
        assert "Unit B has zero area" in result.warnings
        assert _quotas(result) == [100.0, 0.0]

    def test_all_zero_areas(self):
        result = calculate_participation_quotas(_units(0, 0), 0.0)
        assert result.success is False
        assert result.errors == ["Total unit area must be greater than zero"]


# ---------------------------------------------------------------------------
# adjust_quota
# ---------------------------------------------------------------------------

class TestAdjustQuota:

    def test_remainder_redistributed_by_area(self):
        result = adjust_quota(_units(300, 300, 350), "u0", 40.0, 50.0)
        assert result.success is True
        assert _quotas(result) == [40.0, 27.6923, 32.3077]
        assert result.adjustment_applied is True
        assert result.is_valid is True
        assert result.quotas[0].common_area_share == 20.0

    def test_unknown_unit(self):
        result = adjust_quota(_units(300, 300), "nope", 40.0, 0.0)
        assert result.success is False
        assert result.errors == ["Unit nope not found"]

    @pytest.mark.parametrize("bad", [-1.0, 100.5])
    def test_quota_out_of_range(self, bad):
        result = adjust_quota(_units(300, 300), "u0", bad, 0.0)
        assert result.success is False
        assert "between 0 and 100" in result.errors[0]

    def test_remaining_units_without_area(self):
        result = adjust_quota(_units(300, 0, 0), "u0", 40.0, 0.0)
        assert result.success is False
        assert "zero total area" in result.errors[0]

    def test_single_unit_has_nothing_to_redistribute_to(self):
        result = adjust_quota(_units(300), "u0", 40.0, 0.0)
        assert result.success is False
        assert "zero total area" in result.errors[0]
        assert result.quotas == []

    def test_units_sharing_an_id(self):
        units = [
            UnitAreaData(id="x", section_number="A", area=100),
            UnitAreaData(id="x", section_number="B", area=100),
            UnitAreaData(id="y", section_number="C", area=200),
        ]
        result = adjust_quota(units, "x", 40.0, 0.0)
        assert result.success is True
        assert _quotas(result) == [40.0, 20.0, 40.0]
        assert result.is_valid is True


# ---------------------------------------------------------------------------
# validate_quota_sum
# ---------------------------------------------------------------------------

class TestValidateQuotaSum:

    def test_exact_sum(self):
        check = validate_quota_sum([31.5789, 31.5789, 36.8422])
        assert check.is_valid is True
        assert check.total == 100.0

    def test_short_sum(self):
        check = validate_quota_sum([33.3333, 33.3333, 33.3333])
        assert check.is_valid is False
        assert check.difference == pytest.approx(0.0001)
        assert "99.9999" in check.message
