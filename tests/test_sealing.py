"""Tests for canonical hashing and survey sealing."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from surveycore.models.geometry import Point
from surveycore.sealing import (
    SEAL_MISMATCH,
    Hasher,
    SurveyFacts,
    compute_seal_hash,
    facts_from_generation,
    is_sealable,
    seal_survey_plan,
    verify_seal,
)
from surveycore.sections import SectionType, UnitSpecification, generate_sectional_geometries
from surveycore.topology import validate_scheme_topology

SEALED_AT = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
FACTS = SurveyFacts(parent_parcel_area=1000.0, section_count=3, total_unit_area=950.0)


def _rect(x0: float, x1: float) -> list[Point]:
    return [Point(x=x0, y=0), Point(x=x1, y=0), Point(x=x1, y=25), Point(x=x0, y=25)]


# ---------------------------------------------------------------------------
# Hasher
# ---------------------------------------------------------------------------

class TestHasher:

    def test_hash_string_deterministic(self):
        h1 = Hasher.hash_string("survey")
        h2 = Hasher.hash_string("survey")
        assert h1 == h2
        assert len(h1) == 64

    def test_canonical_json_ignores_key_order(self):
        a = Hasher.canonical_json({"b": 1, "a": 2})
        b = Hasher.canonical_json({"a": 2, "b": 1})
        assert a == b == '{"a":2,"b":1}'

    def test_hash_canonical(self):
        assert Hasher.hash_canonical({"a": 1}) == Hasher.hash_string('{"a":1}')


# ---------------------------------------------------------------------------
# Sealing
# ---------------------------------------------------------------------------

class TestSeal:

    def test_round_trip(self):
        seal = seal_survey_plan(FACTS, SEALED_AT)
        result = verify_seal(seal.facts, seal.seal_hash, seal.sealed_at)
        assert result.is_valid is True
        assert result.error is None

    def test_hash_is_lowercase_hex(self):
        seal = seal_survey_plan(FACTS, SEALED_AT)
        assert len(seal.seal_hash) == 64
        assert seal.seal_hash == seal.seal_hash.lower()
        int(seal.seal_hash, 16)

    def test_deterministic(self):
        assert compute_seal_hash(FACTS, SEALED_AT) == compute_seal_hash(FACTS, SEALED_AT)

    def test_tampered_area_detected(self):
        seal = seal_survey_plan(FACTS, SEALED_AT)
        tampered = FACTS.model_copy(update={"total_unit_area": 951.0})
        result = verify_seal(tampered, seal.seal_hash, SEALED_AT)
        assert result.is_valid is False
        assert result.error_kind == SEAL_MISMATCH
        assert "data may have been modified" in result.error

    def test_tampered_timestamp_detected(self):
        seal = seal_survey_plan(FACTS, SEALED_AT)
        result = verify_seal(FACTS, seal.seal_hash, SEALED_AT + timedelta(seconds=1))
        assert result.is_valid is False

    def test_expected_hash_case_insensitive(self):
        seal = seal_survey_plan(FACTS, SEALED_AT)
        assert verify_seal(FACTS, seal.seal_hash.upper(), SEALED_AT).is_valid is True

    def test_naive_timestamp_treated_as_utc(self):
        naive = SEALED_AT.replace(tzinfo=None)
        assert compute_seal_hash(FACTS, naive) == compute_seal_hash(FACTS, SEALED_AT)

    def test_offset_timestamp_normalised(self):
        plus_two = SEALED_AT.astimezone(timezone(timedelta(hours=2)))
        assert compute_seal_hash(FACTS, plus_two) == compute_seal_hash(FACTS, SEALED_AT)

    def test_default_timestamp_is_now(self):
        before = datetime.now(timezone.utc)
        seal = seal_survey_plan(FACTS)
        assert seal.sealed_at >= before
        assert verify_seal(FACTS, seal.seal_hash, seal.sealed_at).is_valid is True


# ---------------------------------------------------------------------------
# Facts and sealability
# ---------------------------------------------------------------------------

class TestFacts:

    def _generated(self):
        parent = "POLYGON((0 0, 40 0, 40 25, 0 25, 0 0))"
        specs = [
            UnitSpecification(section_number="A", coordinates=_rect(0, 12)),
            UnitSpecification(section_number="B", coordinates=_rect(12, 24)),
            UnitSpecification(section_number="C", coordinates=_rect(24, 38)),
            UnitSpecification(section_number="D", section_type=SectionType.COMMON, coordinates=_rect(38, 40)),
        ]
        return parent, generate_sectional_geometries(parent, specs)

    def test_facts_exclude_common_sections(self):
        _, generated = self._generated()
        facts = facts_from_generation(generated, 1000.0)
        assert facts.section_count == 3
        assert facts.total_unit_area == 950.0
        assert facts.parent_parcel_area == 1000.0

    def test_valid_topology_is_sealable(self):
        parent, generated = self._generated()
        assert is_sealable(validate_scheme_topology(parent, generated.units)) is True

    def test_overlapping_scheme_is_not_sealable(self):
        parent, generated = self._generated()
        overlapping = generate_sectional_geometries(
            parent,
            [
                UnitSpecification(section_number="A", coordinates=_rect(0, 12)),
                UnitSpecification(section_number="B", coordinates=_rect(10, 24)),
            ],
        )
        assert is_sealable(validate_scheme_topology(parent, overlapping.units)) is False
