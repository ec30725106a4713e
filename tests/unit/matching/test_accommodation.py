"""
Unit tests for src/matching/accommodation.py
"""

import pytest

from src.matching.accommodation import (
    filter_compatible,
    gender_compatible,
    is_eligible,
    provider_capacity,
    total_needed,
)
from src.modules.registrations.models import NeededCounts
from tests.fixtures.registrations import make_host, make_seeker

# Import fixtures
pytest_plugins = ["tests.fixtures.registrations"]


# ============================================================
# total_needed / provider_capacity tests
# ============================================================


class TestTotalNeeded:
    """Tests for total_needed function."""

    def test_sums_all_counts(self):
        assert total_needed(NeededCounts(male=2, female=1, other=1)) == 4

    def test_none_is_zero(self):
        assert total_needed(None) == 0

    def test_null_counts_are_zero(self):
        """Null counts from intake should be treated as zero."""
        assert total_needed(NeededCounts(male=None, female=2, other=None)) == 2


class TestProviderCapacity:
    """Tests for provider_capacity function."""

    def test_positive_capacity(self):
        assert provider_capacity(make_host(4)) == 4

    def test_negative_capacity_is_zero(self):
        assert provider_capacity(make_host(-3)) == 0

    def test_missing_capacity_is_zero(self):
        assert provider_capacity(make_host(None)) == 0


# ============================================================
# gender_compatible tests
# ============================================================

# Need patterns: (male, female, other)
MALE_ONLY_PARTY = NeededCounts(male=2)
FEMALE_ONLY_PARTY = NeededCounts(female=2)
MIXED_PARTY = NeededCounts(male=1, female=1)


class TestGenderCompatible:
    """Preference x party table."""

    @pytest.mark.parametrize(
        "preference, needed, expected",
        [
            ("anyone", MALE_ONLY_PARTY, True),
            ("anyone", FEMALE_ONLY_PARTY, True),
            ("anyone", MIXED_PARTY, True),
            ("male-only", MALE_ONLY_PARTY, True),
            ("male-only", FEMALE_ONLY_PARTY, False),
            ("male-only", MIXED_PARTY, False),
            ("female-only", MALE_ONLY_PARTY, False),
            ("female-only", FEMALE_ONLY_PARTY, True),
            ("female-only", MIXED_PARTY, False),
        ],
    )
    def test_preference_table(self, preference, needed, expected):
        assert gender_compatible(preference, needed) is expected

    def test_male_only_with_other_guests(self):
        """Male-only host accepts men travelling with 'other' guests."""
        assert gender_compatible("male-only", NeededCounts(male=1, other=1)) is True

    def test_male_only_needs_a_male_guest(self):
        """Male-only host rejects a party of only 'other' guests."""
        assert gender_compatible("male-only", NeededCounts(other=2)) is False

    def test_unknown_preference_denies(self):
        assert gender_compatible("families-only", MALE_ONLY_PARTY) is False

    def test_missing_preference_denies(self):
        assert gender_compatible(None, MALE_ONLY_PARTY) is False


# ============================================================
# is_eligible tests
# ============================================================


class TestIsEligible:
    """Tests for is_eligible function."""

    def test_example_scenario(self, male_seeker, example_hosts):
        """Host A fits; B has the wrong gender; C is too small."""
        host_a, host_b, host_c = example_hosts
        assert is_eligible(male_seeker, host_a) is True
        assert is_eligible(male_seeker, host_b) is False
        assert is_eligible(male_seeker, host_c) is False

    def test_capacity_equal_to_need(self):
        assert is_eligible(make_seeker(female=3), make_host(3, "female-only")) is True

    def test_capacity_below_need(self):
        assert is_eligible(make_seeker(female=3), make_host(2, "anyone")) is False

    def test_negative_capacity(self):
        assert is_eligible(make_seeker(male=1), make_host(-1, "anyone")) is False

    def test_seeker_needing_nobody_is_not_matchable(self):
        assert is_eligible(make_seeker(), make_host(5, "anyone")) is False

    def test_district_does_not_gate(self):
        """Hosts in other districts are still eligible."""
        seeker = make_seeker(male=1, district="Kollam")
        host = make_host(2, "anyone", district="Kannur")
        assert is_eligible(seeker, host) is True


class TestFilterCompatible:
    """Tests for filter_compatible function."""

    def test_keeps_input_order(self):
        seeker = make_seeker(male=1)
        hosts = [
            make_host(1, "anyone", name="First"),
            make_host(1, "female-only", name="Skipped"),
            make_host(3, "male-only", name="Second"),
        ]
        result = filter_compatible(seeker, hosts)
        assert [h.name for h in result] == ["First", "Second"]

    def test_no_hosts(self):
        assert filter_compatible(make_seeker(male=1), []) == []
