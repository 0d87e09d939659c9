"""Tests for the single-unit scorer.

Each test builds a UnitSnapshot and a PreferenceSnapshot and asserts the
score, the ordered reasons, and whether the unit passes the hard filters.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from src.matching import DEFAULT_WEIGHTS, ScoringWeights, score_unit
from src.matching.criteria import PRICE_ABOVE_MAX, PRICE_BELOW_MIN, TOO_FEW_BEDROOMS
from src.schemas.matching import MatchCriterion, PreferenceSnapshot, UnitSnapshot


def _unit(**overrides) -> UnitSnapshot:
    """The reference unit: $600k, 2bd/2ba, 950 sq ft in THE JACKSON."""
    fields = {
        "id": "unit-1",
        "price": Decimal("600000"),
        "bedrooms": 2,
        "bathrooms": Decimal("2"),
        "square_feet": 950,
        "building": "THE JACKSON",
    }
    fields.update(overrides)
    return UnitSnapshot(**fields)


class TestReferenceScenarios:
    """Worked examples for the reference unit."""

    def test_full_match_scores_100(self):
        prefs = PreferenceSnapshot(
            target_price_min=Decimal("500000"),
            target_price_max=Decimal("700000"),
            target_bedrooms=2,
            target_locations=["THE JACKSON"],
        )
        result = score_unit(_unit(), prefs)
        assert result.is_match is True
        assert result.score == 100
        assert result.unit_id == "unit-1"

    def test_full_match_reasons_in_row_order(self):
        prefs = PreferenceSnapshot(
            target_price_min=Decimal("500000"),
            target_price_max=Decimal("700000"),
            target_bedrooms=2,
            target_locations=["THE JACKSON"],
        )
        result = score_unit(_unit(), prefs)
        assert result.reasons == [
            "Within budget ($500,000 - $700,000)",
            "Preferred location: THE JACKSON",
            "2 bedrooms (exact match)",
        ]

    def test_over_max_budget_fails(self):
        result = score_unit(_unit(), PreferenceSnapshot(target_price_max=Decimal("500000")))
        assert result.is_match is False
        assert result.score == 0
        assert result.reasons == ["Price exceeds max budget."]

    def test_fewer_bedrooms_fails(self):
        result = score_unit(_unit(bedrooms=2), PreferenceSnapshot(target_bedrooms=3))
        assert result.is_match is False
        assert result.reasons == [TOO_FEW_BEDROOMS]

    def test_one_extra_bedroom_gets_half_credit(self):
        result = score_unit(_unit(bedrooms=3), PreferenceSnapshot(target_bedrooms=2))
        assert result.is_match is True
        assert result.score == 50
        assert result.reasons == ["3 bedrooms (close match)"]
        bedrooms = result.criteria[0]
        assert bedrooms.criterion == MatchCriterion.BEDROOMS
        assert bedrooms.earned == 10
        assert bedrooms.met is False


class TestHardFilters:
    def test_below_min_budget_fails(self):
        result = score_unit(_unit(), PreferenceSnapshot(target_price_min=Decimal("650000")))
        assert result.is_match is False
        assert result.score == 0
        assert result.reasons == [PRICE_BELOW_MIN]

    def test_max_checked_before_min(self):
        """An inverted window reports the max-budget failure first."""
        prefs = PreferenceSnapshot(
            target_price_min=Decimal("700000"),
            target_price_max=Decimal("500000"),
        )
        assert score_unit(_unit(), prefs).reasons == [PRICE_ABOVE_MAX]

    def test_price_checked_before_bedrooms(self):
        prefs = PreferenceSnapshot(target_price_max=Decimal("100000"), target_bedrooms=4)
        assert score_unit(_unit(), prefs).reasons == [PRICE_ABOVE_MAX]

    def test_price_on_bounds_passes(self):
        prefs = PreferenceSnapshot(
            target_price_min=Decimal("600000"),
            target_price_max=Decimal("600000"),
        )
        result = score_unit(_unit(), prefs)
        assert result.is_match is True
        assert result.score == 100

    def test_failure_has_no_criteria_breakdown(self):
        result = score_unit(_unit(), PreferenceSnapshot(target_price_max=Decimal("1")))
        assert result.criteria == []

    def test_soft_criteria_never_exclude(self):
        prefs = PreferenceSnapshot(
            target_locations=["ELSEWHERE"],
            target_bathrooms=Decimal("4"),
            target_sqft_min=Decimal("3000"),
        )
        result = score_unit(_unit(), prefs)
        assert result.is_match is True
        assert result.score == 0
        assert result.reasons == []


class TestSoftCriteria:
    def test_half_bath_difference_gets_partial_credit(self):
        """8 of 15 → 53."""
        result = score_unit(_unit(bathrooms=Decimal("2.5")), PreferenceSnapshot(target_bathrooms=Decimal("2")))
        assert result.score == 53
        assert result.reasons == ["2.5 bathrooms (close match)"]

    def test_exact_half_bath_match(self):
        result = score_unit(_unit(bathrooms=Decimal("2.5")), PreferenceSnapshot(target_bathrooms=Decimal("2.5")))
        assert result.score == 100
        assert result.reasons == ["2.5 bathrooms (exact match)"]

    def test_full_bath_difference_gets_nothing(self):
        result = score_unit(_unit(bathrooms=Decimal("3")), PreferenceSnapshot(target_bathrooms=Decimal("2")))
        assert result.score == 0
        assert result.reasons == []
        assert result.is_match is True

    def test_two_extra_bedrooms_get_nothing(self):
        result = score_unit(_unit(bedrooms=4), PreferenceSnapshot(target_bedrooms=2))
        assert result.score == 0
        assert result.is_match is True

    def test_sqft_window(self):
        prefs = PreferenceSnapshot(target_sqft_min=Decimal("900"), target_sqft_max=Decimal("1000"))
        result = score_unit(_unit(), prefs)
        assert result.score == 100
        assert result.reasons == ["950 sq ft (within range)"]

    def test_sqft_open_upper_bound(self):
        prefs = PreferenceSnapshot(target_sqft_min=Decimal("900"))
        result = score_unit(_unit(square_feet=1250), prefs)
        assert result.reasons == ["1,250 sq ft (within range)"]

    def test_sqft_outside_window(self):
        prefs = PreferenceSnapshot(target_sqft_max=Decimal("900"))
        assert score_unit(_unit(), prefs).score == 0

    def test_location_membership_only(self):
        prefs = PreferenceSnapshot(target_locations=["THE PARK", "THE JACKSON"])
        result = score_unit(_unit(), prefs)
        assert result.score == 100
        assert result.reasons == ["Preferred location: THE JACKSON"]

    def test_budget_label_min_only(self):
        result = score_unit(_unit(), PreferenceSnapshot(target_price_min=Decimal("500000")))
        assert result.reasons == ["Within budget (from $500,000)"]

    def test_budget_label_max_only(self):
        result = score_unit(_unit(), PreferenceSnapshot(target_price_max=Decimal("700000")))
        assert result.reasons == ["Within budget (up to $700,000)"]

    def test_mixed_partial_score(self):
        """Price 25 + location 0 + bathrooms 8 + sqft 0 over 80 → 41."""
        prefs = PreferenceSnapshot(
            target_price_max=Decimal("700000"),
            target_locations=["THE PARK"],
            target_bathrooms=Decimal("2.5"),
            target_sqft_min=Decimal("1000"),
        )
        result = score_unit(_unit(), prefs)
        assert result.score == 41
        assert result.reasons == [
            "Within budget (up to $700,000)",
            "2 bathrooms (close match)",
        ]
        assert [c.criterion for c in result.criteria] == [
            MatchCriterion.PRICE,
            MatchCriterion.LOCATION,
            MatchCriterion.BATHROOMS,
            MatchCriterion.SQFT,
        ]

    def test_half_point_rounds_up(self):
        """(25 + 8) / 40 = 82.5 → 83."""
        prefs = PreferenceSnapshot(
            target_price_max=Decimal("700000"),
            target_bathrooms=Decimal("2.5"),
        )
        assert score_unit(_unit(), prefs).score == 83


class TestUnspecifiedCriteria:
    def test_no_preferences(self):
        result = score_unit(_unit(), PreferenceSnapshot())
        assert result.is_match is True
        assert result.score == 0
        assert result.reasons == []
        assert result.criteria == []

    def test_unparsable_preference_is_ignored(self):
        prefs = PreferenceSnapshot(target_price_max="call me", target_bedrooms=2)
        result = score_unit(_unit(), prefs)
        assert result.is_match is True
        assert result.score == 100
        assert result.reasons == ["2 bedrooms (exact match)"]

    @pytest.mark.parametrize("raw", ["1e999999999", "-1e400", "9" * 5000])
    def test_out_of_range_preference_is_ignored(self, raw):
        prefs = PreferenceSnapshot(target_price_max=raw, target_bedrooms=raw, target_bathrooms=Decimal("2"))
        result = score_unit(_unit(), prefs)
        assert result.is_match is True
        assert result.score == 100
        assert result.reasons == ["2 bathrooms (exact match)"]

    def test_out_of_range_unit_price_skips_price_filters(self):
        result = score_unit(_unit(price="1e999999999"), PreferenceSnapshot(target_price_max=Decimal("700000")))
        assert result.is_match is True
        assert result.criteria == []

    def test_unparsable_unit_price_skips_price_filters(self):
        unit = _unit(price="TBD")
        result = score_unit(unit, PreferenceSnapshot(target_price_max=Decimal("1")))
        assert result.is_match is True
        assert result.score == 0
        assert result.reasons == []

    def test_unparsable_unit_bathrooms_leaves_denominator(self):
        unit = _unit(bathrooms="two")
        prefs = PreferenceSnapshot(target_bathrooms=Decimal("2"), target_bedrooms=2)
        result = score_unit(unit, prefs)
        assert result.score == 100
        assert [c.criterion for c in result.criteria] == [MatchCriterion.BEDROOMS]


class TestProperties:
    @pytest.mark.parametrize(
        "prefs",
        [
            PreferenceSnapshot(),
            PreferenceSnapshot(target_bedrooms=1),
            PreferenceSnapshot(target_bathrooms=Decimal("1.5"), target_sqft_max=Decimal("2000")),
            PreferenceSnapshot(target_price_max=Decimal("100")),
            PreferenceSnapshot(
                target_price_min=Decimal("0"),
                target_price_max=Decimal("900000"),
                target_bedrooms=2,
                target_bathrooms=Decimal("2"),
                target_sqft_min=Decimal("500"),
                target_locations=["THE JACKSON"],
            ),
        ],
    )
    def test_score_bounds(self, prefs):
        result = score_unit(_unit(), prefs)
        assert 0 <= result.score <= 100

    def test_idempotent(self):
        prefs = PreferenceSnapshot(target_bedrooms=1, target_bathrooms=Decimal("2.5"))
        assert score_unit(_unit(), prefs) == score_unit(_unit(), prefs)

    def test_zero_price_min_counts_as_specified(self):
        result = score_unit(_unit(), PreferenceSnapshot(target_price_min=Decimal("0")))
        assert result.reasons == ["Within budget (from $0)"]


class TestWeights:
    def test_custom_weights(self):
        weights = ScoringWeights(price=50, bedrooms=50, bedrooms_partial=25)
        prefs = PreferenceSnapshot(target_price_max=Decimal("700000"), target_bedrooms=2)
        result = score_unit(_unit(bedrooms=3), prefs, weights)
        # (50 + 25) / 100
        assert result.score == 75

    def test_all_zero_weights_score_zero(self):
        weights = ScoringWeights(
            price=0, location=0, bedrooms=0, bathrooms=0, sqft=0,
            bedrooms_partial=0, bathrooms_partial=0,
        )
        result = score_unit(_unit(), PreferenceSnapshot(target_bedrooms=2), weights)
        assert result.score == 0
        assert result.is_match is True

    def test_partial_above_full_rejected(self):
        with pytest.raises(ValueError, match="bedrooms_partial"):
            ScoringWeights(bedrooms=5, bedrooms_partial=10)

    def test_defaults(self):
        assert DEFAULT_WEIGHTS.price == 25
        assert DEFAULT_WEIGHTS.location == 20
        assert DEFAULT_WEIGHTS.bedrooms == 20
        assert DEFAULT_WEIGHTS.bathrooms == 15
        assert DEFAULT_WEIGHTS.sqft == 20
        assert DEFAULT_WEIGHTS.bedrooms_partial == 10
        assert DEFAULT_WEIGHTS.bathrooms_partial == 8
