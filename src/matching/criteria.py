"""Hard filters and per-criterion scoring rules.

Each soft rule takes a UnitSnapshot, a PreferenceSnapshot and the active
ScoringWeights, and returns a CriterionScore, or None when the lead has not
specified the criterion (or the unit's value is unparsable), in which case the
criterion is left out of both numerator and denominator.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

from src.matching.formatters import format_count, format_money, format_sqft
from src.schemas.matching import (
    CriterionScore,
    MatchCriterion,
    PreferenceSnapshot,
    ScoringWeights,
    UnitSnapshot,
)

PRICE_ABOVE_MAX = "Price exceeds max budget."
PRICE_BELOW_MIN = "Price below minimum budget."
TOO_FEW_BEDROOMS = "Fewer bedrooms than required."

_HALF_BATH = Decimal("0.5")


def _in_window(value: Decimal | int, low: Decimal | None, high: Decimal | None) -> bool:
    """Inclusive window check; a missing bound is unbounded on that side."""
    if low is not None and value < low:
        return False
    return not (high is not None and value > high)


# ── Hard filters ───────────────────────────────────────────────────────────


def first_failed_hard_filter(unit: UnitSnapshot, prefs: PreferenceSnapshot) -> str | None:
    """Return the reason of the first failed hard filter, or None.

    Order: max budget, min budget, bedroom minimum.
    """
    if unit.price is not None:
        if prefs.target_price_max is not None and unit.price > prefs.target_price_max:
            return PRICE_ABOVE_MAX
        if prefs.target_price_min is not None and unit.price < prefs.target_price_min:
            return PRICE_BELOW_MIN

    if (
        prefs.target_bedrooms is not None
        and unit.bedrooms is not None
        and unit.bedrooms < prefs.target_bedrooms
    ):
        return TOO_FEW_BEDROOMS

    return None


# ── Soft criteria ──────────────────────────────────────────────────────────


def _budget_label(low: Decimal | None, high: Decimal | None) -> str:
    if low is not None and high is not None:
        return f"{format_money(low)} - {format_money(high)}"
    if low is not None:
        return f"from {format_money(low)}"
    return f"up to {format_money(high)}"


def check_price(unit: UnitSnapshot, prefs: PreferenceSnapshot, weights: ScoringWeights) -> CriterionScore | None:
    """Price inside the budget window. Binary."""
    low, high = prefs.target_price_min, prefs.target_price_max
    if (low is None and high is None) or unit.price is None:
        return None

    met = _in_window(unit.price, low, high)
    return CriterionScore(
        criterion=MatchCriterion.PRICE,
        weight=weights.price,
        earned=weights.price if met else 0,
        met=met,
        reason=f"Within budget ({_budget_label(low, high)})" if met else None,
    )


def check_location(unit: UnitSnapshot, prefs: PreferenceSnapshot, weights: ScoringWeights) -> CriterionScore | None:
    """Unit's building among the preferred buildings. Binary."""
    if not prefs.target_locations:
        return None

    met = unit.building in set(prefs.target_locations)
    return CriterionScore(
        criterion=MatchCriterion.LOCATION,
        weight=weights.location,
        earned=weights.location if met else 0,
        met=met,
        reason=f"Preferred location: {unit.building}" if met else None,
    )


def check_bedrooms(unit: UnitSnapshot, prefs: PreferenceSnapshot, weights: ScoringWeights) -> CriterionScore | None:
    """Exact bedroom count for full credit, off by one for partial credit."""
    if prefs.target_bedrooms is None or unit.bedrooms is None:
        return None

    diff = abs(unit.bedrooms - prefs.target_bedrooms)
    if diff == 0:
        earned, reason = weights.bedrooms, f"{unit.bedrooms} bedrooms (exact match)"
    elif diff == 1:
        earned, reason = weights.bedrooms_partial, f"{unit.bedrooms} bedrooms (close match)"
    else:
        earned, reason = 0, None

    return CriterionScore(
        criterion=MatchCriterion.BEDROOMS,
        weight=weights.bedrooms,
        earned=earned,
        met=diff == 0,
        reason=reason,
    )


def check_bathrooms(unit: UnitSnapshot, prefs: PreferenceSnapshot, weights: ScoringWeights) -> CriterionScore | None:
    """Exact bathroom count for full credit, off by a half-bath for partial credit."""
    if prefs.target_bathrooms is None or unit.bathrooms is None:
        return None

    diff = abs(unit.bathrooms - prefs.target_bathrooms)
    baths = format_count(unit.bathrooms)
    if diff == 0:
        earned, reason = weights.bathrooms, f"{baths} bathrooms (exact match)"
    elif diff == _HALF_BATH:
        earned, reason = weights.bathrooms_partial, f"{baths} bathrooms (close match)"
    else:
        earned, reason = 0, None

    return CriterionScore(
        criterion=MatchCriterion.BATHROOMS,
        weight=weights.bathrooms,
        earned=earned,
        met=diff == 0,
        reason=reason,
    )


def check_sqft(unit: UnitSnapshot, prefs: PreferenceSnapshot, weights: ScoringWeights) -> CriterionScore | None:
    """Square footage inside the size window. Binary."""
    low, high = prefs.target_sqft_min, prefs.target_sqft_max
    if (low is None and high is None) or unit.square_feet is None:
        return None

    met = _in_window(unit.square_feet, low, high)
    return CriterionScore(
        criterion=MatchCriterion.SQFT,
        weight=weights.sqft,
        earned=weights.sqft if met else 0,
        met=met,
        reason=f"{format_sqft(unit.square_feet)} (within range)" if met else None,
    )


CriterionCheck = Callable[[UnitSnapshot, PreferenceSnapshot, ScoringWeights], CriterionScore | None]

# Evaluation order is also reason order.
CRITERION_CHECKS: dict[MatchCriterion, CriterionCheck] = {
    MatchCriterion.PRICE: check_price,
    MatchCriterion.LOCATION: check_location,
    MatchCriterion.BEDROOMS: check_bedrooms,
    MatchCriterion.BATHROOMS: check_bathrooms,
    MatchCriterion.SQFT: check_sqft,
}
