"""Match engine — scores units against a lead's preferences and ranks them.

Pure Python orchestrator. No DB access, no I/O, no shared state.
Callers build the UnitSnapshot / PreferenceSnapshot values and decide what to
do with the results; nothing is cached here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from src.matching.criteria import CRITERION_CHECKS, first_failed_hard_filter
from src.matching.tiers import match_tier
from src.schemas.matching import (
    DEFAULT_WEIGHTS,
    CriterionScore,
    MatchResult,
    MatchSummary,
    MatchTier,
    PreferenceSnapshot,
    RankedUnit,
    ScoringWeights,
    UnitSnapshot,
)

logger = logging.getLogger(__name__)


def _normalize(earned: int, possible: int) -> int:
    """Weighted average as an integer percentage, half rounded up."""
    if possible <= 0:
        return 0
    pct = (Decimal(100) * earned / possible).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(0, min(100, int(pct)))


def score_unit(
    unit: UnitSnapshot,
    prefs: PreferenceSnapshot,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> MatchResult:
    """Score a single unit against a lead's preferences.

    Hard filters short-circuit to is_match=False with score 0. Otherwise the
    score is the weighted average over the criteria the lead specified; a lead
    with no criteria gets score 0, no reasons, and is_match=True.
    """
    failed = first_failed_hard_filter(unit, prefs)
    if failed is not None:
        logger.debug("Unit %s excluded: %s", unit.id, failed)
        return MatchResult(unit_id=unit.id, score=0, reasons=[failed], is_match=False)

    criteria: list[CriterionScore] = []
    for check_fn in CRITERION_CHECKS.values():
        outcome = check_fn(unit, prefs, weights)
        if outcome is not None:
            criteria.append(outcome)

    possible = sum(c.weight for c in criteria)
    earned = sum(c.earned for c in criteria)
    reasons = [c.reason for c in criteria if c.reason]

    return MatchResult(
        unit_id=unit.id,
        score=_normalize(earned, possible),
        reasons=reasons,
        is_match=True,
        criteria=criteria,
    )


def rank_units(
    units: Iterable[UnitSnapshot],
    prefs: PreferenceSnapshot,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> list[RankedUnit]:
    """Score every unit, drop hard-filter failures, sort by score descending.

    Ties keep the input order (sorted() is stable); there is no secondary key.
    """
    ranked = [
        RankedUnit(unit=unit, result=result)
        for unit in units
        if (result := score_unit(unit, prefs, weights)).is_match
    ]
    ranked.sort(key=lambda r: r.result.score, reverse=True)
    return ranked


def summarize_matches(ranked: Sequence[RankedUnit], total_units: int) -> MatchSummary:
    """Count ranked units per badge tier and report the best match."""
    counts: dict[MatchTier, int] = dict.fromkeys(MatchTier, 0)
    for item in ranked:
        tier = match_tier(item.result.score)
        if tier is not None:
            counts[tier] += 1

    top = ranked[0] if ranked else None
    return MatchSummary(
        total_units=total_units,
        matched_units=len(ranked),
        perfect=counts[MatchTier.PERFECT],
        strong=counts[MatchTier.STRONG],
        good=counts[MatchTier.GOOD],
        top_score=top.result.score if top else None,
        top_unit_id=top.unit.id if top else None,
    )
