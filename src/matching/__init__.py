"""Match engine — weighted unit-to-lead preference scoring and ranking."""

from src.matching.engine import rank_units, score_unit, summarize_matches
from src.matching.tiers import match_badge, match_tier
from src.schemas.matching import (
    DEFAULT_WEIGHTS,
    MatchResult,
    MatchSummary,
    MatchTier,
    PreferenceSnapshot,
    RankedUnit,
    ScoringWeights,
    UnitSnapshot,
)

__all__ = [
    "score_unit",
    "rank_units",
    "summarize_matches",
    "match_tier",
    "match_badge",
    "DEFAULT_WEIGHTS",
    "ScoringWeights",
    "UnitSnapshot",
    "PreferenceSnapshot",
    "MatchResult",
    "RankedUnit",
    "MatchSummary",
    "MatchTier",
]
