"""Badge tiers for match scores.

Thresholds:
  ≥ 90 → PERFECT MATCH
  ≥ 70 → STRONG MATCH
  ≥ 50 → GOOD MATCH
  < 50 → no badge
"""

from __future__ import annotations

from src.schemas.matching import MatchTier

TIER_THRESHOLDS: list[tuple[int, MatchTier]] = [
    (90, MatchTier.PERFECT),
    (70, MatchTier.STRONG),
    (50, MatchTier.GOOD),
]

TIER_LABELS: dict[MatchTier, str] = {
    MatchTier.PERFECT: "PERFECT MATCH",
    MatchTier.STRONG: "STRONG MATCH",
    MatchTier.GOOD: "GOOD MATCH",
}


def match_tier(score: int) -> MatchTier | None:
    """Classify a 0–100 score into a badge tier."""
    for threshold, tier in TIER_THRESHOLDS:
        if score >= threshold:
            return tier
    return None


def match_badge(score: int) -> str | None:
    """Badge label for a score, or None below the lowest tier."""
    tier = match_tier(score)
    return TIER_LABELS[tier] if tier else None
