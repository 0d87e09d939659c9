"""Pydantic schemas for the unit/lead match engine.

Pure data classes — no DB dependencies.
Used as inputs/outputs for the deterministic scoring pipeline and the REST layer.
Field names are snake_case; camelCase aliases match the CRM's JSON payloads.
"""

from __future__ import annotations

import uuid
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------


# Largest decimal exponent accepted for any price, count, or area value
MAX_MAGNITUDE = 15


def _safe_decimal(value: Any) -> Decimal | None:
    """Convert a loose numeric value to Decimal, returning None on failure.

    Values outside 1e-15 .. 1e15 in magnitude are treated as unparsable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "").lstrip("$")
        if not value:
            return None
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not result.is_finite():
        return None
    if not result:
        return Decimal(0)
    if abs(result.adjusted()) > MAX_MAGNITUDE:
        return None
    return result


def _safe_int(value: Any) -> int | None:
    """Convert a loose numeric value to int; non-integral values count as unparsable."""
    d = _safe_decimal(value)
    if d is None or d != d.to_integral_value():
        return None
    return int(d)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class MatchCriterion(str, Enum):
    """Soft criteria, in reason order (most significant first)."""

    PRICE = "price"
    LOCATION = "location"
    BEDROOMS = "bedrooms"
    BATHROOMS = "bathrooms"
    SQFT = "sqft"


class MatchTier(str, Enum):
    """Badge tiers shown next to a scored unit."""

    PERFECT = "perfect"      # ≥ 90
    STRONG = "strong"        # ≥ 70
    GOOD = "good"            # ≥ 50


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class UnitSnapshot(BaseModel):
    """Read-only view of a unit joined with its floor plan and project.

    Every scoring field is required. A present but unparsable value is
    kept as None and the matching criterion is skipped.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    price: Decimal | None
    bedrooms: int | None
    bathrooms: Decimal | None
    square_feet: int | None
    building: str

    # Informational — carried through to API output, never scored
    unit_number: str | None = None
    floor: int | None = None
    status: str | None = None
    project_id: str | None = None

    @field_validator("id", "project_id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        if isinstance(v, uuid.UUID | int):
            return str(v)
        return v

    @field_validator("price", "bathrooms", mode="before")
    @classmethod
    def _decimal_or_none(cls, v: Any) -> Decimal | None:
        return _safe_decimal(v)

    @field_validator("bedrooms", "square_feet", mode="before")
    @classmethod
    def _int_or_none(cls, v: Any) -> int | None:
        return _safe_int(v)


class PreferenceSnapshot(BaseModel):
    """A lead's stated purchase preferences.

    Absent, blank, or unparsable values all mean "not specified".
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    target_price_min: Decimal | None = None
    target_price_max: Decimal | None = None
    target_bedrooms: int | None = None
    target_bathrooms: Decimal | None = None
    target_sqft_min: Decimal | None = None
    target_sqft_max: Decimal | None = None
    target_locations: list[str] | None = None

    @field_validator(
        "target_price_min",
        "target_price_max",
        "target_bathrooms",
        "target_sqft_min",
        "target_sqft_max",
        mode="before",
    )
    @classmethod
    def _decimal_or_none(cls, v: Any) -> Decimal | None:
        return _safe_decimal(v)

    @field_validator("target_bedrooms", mode="before")
    @classmethod
    def _int_or_none(cls, v: Any) -> int | None:
        return _safe_int(v)

    @field_validator("target_locations", mode="before")
    @classmethod
    def _clean_locations(cls, v: Any) -> list[str] | None:
        if v is None:
            return None
        if isinstance(v, str):
            v = [v]
        try:
            names = [str(name) for name in v if name is not None and str(name).strip()]
        except TypeError:
            return None
        return names or None

    @property
    def is_empty(self) -> bool:
        """True when no preference at all has been specified."""
        return all(value is None for value in self.model_dump().values())


class ScoringWeights(BaseModel):
    """Tunable weights for the soft criteria.

    Partial credits can never exceed the full weight of their criterion,
    so the normalized score stays within 0–100.
    """

    model_config = ConfigDict(frozen=True)

    price: int = Field(default=25, ge=0)
    location: int = Field(default=20, ge=0)
    bedrooms: int = Field(default=20, ge=0)
    bathrooms: int = Field(default=15, ge=0)
    sqft: int = Field(default=20, ge=0)
    bedrooms_partial: int = Field(default=10, ge=0)
    bathrooms_partial: int = Field(default=8, ge=0)

    @model_validator(mode="after")
    def _partial_within_full(self) -> ScoringWeights:
        if self.bedrooms_partial > self.bedrooms:
            msg = f"bedrooms_partial ({self.bedrooms_partial}) exceeds bedrooms weight ({self.bedrooms})"
            raise ValueError(msg)
        if self.bathrooms_partial > self.bathrooms:
            msg = f"bathrooms_partial ({self.bathrooms_partial}) exceeds bathrooms weight ({self.bathrooms})"
            raise ValueError(msg)
        return self


DEFAULT_WEIGHTS = ScoringWeights()


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


class CriterionScore(BaseModel):
    """Contribution of a single specified criterion."""

    criterion: MatchCriterion
    weight: int
    earned: int
    met: bool                          # full credit
    reason: str | None = None          # set when any credit was earned


class MatchResult(BaseModel):
    """Outcome of scoring one unit against one lead's preferences."""

    unit_id: str
    score: int = Field(ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
    is_match: bool
    criteria: list[CriterionScore] = Field(default_factory=list)


class RankedUnit(BaseModel):
    """A unit paired with its match result, as returned by the ranker."""

    unit: UnitSnapshot
    result: MatchResult


class MatchSummary(BaseModel):
    """Aggregate view of a ranking — counts per tier and the best match."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_units: int
    matched_units: int
    perfect: int = 0
    strong: int = 0
    good: int = 0
    top_score: int | None = None
    top_unit_id: str | None = None


# ---------------------------------------------------------------------------
# REST payloads
# ---------------------------------------------------------------------------


class RankRequest(BaseModel):
    """Body for ad-hoc ranking of units the caller already holds."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    units: list[UnitSnapshot] = Field(default_factory=list)
    preferences: PreferenceSnapshot = Field(default_factory=PreferenceSnapshot)


class MatchedUnitOut(BaseModel):
    """Unit fields plus match score and reasons, serialized in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    unit_number: str | None = None
    project_id: str | None = None
    building: str
    price: Decimal | None
    bedrooms: int | None
    bathrooms: Decimal | None
    square_feet: int | None
    floor: int | None = None
    status: str | None = None
    match_score: int
    match_reasons: list[str]
    match_tier: MatchTier | None = None
