"""Matching API — FastAPI router exposing ranked unit matches for leads.

Read-only: lead preferences and units come from the CRM's tables, scores are
computed per request and never stored.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.db.engine import get_session
from src.db.queries import LeadNotFoundError, get_available_units, get_lead
from src.matching import match_tier, rank_units, summarize_matches
from src.schemas.matching import (
    MatchedUnitOut,
    MatchSummary,
    RankedUnit,
    RankRequest,
    ScoringWeights,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["matching"])


def get_weights() -> ScoringWeights:
    """Dependency — scoring weights from settings (overridable in tests)."""
    return settings.matching.weights()


def _to_out(item: RankedUnit) -> MatchedUnitOut:
    unit, result = item.unit, item.result
    return MatchedUnitOut(
        id=unit.id,
        unit_number=unit.unit_number,
        project_id=unit.project_id,
        building=unit.building,
        price=unit.price,
        bedrooms=unit.bedrooms,
        bathrooms=unit.bathrooms,
        square_feet=unit.square_feet,
        floor=unit.floor,
        status=unit.status,
        match_score=result.score,
        match_reasons=result.reasons,
        match_tier=match_tier(result.score),
    )


async def _rank_for_lead(
    db: AsyncSession,
    lead_id: uuid.UUID,
    project_id: uuid.UUID | None,
    weights: ScoringWeights,
) -> tuple[list[RankedUnit], int]:
    try:
        lead = await get_lead(db, lead_id)
    except LeadNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    units = await get_available_units(db, project_id)
    ranked = rank_units(units, lead.to_preferences(), weights)
    logger.info(
        "Ranked %d/%d units for lead %s (project=%s)",
        len(ranked),
        len(units),
        lead_id,
        project_id,
    )
    return ranked, len(units)


@router.get("/leads/{lead_id}/matched-units", response_model=list[MatchedUnitOut])
async def matched_units(
    lead_id: uuid.UUID,
    project_id: uuid.UUID | None = Query(default=None, alias="projectId"),
    db: AsyncSession = Depends(get_session),
    weights: ScoringWeights = Depends(get_weights),
) -> list[MatchedUnitOut]:
    """Available units ranked for a lead, best match first."""
    ranked, _total = await _rank_for_lead(db, lead_id, project_id, weights)
    return [_to_out(item) for item in ranked]


@router.get("/leads/{lead_id}/match-summary", response_model=MatchSummary)
async def match_summary(
    lead_id: uuid.UUID,
    project_id: uuid.UUID | None = Query(default=None, alias="projectId"),
    db: AsyncSession = Depends(get_session),
    weights: ScoringWeights = Depends(get_weights),
) -> MatchSummary:
    """Tier counts and best match for a lead."""
    ranked, total = await _rank_for_lead(db, lead_id, project_id, weights)
    return summarize_matches(ranked, total_units=total)


@router.post("/matching/rank", response_model=list[MatchedUnitOut])
async def rank_supplied_units(
    body: RankRequest,
    weights: ScoringWeights = Depends(get_weights),
) -> list[MatchedUnitOut]:
    """Rank units supplied by the caller against supplied preferences. No DB access."""
    ranked = rank_units(body.units, body.preferences, weights)
    return [_to_out(item) for item in ranked]
