"""Re-scoring subscriber — recomputes matches when a unit or lead changes.

Nothing is cached: every change triggers a fresh ranking from current rows,
and the outcome is published as a MATCHES_RECOMPUTED event, which
src.realtime.publisher forwards to the CRM over Redis.
"""

from __future__ import annotations

import logging

from src.config import settings
from src.db.engine import async_session_factory
from src.db.queries import (
    LeadNotFoundError,
    get_available_units,
    get_lead,
    get_leads_with_preferences,
    get_unit_snapshot,
)
from src.matching import rank_units, score_unit, summarize_matches
from src.models.enums import UnitStatus
from src.realtime.events import emit
from src.schemas.events import ChangeEvent, EventType

logger = logging.getLogger(__name__)

RESCORE_EVENT_TYPES: list[EventType] = [
    EventType.UNIT_UPDATED,
    EventType.LEAD_CREATED,
    EventType.LEAD_UPDATED,
]

# How many top unit ids to carry in a lead recompute event
TOP_UNITS_IN_EVENT = 10


async def rescore_on_change(event: ChangeEvent) -> None:
    """Event handler: dispatch to the lead or unit re-scoring path."""
    if event.entity_id is None:
        return
    if event.event_type in (EventType.LEAD_CREATED, EventType.LEAD_UPDATED):
        await rescore_lead(event.entity_id)
    elif event.event_type == EventType.UNIT_UPDATED:
        await rescore_unit(event.entity_id)


async def rescore_lead(lead_id: str) -> None:
    """Re-rank every available unit for one lead."""
    async with async_session_factory() as db:
        try:
            lead = await get_lead(db, lead_id)
        except LeadNotFoundError:
            logger.warning("Lead %s vanished before re-scoring", lead_id)
            return
        prefs = lead.to_preferences()
        units = await get_available_units(db)

    ranked = rank_units(units, prefs, settings.matching.weights())
    summary = summarize_matches(ranked, total_units=len(units))
    logger.info(
        "Re-scored lead %s: %d/%d units match (top=%s)",
        lead_id,
        summary.matched_units,
        summary.total_units,
        summary.top_score,
    )

    await emit(ChangeEvent(
        event_type=EventType.MATCHES_RECOMPUTED,
        entity_id=lead_id,
        data={
            "scope": "lead",
            "summary": summary.model_dump(),
            "top_units": [
                {"unit_id": r.unit.id, "score": r.result.score}
                for r in ranked[:TOP_UNITS_IN_EVENT]
            ],
        },
        source_module=__name__,
    ))


async def rescore_unit(unit_id: str) -> None:
    """Score one unit against every lead with preferences.

    A unit that is missing or no longer available matches nobody.
    """
    scored: list[tuple[str, int]] = []
    async with async_session_factory() as db:
        unit = await get_unit_snapshot(db, unit_id)
        if unit is not None and unit.status == UnitStatus.AVAILABLE.value:
            weights = settings.matching.weights()
            for lead in await get_leads_with_preferences(db):
                result = score_unit(unit, lead.to_preferences(), weights)
                if result.is_match:
                    scored.append((str(lead.id), result.score))

    scored.sort(key=lambda item: item[1], reverse=True)
    matching_leads = [{"lead_id": lead_id, "score": score} for lead_id, score in scored]
    logger.info("Re-scored unit %s: %d matching leads", unit_id, len(matching_leads))

    await emit(ChangeEvent(
        event_type=EventType.MATCHES_RECOMPUTED,
        entity_id=unit_id,
        data={"scope": "unit", "matching_leads": matching_leads},
        source_module=__name__,
    ))
