"""Read queries against the CRM's tables, shared by the REST layer and re-scoring.

Every function takes an AsyncSession and returns ORM objects or match-engine
snapshots. Nothing here writes.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.enums import UnitStatus
from src.models.lead import Lead
from src.models.unit import Unit
from src.schemas.matching import UnitSnapshot

logger = logging.getLogger(__name__)


class LeadNotFoundError(LookupError):
    """Raised when a lead id does not resolve to a row."""

    def __init__(self, lead_id: uuid.UUID | str) -> None:
        self.lead_id = str(lead_id)
        super().__init__(f"Lead not found: {lead_id}")


def _as_uuid(value: uuid.UUID | str) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


async def get_lead(db: AsyncSession, lead_id: uuid.UUID | str) -> Lead:
    """Load a lead by id, raising LeadNotFoundError if absent or malformed."""
    key = _as_uuid(lead_id)
    lead = await db.get(Lead, key) if key is not None else None
    if lead is None:
        raise LeadNotFoundError(lead_id)
    return lead


async def get_available_units(
    db: AsyncSession,
    project_id: uuid.UUID | str | None = None,
) -> list[UnitSnapshot]:
    """Load units currently offered for sale, flattened for the match engine.

    Status strings are mixed case in the CRM, so the availability filter runs
    after loading. Order is unit number within project, which is also the
    tie-break order the ranker preserves.
    """
    stmt = select(Unit).order_by(Unit.project_id, Unit.unit_number)
    if project_id is not None:
        key = _as_uuid(project_id)
        if key is None:
            return []
        stmt = stmt.where(Unit.project_id == key)

    result = await db.execute(stmt)
    units = list(result.scalars().unique().all())
    snapshots = [u.to_snapshot() for u in units if u.unit_status == UnitStatus.AVAILABLE]
    logger.debug("Loaded %d available of %d units (project=%s)", len(snapshots), len(units), project_id)
    return snapshots


async def get_leads_with_preferences(db: AsyncSession) -> list[Lead]:
    """Leads that have at least one preference column set."""
    result = await db.execute(
        select(Lead)
        .where(
            or_(
                Lead.target_price_min.isnot(None),
                Lead.target_price_max.isnot(None),
                Lead.target_bedrooms.isnot(None),
                Lead.target_bathrooms.isnot(None),
                Lead.target_sqft_min.isnot(None),
                Lead.target_sqft_max.isnot(None),
                Lead.target_locations.isnot(None),
            )
        )
        .order_by(Lead.created_at.desc())
    )
    # Blank strings and empty arrays pass the SQL filter; drop them here.
    return [lead for lead in result.scalars().all() if lead.has_preferences]


async def get_unit_snapshot(db: AsyncSession, unit_id: uuid.UUID | str) -> UnitSnapshot | None:
    """Load a single unit as a snapshot, or None if the id does not resolve."""
    key = _as_uuid(unit_id)
    if key is None:
        return None
    unit = await db.get(Unit, key)
    return unit.to_snapshot() if unit is not None else None
