"""ChangeEvent schema — row changes from the CRM and re-scoring outcomes.

The CRM broadcasts unit and lead changes; the change feed listener turns them
into ChangeEvents, and the re-scoring subscriber answers with
MATCHES_RECOMPUTED events.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """All event types flowing through the realtime layer."""

    # CRM row changes
    UNIT_UPDATED = "unit.updated"
    LEAD_CREATED = "lead.created"
    LEAD_UPDATED = "lead.updated"
    LEAD_DELETED = "lead.deleted"

    # Re-scoring
    MATCHES_RECOMPUTED = "matches.recomputed"


class ChangeEvent(BaseModel):
    """A single change notification. Immutable once created."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Row the event is about (unit id or lead id)
    entity_id: str | None = None

    # Flexible payload
    data: dict[str, Any] = Field(default_factory=dict)

    # Metadata
    source_module: str | None = Field(default=None, description="Module that emitted this event")

    model_config = {"frozen": True}
