"""Pushes recomputed matches back to the CRM over Redis pub/sub.

The CRM relays messages on the matches channel to connected agents, the
same way it broadcasts its own unit and lead updates.
"""

from __future__ import annotations

import logging

from src.config import settings
from src.db.engine import redis_client
from src.schemas.events import ChangeEvent, EventType

logger = logging.getLogger(__name__)

PUBLISH_EVENT_TYPES: list[EventType] = [EventType.MATCHES_RECOMPUTED]


async def publish_matches(event: ChangeEvent) -> None:
    """Event handler: publish a MATCHES_RECOMPUTED event as JSON."""
    channel = settings.matching.matches_channel
    receivers = await redis_client.publish(channel, event.model_dump_json())
    logger.debug(
        "Published %s for %s to %s (%d receivers)",
        event.event_type.value,
        event.entity_id,
        channel,
        receivers,
    )
