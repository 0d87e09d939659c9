"""CRM change feed — Redis pub/sub messages turned into ChangeEvents.

The CRM publishes the same JSON it pushes to browsers over its WebSocket:

    {"type": "unit_update", "data": {...unit row...}}
    {"type": "lead_update", "action": "created" | "updated" | "deleted", "data": {...lead row...}}

Anything else on the channel (heartbeats, "connected" notices) is ignored.
Malformed messages are logged and skipped; they never stop the listener.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as aioredis

from src.realtime.events import emit
from src.schemas.events import ChangeEvent, EventType

logger = logging.getLogger(__name__)

_LEAD_ACTIONS: dict[str, EventType] = {
    "created": EventType.LEAD_CREATED,
    "updated": EventType.LEAD_UPDATED,
    "deleted": EventType.LEAD_DELETED,
}

_IGNORED_TYPES = {"connected", "ping", "pong"}


def parse_change_message(raw: str | bytes | None) -> ChangeEvent | None:
    """Parse one pub/sub payload into a ChangeEvent, or None if it is not a row change."""
    if raw is None:
        return None
    try:
        payload: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Dropping non-JSON change message: %.80r", raw)
        return None

    if not isinstance(payload, dict):
        logger.warning("Dropping change message that is not an object: %.80r", raw)
        return None

    msg_type = payload.get("type")
    data = payload.get("data")
    if not isinstance(data, dict):
        data = {}
    entity_id = str(data["id"]) if data.get("id") is not None else None

    if msg_type == "unit_update":
        event_type = EventType.UNIT_UPDATED
    elif msg_type == "lead_update":
        action = str(payload.get("action") or "updated").lower()
        event_type = _LEAD_ACTIONS.get(action)
        if event_type is None:
            logger.warning("Dropping lead_update with unknown action: %s", action)
            return None
    else:
        if msg_type not in _IGNORED_TYPES:
            logger.debug("Ignoring change message of type %r", msg_type)
        return None

    if entity_id is None:
        logger.warning("Dropping %s without a row id", msg_type)
        return None

    return ChangeEvent(
        event_type=event_type,
        entity_id=entity_id,
        data=data,
        source_module=__name__,
    )


async def listen_for_changes(client: aioredis.Redis, channel: str) -> None:
    """Subscribe to the change feed channel and emit a ChangeEvent per row change.

    Runs until cancelled. Meant to be wrapped in an asyncio task by the app lifespan.
    """
    pubsub = client.pubsub()
    await pubsub.subscribe(channel)
    logger.info("Listening for CRM changes on %s", channel)
    try:
        async for message in pubsub.listen():
            if message.get("type") != "message":
                continue
            event = parse_change_message(message.get("data"))
            if event is not None:
                await emit(event)
    finally:
        await pubsub.unsubscribe(channel)
        await pubsub.aclose()
        logger.info("Stopped listening on %s", channel)
