"""In-process event bus for ChangeEvents.

The change feed listener publishes unit/lead changes; the re-scoring
subscriber consumes them and publishes MATCHES_RECOMPUTED results.
A single module-level bus is shared by the app; tests build their own.

Usage:
    from src.realtime.events import emit, event_bus

    event_bus.subscribe(rescore_on_change, event_types=RESCORE_EVENT_TYPES)
    await emit(ChangeEvent(event_type=EventType.LEAD_UPDATED, entity_id=lead_id))
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from src.schemas.events import ChangeEvent, EventType

logger = logging.getLogger(__name__)

EventHandler = Callable[[ChangeEvent], Coroutine[Any, Any, None]]


class EventBus:
    """Queue-backed pub/sub. Handlers run concurrently; one failing never blocks the others."""

    def __init__(self) -> None:
        self._global: list[EventHandler] = []
        self._by_type: dict[EventType, list[EventHandler]] = {}
        self._queue: asyncio.Queue[ChangeEvent] | None = None
        self._worker: asyncio.Task[None] | None = None

    # ── Subscriptions ────────────────────────────────────────────────

    def subscribe(self, handler: EventHandler, event_types: list[EventType] | None = None) -> None:
        """Register a handler for the given event types, or for everything when None."""
        if event_types is None:
            self._global.append(handler)
            logger.info("Registered global event subscriber: %s", handler.__name__)
            return
        for et in event_types:
            self._by_type.setdefault(et, []).append(handler)
        logger.info(
            "Registered event subscriber %s for types: %s",
            handler.__name__,
            [t.value for t in event_types],
        )

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._global:
            self._global.remove(handler)
        for handlers in self._by_type.values():
            if handler in handlers:
                handlers.remove(handler)

    def handlers_for(self, event_type: EventType) -> list[EventHandler]:
        return [*self._global, *self._by_type.get(event_type, [])]

    # ── Publishing ───────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def publish(self, event: ChangeEvent) -> None:
        """Queue an event for background dispatch, starting the worker on first use."""
        queue = self.start()
        await queue.put(event)
        logger.debug("Event queued: %s (entity=%s)", event.event_type.value, event.entity_id)

    async def dispatch(self, event: ChangeEvent) -> None:
        """Deliver an event to its handlers now and wait for all of them."""
        handlers = self.handlers_for(event.event_type)
        if not handlers:
            return

        results = await asyncio.gather(
            *[handler(event) for handler in handlers],
            return_exceptions=True,
        )
        for handler, result in zip(handlers, results, strict=True):
            if isinstance(result, Exception):
                logger.error(
                    "Handler %s failed for %s (entity=%s): %r",
                    handler.__name__,
                    event.event_type.value,
                    event.entity_id,
                    result,
                )

    # ── Lifecycle ────────────────────────────────────────────────────

    def start(self) -> asyncio.Queue[ChangeEvent]:
        """Create the queue and background worker if needed. Must run inside an event loop."""
        if self._queue is None:
            self._queue = asyncio.Queue()
        if not self.running:
            self._worker = asyncio.create_task(self._drain(self._queue))
            logger.info(
                "Event bus started with %d global + %d typed subscribers",
                len(self._global),
                sum(len(v) for v in self._by_type.values()),
            )
        return self._queue

    async def stop(self) -> None:
        """Deliver everything already queued, then stop the worker."""
        if self._queue is not None and self.running:
            await self._queue.join()

        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass

        self._worker = None
        self._queue = None
        logger.info("Event bus stopped")

    async def _drain(self, queue: asyncio.Queue[ChangeEvent]) -> None:
        while True:
            event = await queue.get()
            try:
                await self.dispatch(event)
            except Exception:
                logger.exception("Error dispatching %s", event.event_type.value)
            finally:
                queue.task_done()


event_bus = EventBus()


async def emit(event: ChangeEvent) -> None:
    """Publish on the shared bus."""
    await event_bus.publish(event)
