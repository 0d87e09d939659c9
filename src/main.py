"""FastAPI application entry point — wires everything together.

Usage:
    python -m src.main

Starts the matching API; when enabled, also listens to the CRM change feed
and re-scores matches as units and leads change.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from src.api.matching import router as matching_router
from src.config import settings
from src.db.engine import db_lifespan, redis_client
from src.realtime.events import event_bus
from src.realtime.listener import listen_for_changes
from src.realtime.publisher import PUBLISH_EVENT_TYPES, publish_matches
from src.realtime.rescoring import RESCORE_EVENT_TYPES, rescore_on_change

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting match service (env=%s)", settings.environment)

    async with db_lifespan():
        logger.info("Database connection verified")

        event_bus.subscribe(rescore_on_change, event_types=RESCORE_EVENT_TYPES)
        event_bus.subscribe(publish_matches, event_types=PUBLISH_EVENT_TYPES)
        event_bus.start()

        listener_task: asyncio.Task[None] | None = None
        if settings.matching.realtime_enabled:
            listener_task = asyncio.create_task(
                listen_for_changes(redis_client, settings.matching.realtime_channel)
            )
        else:
            logger.warning("MATCH_REALTIME_ENABLED not set — change feed re-scoring disabled")

        try:
            yield
        finally:
            logger.info("Shutting down match service...")

            if listener_task is not None:
                listener_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await listener_task
                logger.info("Change feed listener stopped")

            await event_bus.stop()
            event_bus.unsubscribe(rescore_on_change)
            event_bus.unsubscribe(publish_matches)

    logger.info("Match service shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────

app = FastAPI(
    title="Condo Match API",
    description="Unit-to-lead preference matching for the condominium sales CRM",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(matching_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
    }


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
