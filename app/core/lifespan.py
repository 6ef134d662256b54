"""Application lifespan.

Startup configures logging and, when enabled, tracing over the app and
the SQL engine. Shutdown flushes spans and disposes the engine so pooled
connections are closed before the process exits.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.persistence.database import dispose_engine, get_engine
from app.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging()

    tracing = settings.telemetry_enabled
    if tracing:
        # Deferred so deployments without tracing never import the SDK.
        from app.shared.telemetry.telemetry import start_tracing

        start_tracing(settings, app, get_engine())

    logger.info(
        "%s %s ready (analytics timeout %ss, search timeout %ss)",
        settings.app_name,
        settings.app_version,
        settings.analytics_timeout_seconds,
        settings.search_timeout_seconds,
    )
    try:
        yield
    finally:
        if tracing:
            from app.shared.telemetry.telemetry import stop_tracing

            stop_tracing()
        await dispose_engine()
