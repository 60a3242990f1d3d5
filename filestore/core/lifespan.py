"""Application lifespan: startup and shutdown.

Wiring only: logging, id generator worker, provider client cache and
SQL engine disposal.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from filestore.core.config import get_settings
from filestore.shared.telemetry.logging import setup_logging
from filestore.shared.utils.generators import configure_id_generator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit drop cached backends and dispose the engine."""
    settings = get_settings()

    # ---- Startup ----
    setup_logging()
    configure_id_generator(settings.id_worker_id)
    logger.info(
        "%s %s starting (worker %d)",
        settings.app_name,
        settings.app_version,
        settings.id_worker_id,
    )

    yield

    # ---- Shutdown ----
    registry = getattr(app.state, "provider_registry", None)
    if registry is not None:
        registry.clear_all_provider_cache()

    from filestore.infrastructure.persistence import database

    if database.engine is not None:
        await database.dispose_engine()
        logger.info("Database engine disposed")
