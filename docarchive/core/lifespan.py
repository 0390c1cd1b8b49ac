"""Application lifespan: startup and shutdown.

Wiring only: logging setup, optional schema creation for SQLite
development databases, SQL engine dispose.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from docarchive.core.config import get_settings
from docarchive.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit dispose the SQL engine."""
    settings = get_settings()
    setup_logging()

    if settings.database_auto_create:
        from docarchive.infrastructure.persistence.database import init_models

        await init_models()
        logger.info("Database schema created (DATABASE_AUTO_CREATE)")

    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    from docarchive.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
