import logging
from contextlib import asynccontextmanager

import asyncpg
from fastapi import FastAPI

from streamshelf.api import content, shelves, upcoming
from streamshelf.api.errors import register_exception_handlers
from streamshelf.config import Settings, get_settings
from streamshelf.db_context import DatabaseManager
from streamshelf.logging_setup import setup_logging
from streamshelf.schema import create_schema
from streamshelf.services import ContentService, UpcomingService

logger = logging.getLogger(__name__)


def _lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_json)
        pool = await asyncpg.create_pool(
            settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        await DatabaseManager.add_pool(settings.db_name, pool)
        if settings.create_schema:
            await create_schema(pool)
        logger.info("Database pool %s ready", settings.db_name)
        try:
            yield
        finally:
            await DatabaseManager.remove_pool(settings.db_name)
            await pool.close()

    return lifespan


def create_app(settings: Settings | None = None, manage_pool: bool = True) -> FastAPI:
    """Build the API application.

    With manage_pool=False the caller registers the asyncpg pool under
    settings.db_name itself and logging is left as configured.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="streamshelf API",
        version="0.1.0",
        lifespan=_lifespan(settings) if manage_pool else None,
    )
    app.state.settings = settings
    app.state.content_service = ContentService(settings.db_name)
    app.state.upcoming_service = UpcomingService(settings.db_name)

    register_exception_handlers(app)
    app.include_router(content.router, prefix="/api/content", tags=["Content"])
    app.include_router(upcoming.router, prefix="/api/upcoming-content", tags=["Upcoming"])
    app.include_router(shelves.router, prefix="/api/shelves", tags=["Shelves"])
    return app
