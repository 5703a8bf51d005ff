"""Community REST API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CommunityError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: cleaner startup/shutdown pairing
    - Resource routers mounted under the configured namespace (/community/v1)
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from community_rest.api.error_handlers import register_error_handlers
from community_rest.api.routes import health, members, notifications
from community_rest.config import get_settings
from community_rest.db.base import Base
from community_rest.infrastructure.database import init_db
from community_rest.infrastructure.observability import setup_logging
import community_rest.models  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_create_schema:
        async with manager.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    logger.info(
        "Community REST API started",
        extra={"path": settings.api_prefix},
    )
    yield
    await manager.dispose()
    logger.info("Community REST API shutting down")


settings = get_settings()
app = FastAPI(
    title="Community REST API", version="1.0.0", lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(members.router, prefix=settings.api_prefix)
app.include_router(notifications.router, prefix=settings.api_prefix)

register_error_handlers(app)


def run() -> None:
    """Console entry point: serve the app with uvicorn (single process)."""
    uvicorn.run(
        "community_rest.main:app",
        host=settings.host, port=settings.port,
        log_level=settings.log_level.lower(),
    )
