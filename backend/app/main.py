"""HirePath API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - RouteGuardMiddleware sees every request before any handler runs
    - Global error handlers map HirePathError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - CORS added last so it is the outermost middleware: preflight requests and
      guard rejections both carry CORS headers
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.infrastructure import database as db_module
from app.infrastructure.observability import setup_logging
from app.config import get_settings
from app.api.error_handlers import register_error_handlers
from app.api.route_guard_middleware import RouteGuardMiddleware
from app.api.routes import (
    access, applications, health, jobs, saved_jobs, session_identity,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = db_module.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("HirePath API started")
    yield
    await manager.dispose()
    logger.info("HirePath API shutting down")


app = FastAPI(
    title="HirePath API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(RouteGuardMiddleware, settings=settings)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(session_identity.router)
app.include_router(access.router)
app.include_router(applications.router)
app.include_router(jobs.router)
app.include_router(saved_jobs.router)
