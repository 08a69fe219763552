"""TaskHive API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers answer JSON on /api routes and an error page elsewhere
    - CORS configured from settings (not hardcoded)
    - Database and identity client initialized on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Page routes registered last so /api/v1/* paths are matched first
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import taskhive.infrastructure.database as database
import taskhive.infrastructure.identity_client as identity
from taskhive.api.error_handlers import register_error_handlers
from taskhive.infrastructure.observability import setup_logging
from taskhive.config import get_settings
from taskhive.api.routes import auth, health, ledger, pages, tasks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_marketplace_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    identity.init_identity_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        timeout_seconds=settings.identity_timeout_seconds,
        max_retries=settings.identity_max_retries,
        base_delay_ms=settings.identity_base_delay_ms,
        max_delay_ms=settings.identity_max_delay_ms,
    )
    logger.info("TaskHive API started")
    yield
    logger.info("TaskHive API shutting down")
    if identity.identity_client:
        await identity.identity_client.aclose()
    if database.marketplace_db:
        await database.marketplace_db.dispose()


app = FastAPI(
    title="TaskHive API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(ledger.router)
app.include_router(pages.router)
