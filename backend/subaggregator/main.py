"""Subscription Aggregator API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SubAggregatorError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Optional alembic upgrade on startup runs in a worker thread: alembic's
      env.py drives its own event loop
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from subaggregator import __version__
from subaggregator.api.error_handlers import register_error_handlers
from subaggregator.api.middleware import RequestLoggingMiddleware
from subaggregator.api.routes import health, subscriptions
from subaggregator.config import get_settings
from subaggregator.infrastructure.database import close_db, init_db
from subaggregator.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def run_migrations(ini_path: str | None = None) -> None:
    """Apply all alembic revisions up to head."""
    from alembic import command
    from alembic.config import Config

    path = Path(ini_path) if ini_path else ALEMBIC_INI
    if not path.is_file():
        raise FileNotFoundError(
            f"alembic config not found at {path}; set ALEMBIC_CONFIG",
        )
    cfg = Config(str(path))
    # keep the app's logging setup
    cfg.attributes["configure_logger"] = False
    command.upgrade(cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if settings.run_migrations_on_startup:
        await asyncio.to_thread(run_migrations, settings.alembic_config)
        logger.info("Migrations applied")
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Subscription Aggregator API started")
    yield
    await close_db()
    logger.info("Subscription Aggregator API shutting down")


app = FastAPI(
    title="Subscription Aggregator API", version=__version__, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(health.router)
app.include_router(subscriptions.router)

register_error_handlers(app)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "subaggregator.main:app",
        host=settings.server_host,
        port=settings.server_port,
    )


if __name__ == "__main__":
    run()
