"""Signed Document Store API - FastAPI application factory.

Invariants:
    - Routes registered explicitly (no auto-discovery); documents catch-all last
    - Global error handlers map DocStoreError -> status code + minimal JSON envelope
    - CORS, gzip and request logging configured from settings (not hardcoded)
    - The document store (domain roots + cached index) is built before the app
      exists: a missing bootstrap index makes create_app raise, so the server
      refuses to start

Design Decisions:
    - Factory over module-level app: tests build apps over temporary roots
      (run with `uvicorn app.main:create_app --factory`)
    - Lifespan over @app.on_event for logging setup and start/stop log lines
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.error_handlers import register_error_handlers
from app.api.middleware import register_middleware
from app.api.routes import documents, health
from app.config import Settings, get_settings
from app.infrastructure.observability import setup_logging
from app.services.document_store import build_document_store

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    document_store = build_document_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        logger.info("Signed document store started")
        yield
        logger.info("Signed document store shutting down")

    app = FastAPI(
        title="Signed Document Store", version="1.0.0", lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.document_store = document_store

    register_middleware(app, settings)
    register_error_handlers(app)

    # Routes - explicit registration, catch-all last
    app.include_router(health.router)
    app.include_router(documents.router)
    return app
