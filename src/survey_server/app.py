"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that loads survey definitions and builds the driver once
  - CORS middleware
  - Global exception handlers (SDK errors → 422/404/400)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``survey-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from survey_rulesets.driver import SurveyDriver
from survey_rulesets.errors import ResponseValidationError, SurveyResponseError
from survey_rulesets.interfaces import MediaStore
from survey_rulesets.media import DirectoryMediaStore, InMemoryMediaStore
from survey_rulesets.store import SurveyStore
from survey_rulesets.validator import PromptValidator

from survey_server.config import ServerSettings, load_settings
from survey_server.errors import (
    generic_error_handler,
    key_error_handler,
    response_error_handler,
    survey_response_error_handler,
    value_error_handler,
)
from survey_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan: runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialise shared resources at startup.

    Startup:
      1. Load survey definitions into a ``SurveyStore``
      2. Build the media store, ``PromptValidator`` and ``SurveyDriver``
      3. Stash them on ``app.state`` for dependency injection
    """
    settings: ServerSettings = app.state.settings

    # --- Load survey definitions ---
    store = SurveyStore(survey_dir=settings.survey_dir)
    store.load()
    logger.info("SurveyStore loaded successfully")

    # --- Build driver ---
    media: MediaStore
    if settings.media_dir:
        media = DirectoryMediaStore(settings.media_dir)
    else:
        media = InMemoryMediaStore()
    driver = SurveyDriver(PromptValidator(media_store=media))

    app.state.store = store
    app.state.driver = driver

    yield

    logger.info("Survey server shutting down")


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = load_settings()

    # --- Configure logging ---
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Survey Validation Server",
        description="REST API for survey definitions and response validation",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store settings so the lifespan handler can read them
    app.state.settings = settings

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers ---
    app.add_exception_handler(ResponseValidationError, response_error_handler)
    app.add_exception_handler(SurveyResponseError, survey_response_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # --- Health check (outside /api/v1 prefix) ---
    @app.get("/health")
    async def health() -> dict:
        """Readiness probe — reports how many surveys are loaded."""
        store = getattr(app.state, "store", None)
        if store is None:
            return {"status": "error", "detail": "surveys not loaded"}
        return {"status": "ok", "surveys": len(store.surveys)}

    # --- Mount all API routes ---
    register_routes(app)

    return app


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``survey-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
