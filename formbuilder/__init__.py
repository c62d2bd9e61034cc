"""
Form Builder Backend

This module provides the application factory for the form builder API:
forms made of categorize, cloze and comprehension questions, graded
submissions, and per-form results.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from formbuilder.common.error_handling import register_exception_handlers
from formbuilder.common.logger import configure_logger, get_logger
from formbuilder.config import Settings, settings as default_settings

logger = get_logger("app")


def _build_storage(app: FastAPI, app_settings: Settings) -> None:
    """Attach repositories for the configured storage backend to ``app.state``."""
    from formbuilder.domain.forms import MemoryFormRepository, SQLFormRepository
    from formbuilder.domain.responses import (
        MemoryResponseRepository,
        SQLResponseRepository,
        SubmissionService,
    )

    if app_settings.STORAGE_BACKEND == "memory":
        app.state.database = None
        app.state.form_repository = MemoryFormRepository()
        app.state.response_repository = MemoryResponseRepository()
    else:
        database = app.state.database
        app.state.form_repository = SQLFormRepository(database)
        app.state.response_repository = SQLResponseRepository(database)

    app.state.submission_service = SubmissionService(
        app.state.form_repository,
        app.state.response_repository,
        require_existing_form=app_settings.REQUIRE_EXISTING_FORM,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI application lifespan context manager.

    Opens the database (unless the memory backend is configured) and builds
    the repositories on startup; disposes the database on shutdown.
    """
    app_settings: Settings = app.state.settings
    logger.info(f"Application startup with '{app_settings.STORAGE_BACKEND}' storage")

    if app_settings.STORAGE_BACKEND == "sql":
        from formbuilder.database import Database

        database = Database(app_settings.DATABASE_URL, echo=app_settings.SQL_ECHO)
        await database.connect()
        app.state.database = database

    _build_storage(app, app_settings)
    logger.info("Application startup complete")

    yield

    logger.info("Application shutdown sequence initiated")
    if app.state.database is not None:
        await app.state.database.dispose()
    logger.info("Application shutdown complete")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        app_settings: Settings to use; defaults to the environment settings

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or default_settings

    configure_logger(
        name="formbuilder",
        level=app_settings.LOG_LEVEL,
        use_json=app_settings.LOG_JSON,
        log_file=app_settings.LOG_FILE or None,
    )

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        description="API for building forms, collecting responses and reviewing results",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = None

    from formbuilder.middleware import RequestLoggingMiddleware

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    from formbuilder.api import main_router
    app.include_router(main_router, prefix=app_settings.API_PREFIX)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    logger.info(f"Application created with {len(app.routes)} routes")
    return app
