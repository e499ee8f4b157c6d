"""
Main Application - Main Layer

This module serves as the entry point for the FastAPI application.
It initializes the container, creates the FastAPI app, and includes
the API routers.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aquacast.main.config import get_settings
from aquacast.main.container import app_lifespan, init_container
from aquacast.presentation.controllers import (
    billing_router,
    forecast_router,
    telemetry_router,
    uploads_router,
)
from aquacast.shared import configure_logging, get_logger, update_logging_from_settings

# Basic logging until settings are loaded
configure_logging()

settings = get_settings()

update_logging_from_settings(settings)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management.

    Creates the database indexes on startup and closes the database
    connection on shutdown through the container's app_lifespan.
    """
    app.state.started_at = datetime.now(timezone.utc)
    logger.info("Application starting up", version=settings.ge.version)

    async with app_lifespan() as container:
        app.state.container = container
        yield

    logger.info("Application shutting down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application
    """
    settings = get_settings()

    init_container(settings)

    app = FastAPI(
        title=settings.ge.title,
        description=settings.ge.description,
        version=settings.ge.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(uploads_router, prefix="/api")
    app.include_router(forecast_router, prefix="/api")
    app.include_router(telemetry_router, prefix="/api")
    app.include_router(billing_router, prefix="/api")

    return app


app = create_app()
