"""
GÉANT Knowledge Assistant Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures global exception handling, and provides a test-friendly application
factory.

Design Goals
------------
- Fail-fast configuration validation at startup
- Centralized router registration
- Global exception safety net
- Test-friendly via create_app()
"""

from __future__ import annotations

import contextlib
import logging
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from .config import settings
from .core.errors import (
    ConfigurationError,
    unhandled_exception_handler,
    validation_exception_handler,
)

from .api import (
    chat_routes,
    health_routes,
)


logger = logging.getLogger("geant.app")


def validate_configuration() -> None:
    """
    Raise ConfigurationError if any provider credential is missing.
    """
    missing = [
        name
        for name, value in (
            ("HF_API_KEY", settings.hf_api_key),
            ("GROQ_API_KEY", settings.groq_api_key),
        )
        if value is None or not value.get_secret_value()
    ]
    if missing:
        raise ConfigurationError(
            f"Missing required configuration: {', '.join(missing)}"
        )


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting GÉANT Knowledge Assistant")

    if settings.validate_on_startup:
        validate_configuration()
        logger.info("Configuration validated successfully")

    yield

    logger.info("Shutting down GÉANT Knowledge Assistant")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="geant-assistant",
        version="1.0.0",
        lifespan=lifespan,
    )

    # --------------------------------------------------------------
    # Global Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(chat_routes.router)

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn)
# ---------------------------------------------------------------------

app = create_app()
