"""
Error Taxonomy and Global Error Handling

This module defines the exception hierarchy shared by every pipeline stage,
the per-adapter failure policy, and the application-wide FastAPI exception
handlers.

Design Goals
------------
- Never leak internal exception details to clients
- Make the degrade/propagate choice of each external dependency explicit
- Log full stack traces internally for debugging
- Keep the response surface to a single ``{"error": ...}`` payload
"""

from __future__ import annotations

import enum
import logging
from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("geant.errors")


INVALID_MESSAGE = "Invalid message"
GENERIC_SERVER_ERROR = "An error occurred processing your request"


# ---------------------------------------------------------------------
# Exception Hierarchy
# ---------------------------------------------------------------------

class AssistantError(RuntimeError):
    """Base class for all errors raised by the assistant."""


class InvalidInputError(AssistantError):
    """Raised when the caller supplies a missing, empty or non-string query."""


class ConfigurationError(AssistantError):
    """Raised when a required credential or setting is absent."""


class ProviderError(AssistantError):
    """
    Raised when an upstream provider (embedding, vector index, completion)
    fails at the transport level or answers with a non-success status.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        provider: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.provider = provider


class GenerationError(AssistantError):
    """Raised when the answer channel (completion service) fails."""


class DegradedRetrievalError(AssistantError):
    """
    Raised inside the retriever when the vector search fails.

    Under the ``DEGRADE`` policy this never leaves the retriever: it is
    logged and converted to an empty result list.
    """


# ---------------------------------------------------------------------
# Failure Policy
# ---------------------------------------------------------------------

class FailurePolicy(str, enum.Enum):
    """What an adapter does with a failure of its external dependency."""

    DEGRADE = "degrade"
    PROPAGATE = "propagate"


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Logs the full traceback internally and returns a generic 500 with no
    internal details.
    """
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    return JSONResponse(
        status_code=500,
        content={"error": GENERIC_SERVER_ERROR},
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Map malformed request bodies (non-JSON, non-string message) to the same
    400 payload the pipeline uses for empty queries.
    """
    logger.info(
        "Rejected malformed request: %s %s (%d validation errors)",
        request.method,
        request.url.path,
        len(exc.errors()),
    )

    return JSONResponse(
        status_code=400,
        content={"error": INVALID_MESSAGE},
    )
