"""Global exception handlers — map SDK exceptions to HTTP status codes.

Rather than catching SDK exceptions in every route, we install global
handlers.  This keeps route handlers clean and focused on the happy path.

  - ResponseValidationError / SurveyResponseError → 422 with the per-prompt
    error list (prompt id, kind, violation); these describe the caller's
    own upload, so they are safe to return
  - KeyError (unknown survey or prompt) → 404
  - any other ValueError → 400 with a generic message
  - anything else → 500
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from survey_rulesets.errors import ResponseValidationError, SurveyResponseError

logger = logging.getLogger(__name__)


async def response_error_handler(
    request: Request, exc: ResponseValidationError
) -> JSONResponse:
    """Map a single rejected answer to 422."""
    logger.info("Rejected response at %s: %s", request.url, exc)
    return JSONResponse(
        status_code=422,
        content={"detail": "Invalid survey response", "errors": [exc.to_dict()]},
    )


async def survey_response_error_handler(
    request: Request, exc: SurveyResponseError
) -> JSONResponse:
    """Map a collected set of rejected answers to 422."""
    logger.info("Rejected response at %s: %s", request.url, exc)
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Invalid survey response",
            "errors": [e.to_dict() for e in exc.errors],
        },
    )


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Map any other ``ValueError`` to 400.

    The raw exception message is logged server-side but never sent to the
    client.
    """
    logger.warning("ValueError at %s: %s", request.url, exc)
    return JSONResponse(status_code=400, content={"detail": "Invalid request"})


async def key_error_handler(request: Request, exc: KeyError) -> JSONResponse:
    """Map ``KeyError`` (e.g. unknown survey id) to 404."""
    logger.warning("KeyError at %s: %s", request.url, exc)
    return JSONResponse(status_code=404, content={"detail": "Resource not found"})


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
