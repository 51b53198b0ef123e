"""Exception handlers — every failure leaves as ``{"status": "error", "message": ...}``.

Backend and normalization failures never get this far: the synthesis use case
recovers from them with heuristic analysis.  What remains are bad input and
GitHub fetch failures.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from insight_engine.domain.exceptions import (
    ContentExtractionError,
    GitHubRateLimitError,
    InsightEngineError,
    InvalidGitHubUrlError,
    RepositoryAccessDeniedError,
    RepositoryNotFoundError,
    UnsupportedDocumentError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[InsightEngineError], int] = {
    InvalidGitHubUrlError: 422,
    UnsupportedDocumentError: 422,
    RepositoryNotFoundError: 404,
    RepositoryAccessDeniedError: 403,
    GitHubRateLimitError: 429,
    ContentExtractionError: 502,
}


def status_for(exc: InsightEngineError) -> int:
    """Most specific mapped status along the exception's class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 500


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


async def _domain_error(request: Request, exc: InsightEngineError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    else:
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return _envelope(status_code, str(exc))


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        # "body" is implied for JSON requests; keep only the field path.
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        message = err.get("msg", "invalid value")
        problems.append(f"{field}: {message}" if field else message)
    return _envelope(422, "; ".join(problems) or "Invalid request.")


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s", request.url.path)
    return _envelope(500, "An unexpected error occurred. Please try again later.")


def register_error_handlers(app: FastAPI) -> None:
    """Attach the JSON error envelope to every failure path of *app*."""
    app.add_exception_handler(InsightEngineError, _domain_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unexpected_error)
