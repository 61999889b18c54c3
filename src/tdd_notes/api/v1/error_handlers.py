"""
FastAPI exception handlers that map registry exceptions to HTTP responses.

The mapping itself lives on the exception classes (`to_payload()`, `http_status()`);
handlers only log and render.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging
from tdd_notes.exceptions.base import (
    RepositoryError,
    NotFoundError,
    InvalidReferenceError,
)

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """
    404 Not Found: unknown example slug or chapter id.
    """
    logger.info("NotFoundError for %s %s: fields=%s", request.method, request.url.path, exc.fields)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def invalid_reference_handler(request: Request, exc: InvalidReferenceError) -> JSONResponse:
    """
    422 Unprocessable Entity: a path parameter that is not a chapter id ("abc", "#0").
    """
    logger.info("InvalidReferenceError for %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """
    Fallback for every other registry error; the status comes from the error code
    (409 duplicate/conflict, 422 out_of_order, 400 otherwise).
    """
    logger.warning("RepositoryError for %s %s: %s", request.method, request.url.path, str(exc))
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    # Most specific first
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(InvalidReferenceError, invalid_reference_handler)
    app.add_exception_handler(RepositoryError, repository_error_handler)
