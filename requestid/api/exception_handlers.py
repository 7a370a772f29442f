"""Global exception handlers for structured JSON error responses."""

from __future__ import annotations

import logging
import traceback

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from requestid.services.request_context import get_request_id

logger = logging.getLogger("requestid.errors")


def _error_body(status_code: int, detail) -> dict:
    body = {"error": True, "status_code": status_code, "detail": detail}
    rid = get_request_id()
    if rid is not None:
        body["request_id"] = str(rid)
    return body


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return structured JSON for all HTTP exceptions (4xx/5xx)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.detail),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured JSON for request validation errors (422)."""
    return JSONResponse(
        status_code=422,
        content=_error_body(422, exc.errors()),
    )


async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Catch-all for unhandled exceptions, including binder failures.

    Logs the full traceback server-side but returns a generic 500 response
    with no internal details leaked.  Called first by
    :class:`RequestIdMiddleware` (ID still bound) and again by Starlette's
    outer error middleware; the traceback is logged only once per request.
    """
    if not getattr(request.state, "error_logged", False):
        request.state.error_logged = True
        logger.error(
            "Unhandled exception on %s %s:\n%s",
            request.method,
            request.url.path,
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        )

    return JSONResponse(
        status_code=500,
        content=_error_body(500, "Internal server error"),
    )
