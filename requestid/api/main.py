from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from requestid.api.dependencies import RequestID
from requestid.api.exception_handlers import (
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from requestid.api.middleware import RequestIdMiddleware
from requestid.api.schemas import ErrorResponse, HealthResponse, RequestIdResponse
from requestid.config import Settings, settings as default_settings
from requestid.logging_config import setup_logging
from requestid.services.binder import RequestIdBinder
from requestid.services.generator import get_generator

logger = logging.getLogger("requestid")

_DESCRIPTION = """\
Attaches a unique ID to every request.

Each request is assigned an ID before any handler runs.  Handlers read it
with `get_request_id()` or the `RequestID` dependency, and the same value
is returned to the client in the `X-Request-ID` response header (the
header name is configurable and may be disabled).

Incoming `X-Request-ID` headers are ignored.
"""


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API with a request ID binder configured from ``settings``."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format)
        logger.info(
            "Request IDs: strategy=%s header=%s",
            settings.id_strategy,
            settings.response_header or "disabled",
        )
        yield

    app = FastAPI(
        title="Request ID API",
        version="0.1.0",
        summary="Per-request correlation IDs",
        description=_DESCRIPTION,
        lifespan=lifespan,
    )

    # Exception handlers
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    binder = RequestIdBinder(
        get_generator(settings.id_strategy), settings.response_header
    )
    app.add_middleware(RequestIdMiddleware, binder=binder)

    @app.get(
        "/",
        summary="Show the request ID",
        response_model=RequestIdResponse,
        responses={500: {"model": ErrorResponse, "description": "No ID could be bound"}},
    )
    async def show_request_id(rid: RequestID):
        return {"request_id": str(rid), "message": f"My id is {rid}"}

    @app.get(
        "/health",
        tags=["system"],
        summary="Health check",
        response_model=HealthResponse,
    )
    async def health():
        return {
            "status": "ok",
            "id_strategy": settings.id_strategy,
            "response_header": settings.response_header or None,
        }

    return app


app = create_app()
