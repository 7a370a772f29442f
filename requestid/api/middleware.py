"""Request ID middleware (pure ASGI)."""

from __future__ import annotations

import logging
import time

from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from requestid.api.exception_handlers import unhandled_exception_handler
from requestid.config import settings
from requestid.services.binder import RequestIdBinder
from requestid.services.generator import get_generator

logger = logging.getLogger("requestid.access")


class RequestIdMiddleware:
    """Bind a fresh request ID to every HTTP request.

    The ID is available to handler code through
    :func:`~requestid.services.request_context.get_request_id` and through
    ``request.state.request_id``, and is written to the configured response
    header.  Incoming ``X-Request-ID`` headers are ignored: every request
    gets an ID minted by this process.

    Logs ``method path status_code latency_ms [request_id]`` once per
    request.  Query params are intentionally NOT logged.

    Exceptions from the wrapped app are rendered as a structured 500 here,
    while the ID is still bound, and then re-raised.

    If the binder cannot produce an ID, :class:`BinderFailure` propagates
    before the wrapped app runs, so the app's error handling turns it into
    a 500.
    """

    def __init__(self, app: ASGIApp, binder: RequestIdBinder | None = None) -> None:
        self.app = app
        if binder is None:
            binder = RequestIdBinder(
                get_generator(settings.id_strategy), settings.response_header
            )
        self.binder = binder

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_scope = self.binder.on_request()
        rid = request_scope.identifier
        scope.setdefault("state", {})["request_id"] = rid

        start = time.perf_counter()
        status_code = 500  # default if we never see a response start
        response_started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal status_code, response_started
            if message["type"] == "http.response.start":
                response_started = True
                status_code = message["status"]
                headers = self.binder.on_response(
                    request_scope, list(message.get("headers", []))
                )
                message = {**message, "headers": headers}

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            # Render the 500 while the ID is still bound so the header and
            # body carry it; the outer error middleware sees a started
            # response and only re-raises.
            if not response_started:
                response = await unhandled_exception_handler(Request(scope), exc)
                await response(scope, receive, send_wrapper)
            raise
        finally:
            self.binder.release(request_scope)
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.info(
                "%s %s %s %.2fms [%s]",
                scope.get("method", ""),
                scope.get("path", ""),
                status_code,
                elapsed_ms,
                rid,
            )
