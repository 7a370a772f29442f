"""FastAPI dependency injecting the current request's ID."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from requestid.services.generator import RequestIdentifier

logger = logging.getLogger("requestid.api")


def require_request_id(request: Request) -> RequestIdentifier:
    """Return the ID bound by :class:`RequestIdMiddleware`.

    Raises a 500 when the middleware is not installed: handlers that depend
    on an ID must never run without one.
    """
    rid = getattr(request.state, "request_id", None)
    if rid is None:
        logger.error(
            "Unable to get request id: did you forget to add RequestIdMiddleware?"
        )
        raise HTTPException(status_code=500, detail="Request ID unavailable")
    return rid


RequestID = Annotated[RequestIdentifier, Depends(require_request_id)]
