"""Framework-neutral request/response hooks that bind a request ID."""

from __future__ import annotations

import logging

from requestid.services.generator import IdGenerator
from requestid.services.request_context import RequestScope

logger = logging.getLogger("requestid.binder")

Headers = list[tuple[bytes, bytes]]


class BinderFailure(RuntimeError):
    """Raised when no identifier could be produced for an incoming request."""


class RequestIdBinder:
    """Attach an identifier to each request and echo it on the response.

    The hosting framework calls :meth:`on_request` before any handler code
    runs, :meth:`on_response` when the response headers are about to be
    sent, and :meth:`release` once request processing has ended, however it
    ended.  Headers are ASGI-style ``(name, value)`` byte pairs.
    """

    def __init__(self, generator: IdGenerator, header_name: str | None = "X-Request-ID") -> None:
        self.generator = generator
        self.header_name = header_name or None
        self._header_key = header_name.lower().encode("latin-1") if header_name else None

    def on_request(self) -> RequestScope:
        try:
            identifier = self.generator.next()
        except Exception as exc:
            logger.error("Request ID generation failed (%s): %s", self.generator.strategy, exc)
            raise BinderFailure("unable to generate a request id") from exc

        scope = RequestScope(identifier)
        scope.bind()
        return scope

    def on_response(self, scope: RequestScope, headers: Headers) -> Headers:
        scope.finalize()
        if self._header_key is None:
            return headers
        # Replace any value the handler set under the same name
        out = [(k, v) for k, v in headers if k.lower() != self._header_key]
        out.append((self._header_key, str(scope.identifier).encode("latin-1")))
        return out

    def release(self, scope: RequestScope) -> None:
        scope.release()
