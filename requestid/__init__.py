"""Per-request correlation IDs for ASGI / FastAPI applications."""

from __future__ import annotations

from requestid.api.dependencies import RequestID, require_request_id
from requestid.api.middleware import RequestIdMiddleware
from requestid.services.binder import BinderFailure, RequestIdBinder
from requestid.services.generator import (
    CounterGenerator,
    GeneratorError,
    GeneratorExhausted,
    IdGenerator,
    RandomGenerator,
    RequestIdentifier,
    get_generator,
)
from requestid.services.request_context import (
    RequestScope,
    ScopeStateError,
    get_request_id,
    get_request_scope,
)

__all__ = [
    "RequestIdMiddleware",
    "RequestIdBinder",
    "BinderFailure",
    "RequestID",
    "require_request_id",
    "RequestIdentifier",
    "IdGenerator",
    "CounterGenerator",
    "RandomGenerator",
    "GeneratorError",
    "GeneratorExhausted",
    "get_generator",
    "RequestScope",
    "ScopeStateError",
    "get_request_id",
    "get_request_scope",
]
