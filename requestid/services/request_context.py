"""Per-request scope holding the bound request ID, via contextvars."""

from __future__ import annotations

import enum
from contextvars import ContextVar, Token

from requestid.services.generator import RequestIdentifier

request_scope_var: ContextVar[RequestScope | None] = ContextVar(
    "request_scope", default=None
)


class ScopeState(enum.Enum):
    UNBOUND = "unbound"
    BOUND = "bound"
    FINALIZED = "finalized"


class ScopeStateError(RuntimeError):
    """Raised when a scope is bound twice or used after finalization."""


class RequestScope:
    """Associates one :class:`RequestIdentifier` with one in-flight request.

    Lifecycle is ``UNBOUND -> BOUND -> FINALIZED``.  ``bind`` makes the
    identifier visible to :func:`get_request_id` in the current context,
    ``finalize`` hides it again once the response is on its way, and
    ``release`` restores the contextvar to its previous value.  ``release``
    is idempotent and also finalizes, so a single ``finally`` is enough to
    clean up after aborted requests.

    Usable as a context manager::

        with RequestScope(generator.next()) as scope:
            ...
    """

    __slots__ = ("identifier", "_state", "_token")

    def __init__(self, identifier: RequestIdentifier) -> None:
        self.identifier = identifier
        self._state = ScopeState.UNBOUND
        self._token: Token | None = None

    @property
    def state(self) -> ScopeState:
        return self._state

    def bind(self) -> None:
        if self._state is not ScopeState.UNBOUND:
            raise ScopeStateError(
                f"cannot bind request scope in state {self._state.value}"
            )
        self._token = request_scope_var.set(self)
        self._state = ScopeState.BOUND

    def finalize(self) -> None:
        if self._state is ScopeState.UNBOUND:
            raise ScopeStateError("cannot finalize a request scope that was never bound")
        self._state = ScopeState.FINALIZED

    def release(self) -> None:
        if self._state is ScopeState.BOUND:
            self._state = ScopeState.FINALIZED
        if self._token is not None:
            request_scope_var.reset(self._token)
            self._token = None

    def __enter__(self) -> RequestScope:
        self.bind()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"RequestScope({self.identifier!s}, {self._state.value})"


def get_request_scope() -> RequestScope | None:
    """Return the scope bound to the current request, if any."""
    return request_scope_var.get()


def get_request_id() -> RequestIdentifier | None:
    """Return the current request's ID, or ``None`` outside a bound request."""
    scope = request_scope_var.get()
    if scope is None or scope.state is not ScopeState.BOUND:
        return None
    return scope.identifier
