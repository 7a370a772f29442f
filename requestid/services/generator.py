"""Request identifier generation (counter and random strategies)."""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RequestIdentifier:
    """Immutable identifier attached to a single request.

    ``value`` is an ``int`` for the counter strategy and a 32-character hex
    string for the random strategy.  ``str()`` gives the form used in
    response headers and log lines.
    """

    value: int | str

    def __str__(self) -> str:
        return str(self.value)


class GeneratorError(Exception):
    """Base exception for identifier generation failures."""


class GeneratorExhausted(GeneratorError):
    """Raised once the counter has passed its maximum value."""

    def __init__(self, max_value: int) -> None:
        self.max_value = max_value
        super().__init__(f"request id counter exhausted (max {max_value})")


class IdGenerator(ABC):
    """Produces a new :class:`RequestIdentifier` on every call to ``next``.

    Implementations must be safe to call from any thread or task without
    external synchronisation, and must never block.
    """

    strategy: str = ""

    @abstractmethod
    def next(self) -> RequestIdentifier:
        ...


class CounterGenerator(IdGenerator):
    """Monotonically increasing integer ids, unique for the process lifetime.

    The lock is held only for the increment-and-read, so concurrent callers
    always receive distinct values in the order they reached the counter.
    Once ``max_value`` has been handed out every further call raises
    :class:`GeneratorExhausted`; the counter is never rewound.
    """

    strategy = "counter"

    def __init__(self, start: int = 1, max_value: int = 2**64 - 1) -> None:
        self._next_value = start
        self._max_value = max_value
        self._lock = threading.Lock()

    def next(self) -> RequestIdentifier:
        with self._lock:
            value = self._next_value
            if value > self._max_value:
                raise GeneratorExhausted(self._max_value)
            self._next_value = value + 1
        return RequestIdentifier(value)

    @property
    def next_value(self) -> int:
        """Value the next successful call will return."""
        with self._lock:
            return self._next_value


class RandomGenerator(IdGenerator):
    """Random 32-character hex ids drawn from ``uuid4``.

    Stateless.  Uniqueness is probabilistic: 122 random bits make a
    collision negligible but not impossible.
    """

    strategy = "random"

    def next(self) -> RequestIdentifier:
        return RequestIdentifier(uuid.uuid4().hex)


# Process-wide singletons, one per strategy
_GENERATORS: dict[str, IdGenerator] = {
    CounterGenerator.strategy: CounterGenerator(),
    RandomGenerator.strategy: RandomGenerator(),
}


def get_generator(strategy: str) -> IdGenerator:
    """Return the shared generator for ``strategy`` (``counter`` or ``random``)."""
    try:
        return _GENERATORS[strategy.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown id strategy {strategy!r}; expected one of "
            f"{sorted(_GENERATORS)}"
        ) from None
