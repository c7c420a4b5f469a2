"""Durable-first, volatile-second execution.

A resilient repository pairs a MySQL repository with an in-memory one that
exposes the same methods. Every call goes to MySQL; if it raises for any
reason the same call is replayed against the record store. Nothing is
mirrored between the two, so they can drift apart while MySQL is down.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def with_fallback(primary: Callable[..., T], secondary: Callable[..., T], *, label: str = "") -> Callable[..., T]:
    """Compose two operations of identical signature.

    The result is ``primary``'s unless it raises, in which case ``secondary``
    runs with the same arguments. Errors from ``secondary`` propagate.
    """

    def run(*args: Any, **kwargs: Any) -> T:
        try:
            return primary(*args, **kwargs)
        except Exception as exc:
            logger.warning(
                "Durable store failed for %s (%s: %s); using volatile store",
                label or getattr(primary, "__qualname__", "operation"),
                type(exc).__name__,
                exc,
            )
            return secondary(*args, **kwargs)

    return run


class FallbackRepository(Generic[R]):
    def __init__(self, durable: R, volatile: R, *, name: str):
        self._durable = durable
        self._volatile = volatile
        self._name = name

    @property
    def durable(self) -> R:
        return self._durable

    @property
    def volatile(self) -> R:
        return self._volatile

    def _run(self, operation: str, /, *args: Any, **kwargs: Any) -> Any:
        call = with_fallback(
            getattr(self._durable, operation),
            getattr(self._volatile, operation),
            label=f"{self._name}.{operation}",
        )
        return call(*args, **kwargs)
