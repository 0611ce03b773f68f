"""
Settings System - Readiness Callback Queue.

============================================================
RESPONSIBILITY
============================================================
Ordered buffer of subscribers waiting for a one-time
readiness event.

- FIFO delivery
- One failing subscriber never aborts the batch
- Cleared after every flush, reusable afterwards

============================================================
"""

import logging
from typing import Any, Callable, List, Tuple

from core.exceptions import CallbackFailure


ReadyCallback = Callable[[Any], None]


class ReadinessCallbackQueue:
    """FIFO queue of readiness callbacks."""

    def __init__(self):
        self._items: List[ReadyCallback] = []
        self._logger = logging.getLogger(__name__)

    def __len__(self) -> int:
        return len(self._items)

    def enqueue(self, callback: ReadyCallback) -> None:
        """Append a callback to the tail."""
        if not callable(callback):
            raise TypeError(f"Readiness callback must be callable, got {type(callback).__name__}")
        self._items.append(callback)

    def snapshot(self) -> Tuple[ReadyCallback, ...]:
        """Get the pending callbacks without draining them."""
        return tuple(self._items)

    def flush(self, value: Any) -> List[CallbackFailure]:
        """
        Invoke every queued callback with value, in insertion order.

        Args:
            value: Passed to each callback

        Returns:
            Failures raised by individual callbacks (already logged)
        """
        pending, self._items = self._items, []
        failures: List[CallbackFailure] = []

        for position, callback in enumerate(pending):
            try:
                callback(value)
            except Exception as e:
                failure = CallbackFailure(
                    message="Error in settings system callback",
                    callback=getattr(callback, "__qualname__", repr(callback)),
                    position=position,
                    cause=e,
                )
                self._logger.error(failure.to_log_format())
                failures.append(failure)

        return failures


__all__ = ["ReadyCallback", "ReadinessCallbackQueue"]
