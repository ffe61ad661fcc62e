"""Exception types raised by the library itself.

Exceptions raised by a scheduled callable are never wrapped in these; they are
captured verbatim on the task handle.
"""

from __future__ import annotations


class DelayedTaskError(Exception):
    """Base class for errors raised by delayed_async_task."""


class InvalidDelayError(DelayedTaskError, ValueError):
    """Raised when a delay is negative or NaN and the policy is ``reject``."""

    def __init__(self, delay_ms: float) -> None:
        super().__init__(f"Invalid delay: {delay_ms!r} ms (must be a non-negative number)")
        self.delay_ms = delay_ms
