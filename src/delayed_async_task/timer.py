"""Timer primitive consumed by :class:`DelayedAsyncTask`.

The task depends on a Protocol instead of a concrete event loop so that tests
can drive time explicitly. ``asyncio.AbstractEventLoop`` satisfies it as is:
``loop.call_later`` returns an ``asyncio.TimerHandle``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    """A scheduled one-shot callback.

    ``cancel()`` before the callback fires must prevent it; after it fired,
    ``cancel()`` must be a no-op.
    """

    def cancel(self) -> None: ...


class TimerScheduler(Protocol):
    """Schedules a callback to run once, ``delay`` seconds from now."""

    def call_later(self, delay: float, callback: Callable[[], object], /) -> TimerHandle: ...
