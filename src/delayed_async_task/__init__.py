"""Delayed Async Task.

A one-time scheduler for a single delayed execution of an async callable:
- status properties for the execution lifecycle
- aborting a pending execution
- awaiting an ongoing execution for graceful shutdown
- capturing uncaught exceptions instead of leaking them to the event loop
"""

__version__ = "0.1.0"

from delayed_async_task.config import DelayedTaskSettings, get_settings
from delayed_async_task.errors import DelayedTaskError, InvalidDelayError
from delayed_async_task.status import DelayedTaskStatus, IllegalTransitionError
from delayed_async_task.task import DelayedAsyncTask

__all__ = [
    "__version__",
    "DelayedAsyncTask",
    "DelayedTaskError",
    "DelayedTaskSettings",
    "DelayedTaskStatus",
    "IllegalTransitionError",
    "InvalidDelayError",
    "get_settings",
]
