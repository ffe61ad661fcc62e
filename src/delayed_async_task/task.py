"""One-time delayed execution of an asynchronous callable.

``DelayedAsyncTask`` is a ``loop.call_later`` substitute for coroutine
functions. On top of scheduling a single delayed execution it:

- exposes the execution status (pending, executing, completed, aborted,
  failed due to an uncaught exception);
- can abort an execution that has not started yet;
- can await an execution that has already started, which is what makes a
  graceful, deterministic shutdown possible;
- captures any exception raised by the callable instead of letting it reach
  the event loop's exception handler.

A typical shutdown sequence::

    if not delayed.try_abort():
        await delayed.await_completion_if_currently_executing()
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import math
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar, cast

from delayed_async_task.config import DelayedTaskSettings, InvalidDelayPolicy, get_settings
from delayed_async_task.errors import InvalidDelayError
from delayed_async_task.status import DelayedTaskStatus, transition
from delayed_async_task.timer import TimerHandle, TimerScheduler

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseException)

AsyncTaskCallable = Callable[[], Awaitable[object]]


def resolve_delay_seconds(
    delay_ms: float,
    *,
    policy: InvalidDelayPolicy,
    task_name: str | None = None,
) -> float:
    """Convert a millisecond delay to the seconds expected by ``call_later``.

    Negative and NaN delays are invalid. Under the ``clamp`` policy they become
    zero; under ``reject`` they raise :class:`InvalidDelayError`. Infinity is
    accepted and means the timer never fires. Strings are not delays, even
    numeric ones.
    """

    if isinstance(delay_ms, (str, bytes)):
        raise TypeError(f"delay_ms must be a number, not {type(delay_ms).__name__}")
    delay = float(delay_ms)
    if math.isnan(delay) or delay < 0:
        if policy == "reject":
            raise InvalidDelayError(delay_ms)
        logger.warning(
            "Invalid delay clamped to 0 ms",
            extra={"task_name": task_name, "delay_ms": delay_ms},
        )
        delay = 0.0
    return delay / 1000.0


class DelayedAsyncTask(Generic[E]):
    """Schedules a single delayed execution of ``task``.

    The timer is armed immediately on construction. The instance must be
    created while an event loop is running: the execution always runs on that
    loop, even when a custom ``timer`` is injected.

    Args:
        task: Zero-argument callable returning an awaitable. It is invoked at
            most once, and never before the delay elapses.
        delay_ms: Delay in milliseconds before execution starts.
        timer: Timer primitive used to arm the delay. Defaults to the running
            event loop.
        settings: Overrides the process-wide settings (invalid delay policy).
        name: Label used for logging and for the underlying ``asyncio.Task``.
    """

    def __init__(
        self,
        task: AsyncTaskCallable,
        delay_ms: float,
        *,
        timer: TimerScheduler | None = None,
        settings: DelayedTaskSettings | None = None,
        name: str | None = None,
    ) -> None:
        self._task = task
        self._status = DelayedTaskStatus.PENDING
        self._uncaught_rejection: E | None = None
        self._execution: asyncio.Task[None] | None = None
        self._completion: asyncio.Event | None = None
        self.name = name or f"delayed-task-{id(self):x}"

        self._loop = asyncio.get_running_loop()
        policy = (settings or get_settings()).invalid_delay_policy
        delay_seconds = resolve_delay_seconds(delay_ms, policy=policy, task_name=self.name)

        # The timer callback is deliberately synchronous: it only dispatches the
        # execution and keeps a reference to it, so no coroutine is left dangling.
        scheduler: TimerScheduler = timer if timer is not None else self._loop
        self._timer: TimerHandle | None = scheduler.call_later(
            delay_seconds, self._on_timer_fired
        )
        logger.debug(
            "Delayed task scheduled",
            extra={"task_name": self.name, "delay_seconds": delay_seconds},
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} status={self._status.value}>"

    @property
    def status(self) -> DelayedTaskStatus:
        return self._status

    @property
    def is_pending(self) -> bool:
        """True if the task is waiting for its delay to elapse."""
        return self._status is DelayedTaskStatus.PENDING

    @property
    def is_executing(self) -> bool:
        """True while the callable is running."""
        return self._status is DelayedTaskStatus.EXECUTING

    @property
    def is_aborted(self) -> bool:
        """True if ``try_abort()`` prevented the execution."""
        return self._status is DelayedTaskStatus.ABORTED_BEFORE_EXECUTION

    @property
    def is_completed(self) -> bool:
        """True if the callable finished without raising."""
        return self._status is DelayedTaskStatus.COMPLETED_SUCCESSFULLY

    @property
    def is_uncaught_rejection_occurred(self) -> bool:
        """True if the callable raised an exception."""
        return self._status is DelayedTaskStatus.FAILED_DUE_TO_UNCAUGHT_REJECTION

    @property
    def uncaught_rejection(self) -> E | None:
        """The exception raised by the callable, or ``None``.

        ``None`` means execution did not happen yet, was aborted, or
        completed successfully.
        """
        return self._uncaught_rejection

    def try_abort(self) -> bool:
        """Abort the pending execution, if there still is one.

        Returns:
            ``True`` if a pending execution was aborted. ``False`` if the task is
            already executing or in a terminal status; nothing changes then.
        """
        if self._status is not DelayedTaskStatus.PENDING:
            return False

        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        self._set_status(DelayedTaskStatus.ABORTED_BEFORE_EXECUTION)
        return True

    async def await_completion_if_currently_executing(self) -> None:
        """Wait for the ongoing execution, or return at once if there is none.

        Safe to call from any number of coroutines at the same time; all of them
        resume when the execution settles. Never raises on behalf of the
        callable. Cancelling a waiter does not cancel the execution.
        """
        completion = self._completion
        if completion is None:
            return
        await completion.wait()

    def _on_timer_fired(self) -> None:
        # A timer cancelled by try_abort() must not start anything.
        if self._status is not DelayedTaskStatus.PENDING:
            return

        self._timer = None
        self._set_status(DelayedTaskStatus.EXECUTING)
        self._completion = asyncio.Event()
        self._execution = self._loop.create_task(self._handle_task_execution(), name=self.name)
        self._execution.add_done_callback(self._on_execution_done)

    async def _handle_task_execution(self) -> None:
        try:
            result = self._task()
            if inspect.isawaitable(result):
                await result
        except Exception as err:
            self._record_failure(err)
        except BaseException as err:
            # Cancellation and interpreter exits still settle the task, but keep
            # propagating.
            self._record_failure(err)
            raise
        else:
            self._set_status(DelayedTaskStatus.COMPLETED_SUCCESSFULLY)
        finally:
            self._release_completion()

    def _on_execution_done(self, execution: asyncio.Task[None]) -> None:
        # Cancelled before its first step: the wrapper body never ran.
        if self._status is not DelayedTaskStatus.EXECUTING:
            return
        self._record_failure(asyncio.CancelledError())
        self._release_completion()

    def _release_completion(self) -> None:
        completion, self._completion = self._completion, None
        self._execution = None
        if completion is not None:
            completion.set()

    def _record_failure(self, err: BaseException) -> None:
        self._uncaught_rejection = cast(E, err)
        self._set_status(DelayedTaskStatus.FAILED_DUE_TO_UNCAUGHT_REJECTION)
        logger.warning(
            "Delayed task raised an uncaught exception",
            extra={"task_name": self.name, "error_type": type(err).__name__},
            exc_info=err,
        )

    def _set_status(self, to: DelayedTaskStatus) -> None:
        previous = self._status
        self._status = transition(current=previous, to=to)
        logger.debug(
            "Delayed task status changed",
            extra={
                "task_name": self.name,
                "from_status": previous.value,
                "to_status": to.value,
            },
        )
