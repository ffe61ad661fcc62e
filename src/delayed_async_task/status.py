from __future__ import annotations

from enum import Enum

from delayed_async_task.errors import DelayedTaskError


class DelayedTaskStatus(str, Enum):
    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETED_SUCCESSFULLY = "completed_successfully"
    ABORTED_BEFORE_EXECUTION = "aborted_before_execution"
    FAILED_DUE_TO_UNCAUGHT_REJECTION = "failed_due_to_uncaught_rejection"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: frozenset[DelayedTaskStatus] = frozenset(
    {
        DelayedTaskStatus.COMPLETED_SUCCESSFULLY,
        DelayedTaskStatus.ABORTED_BEFORE_EXECUTION,
        DelayedTaskStatus.FAILED_DUE_TO_UNCAUGHT_REJECTION,
    }
)


ALLOWED_TRANSITIONS: dict[DelayedTaskStatus, set[DelayedTaskStatus]] = {
    DelayedTaskStatus.PENDING: {
        DelayedTaskStatus.EXECUTING,
        DelayedTaskStatus.ABORTED_BEFORE_EXECUTION,
    },
    DelayedTaskStatus.EXECUTING: {
        DelayedTaskStatus.COMPLETED_SUCCESSFULLY,
        DelayedTaskStatus.FAILED_DUE_TO_UNCAUGHT_REJECTION,
    },
    DelayedTaskStatus.COMPLETED_SUCCESSFULLY: set(),
    DelayedTaskStatus.ABORTED_BEFORE_EXECUTION: set(),
    DelayedTaskStatus.FAILED_DUE_TO_UNCAUGHT_REJECTION: set(),
}


class IllegalTransitionError(DelayedTaskError, ValueError):
    pass


def transition(*, current: DelayedTaskStatus, to: DelayedTaskStatus) -> DelayedTaskStatus:
    """Validate a single status edge and return the new status.

    Terminal statuses have no outgoing edges, so this also guarantees that no
    status is ever revisited.
    """

    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.value} -> {to.value}")
    return to
