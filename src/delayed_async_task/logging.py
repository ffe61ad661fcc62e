"""Structured logging for delayed tasks.

Every record emitted by this package carries some of the task fields below as
``extra``. ``JsonFormatter`` lifts them into top-level JSON keys so a task's
lifecycle can be followed by ``task_name``.

The library never configures logging on import. ``configure_logging`` only
touches the ``delayed_async_task`` logger, never the root logger.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

PACKAGE_LOGGER = "delayed_async_task"

TASK_FIELDS: tuple[str, ...] = (
    "task_name",
    "from_status",
    "to_status",
    "delay_ms",
    "delay_seconds",
    "error_type",
)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with task fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in TASK_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str, *, stream: TextIO | None = None) -> logging.Logger:
    """Send this package's records to ``stream`` (stderr by default) as JSON.

    Calling it again replaces the handler installed by the previous call.
    """

    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(package_logger.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream=stream if stream is not None else sys.stderr)
    handler.setFormatter(JsonFormatter())

    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    # Records are already written here; the application's root handlers would
    # print them a second time.
    package_logger.propagate = False
    return package_logger
