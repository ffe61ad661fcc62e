"""Unit tests for the JSON log formatter."""

from __future__ import annotations

import io
import json
import logging

from delayed_async_task.logging import JsonFormatter, configure_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="delayed_async_task.task",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Delayed task %s",
        args=("failed",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_lifts_task_fields() -> None:
    payload = json.loads(
        JsonFormatter().format(
            _record(task_name="refresh", from_status="executing", to_status="failed", other=1)
        )
    )

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "delayed_async_task.task"
    assert payload["message"] == "Delayed task failed"
    assert payload["task_name"] == "refresh"
    assert payload["from_status"] == "executing"
    assert payload["to_status"] == "failed"
    assert "other" not in payload
    assert "delay_ms" not in payload
    assert "exception" not in payload


def test_json_formatter_includes_exception() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError as err:
        record = _record()
        record.exc_info = (type(err), err, err.__traceback__)

    payload = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: boom" in payload["exception"]


def test_configure_logging_only_touches_package_logger(
    restore_package_logger: logging.Logger,
) -> None:
    root_handlers = list(logging.getLogger().handlers)
    stream = io.StringIO()

    configure_logging("info", stream=stream)
    configure_logging("info", stream=stream)

    assert logging.getLogger().handlers == root_handlers
    assert restore_package_logger.propagate is False
    assert len(restore_package_logger.handlers) == 1

    logging.getLogger("delayed_async_task.task").info(
        "Delayed task scheduled", extra={"task_name": "t1", "delay_seconds": 0.5}
    )
    logging.getLogger("delayed_async_task.task").debug("hidden")

    lines = [line for line in stream.getvalue().splitlines() if line.strip()]
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["message"] == "Delayed task scheduled"
    assert payload["task_name"] == "t1"
    assert payload["delay_seconds"] == 0.5
