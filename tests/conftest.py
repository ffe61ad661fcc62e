"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from delayed_async_task.config import DelayedTaskSettings, get_settings

from .fakes import FakeTimerScheduler


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep the developer's environment and `.env` out of every test."""
    monkeypatch.delenv("DELAYED_TASK_LOG_LEVEL", raising=False)
    monkeypatch.delenv("DELAYED_TASK_INVALID_DELAY_POLICY", raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_timer() -> FakeTimerScheduler:
    """Provide a virtual-time timer scheduler."""
    return FakeTimerScheduler()


@pytest.fixture
def clamp_settings() -> DelayedTaskSettings:
    return DelayedTaskSettings(invalid_delay_policy="clamp")


@pytest.fixture
def reject_settings() -> DelayedTaskSettings:
    return DelayedTaskSettings(invalid_delay_policy="reject")


@pytest.fixture
def restore_package_logger() -> Iterator[logging.Logger]:
    """Undo configure_logging() so later tests keep pytest's log capture."""
    package_logger = logging.getLogger("delayed_async_task")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    yield package_logger
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    for handler in handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = propagate
