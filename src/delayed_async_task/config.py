"""Configuration for delayed tasks.

Settings are loaded from:
- environment variables prefixed with ``DELAYED_TASK_``
- and a local `.env` file (if present)

Nothing here is required: every field has a default, so importing the library
never fails because of the environment.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from delayed_async_task.logging import configure_logging

InvalidDelayPolicy = Literal["clamp", "reject"]


class DelayedTaskSettings(BaseSettings):
    """Settings shared by all delayed tasks in the process.

    Environment variables:
    - DELAYED_TASK_LOG_LEVEL             (optional)
    - DELAYED_TASK_INVALID_DELAY_POLICY  (optional, "clamp" or "reject")

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `DelayedTaskSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        description="Level of the delayed_async_task logger, applied by setup_logging()",
    )

    invalid_delay_policy: InvalidDelayPolicy = Field(
        default="clamp",
        description=(
            "What to do with a negative or NaN delay. "
            "'clamp' runs the task on the next timer tick and logs a warning; "
            "'reject' raises InvalidDelayError from the constructor."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="DELAYED_TASK_",
        env_file=".env",
        extra="ignore",
    )

    def setup_logging(self) -> None:
        """Configure the package logger based on settings.

        The log level is only checked here, so a bad value never affects task
        construction.
        """

        level = self.log_level.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {self.log_level!r}")
        configure_logging(level)


@lru_cache(maxsize=1)
def get_settings() -> DelayedTaskSettings:
    return DelayedTaskSettings()
