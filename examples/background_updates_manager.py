#!/usr/bin/env python3
"""Periodic background updates built on DelayedAsyncTask.

This demonstrates the intended usage pattern:

* schedule the next update only after the previous one finished, so runs never
  overlap
* stop deterministically: abort the pending run, or await the one in progress
* inspect the last run for an uncaught exception instead of losing it

Run it for a few seconds and it prints each update, then shuts down cleanly.
"""

from __future__ import annotations

import argparse
import asyncio
import random
from collections.abc import Awaitable, Callable, Sequence

from delayed_async_task import DelayedAsyncTask, get_settings


class BackgroundUpdatesManager:
    """Runs ``update`` every ``interval_ms`` until ``stop()`` is awaited."""

    def __init__(self, update: Callable[[], Awaitable[None]], interval_ms: float) -> None:
        self._update = update
        self._interval_ms = interval_ms
        self._delayed: DelayedAsyncTask[Exception] | None = None
        self._stopped = False

    def start(self) -> None:
        self._stopped = False
        self._schedule_next()

    async def stop(self) -> None:
        self._stopped = True
        delayed = self._delayed
        if delayed is None:
            return
        if not delayed.try_abort():
            # Too late to abort: wait so nothing keeps running in the background.
            await delayed.await_completion_if_currently_executing()
        self._delayed = None

    def _schedule_next(self) -> None:
        self._delayed = DelayedAsyncTask(
            self._run_update, self._interval_ms, name="background-update"
        )

    async def _run_update(self) -> None:
        try:
            await self._update()
        finally:
            if not self._stopped:
                self._schedule_next()


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run periodic background updates for a while.")
    parser.add_argument("--interval-ms", type=float, default=500, help="Delay between updates")
    parser.add_argument("--run-seconds", type=float, default=3, help="How long to keep running")
    return parser.parse_args(argv)


async def _run(interval_ms: float, run_seconds: float) -> None:
    counter = 0

    async def fetch_update() -> None:
        nonlocal counter
        counter += 1
        await asyncio.sleep(random.uniform(0.05, 0.2))
        print(f"Update #{counter} applied")

    manager = BackgroundUpdatesManager(fetch_update, interval_ms)
    manager.start()
    await asyncio.sleep(run_seconds)
    await manager.stop()
    print(f"Stopped after {counter} updates")


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    get_settings().setup_logging()
    asyncio.run(_run(args.interval_ms, args.run_seconds))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
