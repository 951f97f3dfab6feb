"""Interval scheduler driving monitoring cycles on an asyncio loop."""

import asyncio
import logging
import re
from typing import Awaitable, Callable, Protocol

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[None]]

_DURATION_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*([smh]?)$")
_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600}


class Scheduler(Protocol):
    def schedule(self, expression: str, callback: Job) -> None:
        ...


def parse_interval(expression: str | int | float) -> float:
    """Convert an interval expression to seconds.

    Accepts plain seconds (``30``), suffixed durations (``30s``, ``5m``,
    ``1h``) and the cron minute-step forms ``* * * * *`` and
    ``*/N * * * *``.

    Raises:
        ValueError: If the expression is not understood or not positive.
    """
    if isinstance(expression, (int, float)):
        seconds = float(expression)
    else:
        text = expression.strip()
        fields = text.split()
        if len(fields) == 5:
            minute, rest = fields[0], fields[1:]
            if any(f != "*" for f in rest):
                raise ValueError(f"Unsupported cron expression: {expression!r}")
            if minute == "*":
                seconds = 60.0
            elif minute.startswith("*/") and minute[2:].isdigit():
                seconds = int(minute[2:]) * 60.0
            else:
                raise ValueError(f"Unsupported cron expression: {expression!r}")
        else:
            match = _DURATION_RE.match(text.lower())
            if not match:
                raise ValueError(f"Invalid interval expression: {expression!r}")
            seconds = float(match.group(1)) * _UNIT_SECONDS[match.group(2)]

    if seconds <= 0:
        raise ValueError(f"Interval must be positive: {expression!r}")
    return seconds


class IntervalScheduler:
    """Run registered jobs repeatedly at fixed intervals.

    Each job awaits its callback before sleeping, so runs of the same job
    never overlap.
    """

    def __init__(self) -> None:
        self.jobs: list[tuple[float, Job]] = []
        self._tasks: list[asyncio.Task] = []
        self._stopping = False

    def schedule(self, expression: str, callback: Job) -> None:
        seconds = parse_interval(expression)
        self.jobs.append((seconds, callback))
        logger.info(f"Scheduled job every {seconds:g}s ({expression})")

    async def run(self, iterations: int | None = None) -> None:
        """Run all jobs until stopped, or ``iterations`` times each.

        ``stop()`` ends the run normally. Cancelling the task awaiting
        ``run`` propagates the cancellation. If any job raises, the
        remaining jobs are cancelled and the error propagates.
        """
        self._stopping = False
        self._tasks = [
            asyncio.create_task(self._run_job(seconds, callback, iterations))
            for seconds, callback in self.jobs
        ]
        try:
            await asyncio.gather(*self._tasks)
        except asyncio.CancelledError:
            if not self._stopping:
                logger.info("Scheduler cancelled")
                raise
            logger.info("Scheduler stopped")
        finally:
            for task in self._tasks:
                task.cancel()
            self._tasks = []

    def stop(self) -> None:
        self._stopping = True
        for task in self._tasks:
            task.cancel()

    async def _run_job(self, seconds: float, callback: Job, iterations: int | None) -> None:
        count = 0
        while True:
            await callback()
            count += 1
            if iterations is not None and count >= iterations:
                return
            await asyncio.sleep(seconds)
