"""Progress sinks for checksum computations.

A sink is any callable taking the completed percentage as a float. The
adapter calls it from the worker thread once per window and once more with
exactly 100.0 when the source is exhausted.
"""

import asyncio
import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


def null_progress(percent: float) -> None:
    """Discard a progress report."""


class LoopProgress:
    """Deliver progress reports on an event loop.

    Reports are scheduled with ``call_soon_threadsafe``, so the callback runs
    on the loop thread in report order and never blocks the worker.
    """

    def __init__(self, callback: ProgressCallback, loop: asyncio.AbstractEventLoop) -> None:
        self.callback = callback
        self.loop = loop

    def __call__(self, percent: float) -> None:
        self.loop.call_soon_threadsafe(self.callback, percent)


class ProgressTracker:
    """Logs computation progress at fixed percentage steps.

    Features:
    - Last reported percentage
    - Number of reports received
    - Elapsed time
    - Logging every ``log_step`` percent and on completion
    """

    def __init__(self, label: str, log_step: float = 10.0):
        """Initialize progress tracker.

        Args:
            label: Name of the source being checksummed (used in log lines)
            log_step: Log progress every N percent
        """
        self.label = label
        self.log_step = log_step

        self.percent = 0.0
        self.reports = 0
        self.start_time = time.time()
        self._next_log = log_step

    def __call__(self, percent: float) -> None:
        """Record a progress report.

        Args:
            percent: Completed percentage
        """
        self.percent = percent
        self.reports += 1

        if percent >= 100.0:
            logger.info(
                f"Checksum complete for {self.label} "
                f"in {self.elapsed_seconds:.2f}s"
            )
        elif percent >= self._next_log:
            logger.info(f"Progress for {self.label}: {percent:.2f}%")
            while self._next_log <= percent:
                self._next_log += self.log_step

    @property
    def elapsed_seconds(self) -> float:
        """Seconds since the tracker was created."""
        return time.time() - self.start_time
