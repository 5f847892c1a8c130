"""
Periodic execution of refresh cycles.
"""

import logging
import threading
from typing import Any, Callable, List

import schedule

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Runs a job once immediately and then every ``interval_seconds``.

    Jobs run one at a time on the thread calling :meth:`run_forever`. A tick
    that comes due while a cycle is still running is coalesced into a single
    run after it finishes. Exceptions raised by the job are logged and never
    stop the scheduler.

    The next run is computed when a cycle finishes, so the effective period
    is the interval plus the cycle duration plus up to ``poll_seconds``; it
    drifts rather than firing on a fixed wall-clock grid.
    """

    def __init__(
        self,
        job: Callable[[], Any],
        interval_seconds: float,
        poll_seconds: float = 1.0,
    ):
        self.job = job
        self.interval_seconds = interval_seconds
        self.poll_seconds = min(poll_seconds, interval_seconds)
        self._scheduler = schedule.Scheduler()
        self._stop = threading.Event()

    def _run_job(self) -> None:
        try:
            self.job()
        except Exception:
            logger.exception("Refresh cycle raised an unexpected error")

    def start(self) -> schedule.Job:
        """Run the first cycle now and arm the periodic timer."""
        self._run_job()
        return self._scheduler.every(self.interval_seconds).seconds.do(self._run_job)

    def run_pending(self) -> None:
        self._scheduler.run_pending()

    def run_forever(self) -> None:
        """Start and keep ticking until :meth:`stop` is called."""
        self.start()
        while not self._stop.is_set():
            self.run_pending()
            self._stop.wait(self.poll_seconds)
        self._scheduler.clear()

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    @property
    def jobs(self) -> List[schedule.Job]:
        return list(self._scheduler.jobs)
