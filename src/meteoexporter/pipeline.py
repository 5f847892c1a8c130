"""
One refresh cycle: fetch, parse, validate each series, publish.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .client import StationClient
from .config import ExporterConfig
from .exceptions import FetchError, ParseError
from .models import CycleReport, MetricKind
from .parser import StationParser
from .publisher import GaugeRegistry, Publisher
from .timestamps import policy_for
from .validator import evaluate

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RefreshPipeline:
    """
    Refreshes the gauges of one station.

    Cycles are serialised: a call made while another cycle is in progress
    waits for it, so a publish never interleaves with another.
    """

    def __init__(
        self,
        config: ExporterConfig,
        registry: GaugeRegistry,
        client: Optional[StationClient] = None,
        parser: Optional[StationParser] = None,
        clock: Clock = utc_now,
    ):
        self.config = config
        self.client = client or StationClient(timeout=config.request_timeout_seconds)
        self.parser = parser or StationParser(
            policy_for(config.timezone, config.utc_offset_hours)
        )
        self.publisher = Publisher(registry, config.label_key)
        self.clock = clock
        self.staleness_window = timedelta(seconds=config.staleness_window_seconds)
        self._lock = threading.Lock()

    def run_cycle(self) -> CycleReport:
        """
        Run a full refresh.

        A fetch or parse failure, or any unexpected error in those stages,
        evicts all three gauges and sets health to 0 without evaluating any
        series.

        Returns:
            CycleReport describing the outcome
        """
        with self._lock:
            now = self.clock()
            report = CycleReport(started_at=now)

            try:
                payload = self.client.fetch(self.config.url)
                snapshot = self.parser.parse(payload)
            except (FetchError, ParseError) as e:
                logger.warning("Refresh of station %s failed: %s", self.config.station_code, e)
                return self._fail(report, e)
            except Exception as e:
                logger.exception(
                    "Unexpected error refreshing station %s", self.config.station_code
                )
                return self._fail(report, e)
            logger.info("Received and parsed data")

            try:
                for kind in MetricKind:
                    report.outcomes[kind] = evaluate(
                        snapshot.series(kind),
                        self.config.enabled(kind),
                        now,
                        self.staleness_window,
                    )
                report.healthy = self.publisher.publish(report.outcomes, now)
            except Exception as e:
                logger.exception(
                    "Unexpected error publishing station %s", self.config.station_code
                )
                report.outcomes.clear()
                return self._fail(report, e)
            return report

    def _fail(self, report: CycleReport, error: Exception) -> CycleReport:
        self.publisher.evict_all()
        report.error = error
        report.healthy = False
        return report

    def close(self) -> None:
        self.client.close()
