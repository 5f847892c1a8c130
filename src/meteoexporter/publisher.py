"""
Gauge registry and publication of refresh outcomes.
"""

import logging
from datetime import datetime
from typing import Mapping, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Gauge

from .models import Accepted, LabelKey, MetricKind, Outcome, Rejected, RejectReason

logger = logging.getLogger(__name__)

LABEL_NAMES = ("station_code", "place")

# name, help
GAUGE_DEFINITIONS = {
    MetricKind.TEMPERATURE: (
        "temperature_celsius",
        "Current outside temperature in degrees Celsius",
    ),
    MetricKind.RAIN: ("rain_mm", "Amount of rain in the last period in mm"),
    MetricKind.HUMIDITY: ("humidity_percent", "Relative humidity in percentage"),
}
HEALTH_GAUGE = ("stations_up", "Number of stations successfully queried")


class GaugeRegistry:
    """
    Labelled gauges for the three metric kinds plus the station-health gauge.

    Wraps prometheus_client gauges registered on ``registry`` (the process
    default when omitted). Individual operations are thread-safe.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = REGISTRY if registry is None else registry
        self._gauges = {
            kind: Gauge(name, help_text, LABEL_NAMES, registry=self.registry)
            for kind, (name, help_text) in GAUGE_DEFINITIONS.items()
        }
        self._health = Gauge(*HEALTH_GAUGE, registry=self.registry)

    def set(self, kind: MetricKind, labels: LabelKey, value: float) -> None:
        self._gauges[kind].labels(**labels.as_labels()).set(value)

    def delete(self, kind: MetricKind, labels: LabelKey) -> None:
        """Remove the series for ``labels``, if present."""
        try:
            self._gauges[kind].remove(labels.station_code, labels.place)
        except KeyError:
            pass  # nothing published yet

    def set_health(self, value: float) -> None:
        self._health.set(value)


class Publisher:
    """Applies per-kind outcomes to the gauge registry for one station."""

    def __init__(self, registry: GaugeRegistry, label_key: LabelKey):
        self.registry = registry
        self.label_key = label_key

    def publish(self, outcomes: Mapping[MetricKind, Outcome], now: datetime) -> bool:
        """
        Set accepted values, evict rejected ones and update station health.

        Returns:
            True if at least one metric kind was published
        """
        updated = False
        for kind, outcome in outcomes.items():
            if isinstance(outcome, Accepted):
                self.registry.set(kind, self.label_key, outcome.value)
                logger.debug("Published %s=%s", kind.value, outcome.value)
                updated = True
                continue

            self.registry.delete(kind, self.label_key)
            self._log_rejection(outcome, now)

        self.registry.set_health(1 if updated else 0)
        return updated

    def evict_all(self) -> None:
        """Drop every gauge this station owns and mark it down."""
        for kind in MetricKind:
            self.registry.delete(kind, self.label_key)
        self.registry.set_health(0)

    @staticmethod
    def _log_rejection(outcome: Rejected, now: datetime) -> None:
        if outcome.reason is RejectReason.DISABLED:
            return
        if outcome.reason is RejectReason.EMPTY:
            logger.warning("No samples in %s series", outcome.kind.value)
        elif outcome.reason is RejectReason.STALE:
            logger.warning(
                "Rejected stale %s sample with timestamp %s (current time %s)",
                outcome.kind.value,
                outcome.sample.timestamp.isoformat() if outcome.sample else "unknown",
                now.isoformat(timespec="seconds"),
            )
