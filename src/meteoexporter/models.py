"""
Data models for station snapshots and per-series refresh outcomes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union


class MetricKind(str, Enum):
    """The three series reported by a station."""

    TEMPERATURE = "temperature"
    RAIN = "rain"
    HUMIDITY = "humidity"


class RejectReason(str, Enum):
    """Why a series did not produce a publishable value."""

    DISABLED = "disabled"  # turned off by configuration, not a fault
    EMPTY = "empty"
    STALE = "stale"


@dataclass(frozen=True)
class Sample:
    """A single timestamped reading."""

    timestamp: datetime
    value: float
    unit: Optional[str] = None


@dataclass
class TimeSeries:
    """Samples for one metric kind, in the order delivered by the source."""

    kind: MetricKind
    samples: List[Sample] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def latest(self) -> Optional[Sample]:
        """The current reading, or None for an empty series."""
        if not self.samples:
            return None
        return self.samples[-1]


@dataclass
class StationSnapshot:
    """The three series produced by one parse of one fetch."""

    temperature: TimeSeries
    rain: TimeSeries
    humidity: TimeSeries

    def series(self, kind: MetricKind) -> TimeSeries:
        return {
            MetricKind.TEMPERATURE: self.temperature,
            MetricKind.RAIN: self.rain,
            MetricKind.HUMIDITY: self.humidity,
        }[kind]


@dataclass(frozen=True)
class LabelKey:
    """Station code and place identifying the gauges a cycle owns."""

    station_code: str
    place: str

    def as_labels(self) -> Dict[str, str]:
        return {"station_code": self.station_code, "place": self.place}


@dataclass(frozen=True)
class Accepted:
    """The latest sample is fresh and its value should be published."""

    kind: MetricKind
    value: float
    sample: Sample


@dataclass(frozen=True)
class Rejected:
    """The series yields nothing publishable this cycle."""

    kind: MetricKind
    reason: RejectReason
    sample: Optional[Sample] = None  # set for STALE


Outcome = Union[Accepted, Rejected]


@dataclass
class CycleReport:
    """What a single refresh cycle did."""

    started_at: datetime
    outcomes: Dict[MetricKind, Outcome] = field(default_factory=dict)
    healthy: bool = False
    error: Optional[Exception] = None

    @property
    def updated(self) -> List[MetricKind]:
        """Metric kinds published in this cycle."""
        return [
            kind
            for kind, outcome in self.outcomes.items()
            if isinstance(outcome, Accepted)
        ]
