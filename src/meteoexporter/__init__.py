"""
Prometheus exporter for the latest readings of a MeteoTrentino weather station.

Polls the station endpoint, keeps the freshest temperature, rainfall and
humidity values as labelled gauges and reports station health.
"""

try:
    from importlib import metadata

    __version__ = metadata.version("meteotrentino-exporter")
except Exception:
    __version__ = "unknown"

from .client import StationClient
from .config import ExporterConfig
from .exceptions import ConfigurationError, FetchError, MeteoExporterError, ParseError
from .models import (
    Accepted,
    CycleReport,
    LabelKey,
    MetricKind,
    Rejected,
    RejectReason,
    Sample,
    StationSnapshot,
    TimeSeries,
)
from .parser import StationParser, parse_station_document
from .pipeline import RefreshPipeline
from .publisher import GaugeRegistry, Publisher
from .scheduler import RefreshScheduler
from .timestamps import FixedOffsetPolicy, TimestampPolicy, ZoneInfoPolicy, policy_for
from .validator import STALENESS_WINDOW, evaluate

__all__ = [
    # Pipeline
    "ExporterConfig",
    "RefreshPipeline",
    "RefreshScheduler",
    "StationClient",
    "StationParser",
    "parse_station_document",
    "evaluate",
    "STALENESS_WINDOW",
    "GaugeRegistry",
    "Publisher",
    # Timestamp policies
    "TimestampPolicy",
    "FixedOffsetPolicy",
    "ZoneInfoPolicy",
    "policy_for",
    # Models
    "Sample",
    "TimeSeries",
    "StationSnapshot",
    "LabelKey",
    "MetricKind",
    "Accepted",
    "Rejected",
    "RejectReason",
    "CycleReport",
    # Exceptions
    "MeteoExporterError",
    "FetchError",
    "ParseError",
    "ConfigurationError",
]
