"""
Shared fixtures for exporter tests.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple
from unittest.mock import Mock

import pytest
from prometheus_client import CollectorRegistry

from meteoexporter.config import ExporterConfig
from meteoexporter.publisher import GaugeRegistry

# 12:00 UTC is 13:00 at the station (fixed UTC+1)
NOW = datetime(2024, 7, 1, 12, 0, 0, tzinfo=timezone.utc)
LABELS = {"station_code": "T0147", "place": "Rovereto"}

Rows = Iterable[Tuple[str, str]]


def build_document(
    temperature: Optional[Rows] = (),
    rain: Optional[Rows] = (),
    humidity: Optional[Rows] = (),
    namespace: Optional[str] = None,
) -> bytes:
    """Build a station document; a section passed as None is left out."""

    def section(name: str, sample: str, value_tag: str, rows: Optional[Rows], unit: Optional[str]) -> str:
        if rows is None:
            return ""
        unit_attr = f' UM="{unit}"' if unit else ""
        items = "".join(
            f"<{sample}{unit_attr}><data>{ts}</data><{value_tag}>{value}</{value_tag}></{sample}>"
            for ts, value in rows
        )
        return f"<{name}>{items}</{name}>"

    xmlns = f' xmlns="{namespace}"' if namespace else ""
    body = (
        section("temperature", "temperatura_aria", "temperatura", temperature, "°C")
        + section("precipitazioni", "precipitazione", "pioggia", rain, "mm")
        + section("umidita_relativa", "umidita_relativa", "rh", humidity, None)
    )
    return f'<?xml version="1.0" encoding="utf-8"?><datiOggi{xmlns}>{body}</datiOggi>'.encode(
        "utf-8"
    )


@pytest.fixture
def prometheus_registry():
    """Private prometheus registry so tests never touch the global one."""
    return CollectorRegistry()


@pytest.fixture
def gauges(prometheus_registry):
    return GaugeRegistry(prometheus_registry)


@pytest.fixture
def config():
    return ExporterConfig()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def station_client():
    """Stand-in for StationClient returning a configurable payload."""
    client = Mock()
    client.fetch.return_value = build_document()
    return client
