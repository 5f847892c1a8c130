"""
Parser for the station's latest-readings XML document.

The document root carries three sections, each a list of samples::

    <datiOggi>
      <temperature>
        <temperatura_aria UM="°C"><data>...</data><temperatura>12.3</temperatura></temperatura_aria>
      </temperature>
      <precipitazioni>
        <precipitazione UM="mm"><data>...</data><pioggia>0.2</pioggia></precipitazione>
      </precipitazioni>
      <umidita_relativa>
        <umidita_relativa><data>...</data><rh>81</rh></umidita_relativa>
      </umidita_relativa>
    </datiOggi>

XML namespaces are ignored. A missing section is an empty series. Within a
sample, a missing value reads as 0 and a missing timestamp as
``UNKNOWN_TIMESTAMP``, so only that series is affected; present but
unparsable text is a ParseError.
"""

import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import List, NamedTuple, Optional

from .exceptions import ParseError
from .models import MetricKind, Sample, StationSnapshot, TimeSeries
from .timestamps import FixedOffsetPolicy, TimestampPolicy

logger = logging.getLogger(__name__)


class SectionLayout(NamedTuple):
    """Element names for one metric section."""

    section: str
    sample: str
    value: str
    default_unit: Optional[str] = None


SECTION_LAYOUTS = {
    MetricKind.TEMPERATURE: SectionLayout("temperature", "temperatura_aria", "temperatura"),
    MetricKind.RAIN: SectionLayout("precipitazioni", "precipitazione", "pioggia"),
    MetricKind.HUMIDITY: SectionLayout("umidita_relativa", "umidita_relativa", "rh", "%"),
}

TIMESTAMP_TAG = "data"
# Timestamp of a sample without <data>; always older than any staleness window
UNKNOWN_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)
UNIT_ATTR = "UM"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _children(element: ET.Element, name: str) -> List[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    """Stripped text of the named child, None when the child is absent."""
    child = _child(element, name)
    if child is None:
        return None
    return (child.text or "").strip()


class StationParser:
    """Decodes raw station payloads into snapshots."""

    def __init__(self, timestamp_policy: Optional[TimestampPolicy] = None):
        self.timestamp_policy = timestamp_policy or FixedOffsetPolicy()

    def parse(self, payload: bytes) -> StationSnapshot:
        """
        Decode a station document.

        Args:
            payload: Raw response body

        Returns:
            StationSnapshot with one series per metric kind

        Raises:
            ParseError: If the document is malformed or a sample carries
                unparsable text
        """
        try:
            root = ET.fromstring(payload)
        except ET.ParseError as e:
            raise ParseError(f"Malformed station document: {e}") from e

        series = {kind: self._parse_series(root, kind) for kind in MetricKind}
        logger.debug(
            "Parsed %s",
            ", ".join(f"{kind.value}={len(s)}" for kind, s in series.items()),
        )
        return StationSnapshot(
            temperature=series[MetricKind.TEMPERATURE],
            rain=series[MetricKind.RAIN],
            humidity=series[MetricKind.HUMIDITY],
        )

    def _parse_series(self, root: ET.Element, kind: MetricKind) -> TimeSeries:
        layout = SECTION_LAYOUTS[kind]
        section = _child(root, layout.section)
        if section is None:
            return TimeSeries(kind=kind)
        samples = [
            self._parse_sample(element, kind, layout)
            for element in _children(section, layout.sample)
        ]
        return TimeSeries(kind=kind, samples=samples)

    def _parse_sample(
        self, element: ET.Element, kind: MetricKind, layout: SectionLayout
    ) -> Sample:
        raw_timestamp = _child_text(element, TIMESTAMP_TAG)
        raw_value = _child_text(element, layout.value)

        if raw_timestamp is None:
            logger.debug("%s sample without <%s>", kind.value, TIMESTAMP_TAG)
            timestamp = UNKNOWN_TIMESTAMP
        else:
            try:
                timestamp = self.timestamp_policy.parse(raw_timestamp)
            except ValueError as e:
                raise ParseError(
                    f"Invalid {kind.value} timestamp {raw_timestamp!r}"
                ) from e

        if not raw_value:
            value = 0.0
        else:
            try:
                value = float(raw_value)
            except ValueError as e:
                raise ParseError(f"Invalid {kind.value} value {raw_value!r}") from e
        unit = element.get(UNIT_ATTR, layout.default_unit)
        return Sample(timestamp=timestamp, value=value, unit=unit)


def parse_station_document(
    payload: bytes, timestamp_policy: Optional[TimestampPolicy] = None
) -> StationSnapshot:
    """Parse a station document with the given (default fixed-offset) policy."""
    return StationParser(timestamp_policy).parse(payload)
