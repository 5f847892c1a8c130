"""
Decoding of station-local civil timestamps.

The station reports local time without an offset. Which calendar rule applies
is a policy: the provider has historically used a constant UTC+1 even during
summer time, so ``FixedOffsetPolicy`` is the default. ``ZoneInfoPolicy`` is
available should the provider switch to daylight-saving-aware local time.
"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import ConfigurationError

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


class TimestampPolicy:
    """Turns a local timestamp string into an aware datetime."""

    zone: tzinfo

    def parse(self, text: str) -> datetime:
        naive = datetime.strptime(text.strip(), TIMESTAMP_FORMAT)
        return self.localize(naive)

    def localize(self, naive: datetime) -> datetime:
        return naive.replace(tzinfo=self.zone)


class FixedOffsetPolicy(TimestampPolicy):
    """Constant UTC offset, no daylight-saving adjustment."""

    def __init__(self, hours: float = 1.0):
        offset = timedelta(hours=hours)
        self.zone = timezone(offset, f"UTC{hours:+g}")

    def __repr__(self) -> str:
        return f"FixedOffsetPolicy({self.zone})"


class ZoneInfoPolicy(TimestampPolicy):
    """IANA time zone with daylight-saving rules, e.g. ``Europe/Rome``."""

    def __init__(self, key: str):
        try:
            self.zone = ZoneInfo(key)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown time zone: {key}") from e

    def __repr__(self) -> str:
        return f"ZoneInfoPolicy({self.zone.key!r})"


def policy_for(timezone_name: Optional[str], utc_offset_hours: float = 1.0) -> TimestampPolicy:
    """Pick the zone-aware policy when a zone is named, else the fixed offset."""
    if timezone_name:
        return ZoneInfoPolicy(timezone_name)
    return FixedOffsetPolicy(utc_offset_hours)
