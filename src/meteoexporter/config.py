"""
Exporter configuration.

Settings are resolved from defaults, then ``METEO_*`` environment variables
(optionally read from a ``.env`` file), then command-line flags.
"""

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from .exceptions import ConfigurationError
from .models import LabelKey, MetricKind

URL_TEMPLATE = "{schema}://{host}/service.asmx/ultimiDatiStazione?codice={station_code}"
URL_SCHEMAS = ("http", "https")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_PREFIX = "METEO_"


@dataclass(frozen=True)
class ExporterConfig:
    """Settings for one station exporter process."""

    station_code: str = "T0147"
    place: str = "Rovereto"
    interval_seconds: float = 60.0  # the source refreshes every 15 minutes
    listen_addr: str = ":8089"
    url_schema: str = "https"
    host: str = "dati.meteotrentino.it"
    temperature_enabled: bool = True
    rain_enabled: bool = True
    humidity_enabled: bool = True
    request_timeout_seconds: float = 30.0
    staleness_window_seconds: float = 30 * 60
    utc_offset_hours: float = 1.0
    timezone: Optional[str] = None
    log_level: str = "INFO"

    @property
    def url(self) -> str:
        """Fully resolved station endpoint URL."""
        return URL_TEMPLATE.format(
            schema=self.url_schema, host=self.host, station_code=self.station_code
        )

    @property
    def label_key(self) -> LabelKey:
        return LabelKey(station_code=self.station_code, place=self.place)

    def enabled(self, kind: MetricKind) -> bool:
        """Whether the given metric kind is turned on."""
        return {
            MetricKind.TEMPERATURE: self.temperature_enabled,
            MetricKind.RAIN: self.rain_enabled,
            MetricKind.HUMIDITY: self.humidity_enabled,
        }[kind]

    @property
    def any_enabled(self) -> bool:
        return any(self.enabled(kind) for kind in MetricKind)

    @property
    def listen_address(self) -> Tuple[str, int]:
        """The listen address split into ``(host, port)``; empty host binds all."""
        host, sep, port = self.listen_addr.rpartition(":")
        if not sep or not port.isdigit():
            raise ConfigurationError(
                f"Invalid listen address {self.listen_addr!r}, expected host:port"
            )
        return host or "0.0.0.0", int(port)

    def validate(self, require_metric: bool = True) -> "ExporterConfig":
        """
        Check the settings, raising ConfigurationError on the first problem.

        Args:
            require_metric: Also fail when every metric kind is disabled
        """
        if self.url_schema not in URL_SCHEMAS:
            raise ConfigurationError(
                f"URL schema must be one of {', '.join(URL_SCHEMAS)}, got {self.url_schema!r}"
            )
        if self.interval_seconds <= 0:
            raise ConfigurationError("Refresh interval must be positive")
        if self.staleness_window_seconds <= 0:
            raise ConfigurationError("Staleness window must be positive")
        if not self.station_code:
            raise ConfigurationError("Station code is required")
        self.listen_address  # raises on a malformed address
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(
                f"Log level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )
        if require_metric and not self.any_enabled:
            raise ConfigurationError("No metric enabled")
        return self

    def with_overrides(self, overrides: Mapping[str, Any]) -> "ExporterConfig":
        """Return a copy with the non-None values of ``overrides`` applied."""
        known = {f.name for f in fields(self)}
        changes = {
            key: value
            for key, value in overrides.items()
            if key in known and value is not None
        }
        return replace(self, **changes)

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[str] = None,
    ) -> "ExporterConfig":
        """
        Build a config from ``METEO_*`` environment variables.

        Args:
            env: Mapping to read instead of ``os.environ``
            dotenv_path: Optional ``.env`` file loaded into the process
                environment first; defaults to the nearest ``.env`` above the
                working directory (ignored when ``env`` is given)

        Returns:
            ExporterConfig with environment overrides applied
        """
        if env is None:
            load_dotenv(dotenv_path or find_dotenv(usecwd=True))
            env = os.environ

        overrides: Dict[str, Any] = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            overrides[f.name] = _coerce(f.name, f.type, raw)
        return cls().with_overrides(overrides)


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _coerce(name: str, annotation: Any, raw: str) -> Any:
    text = raw.strip()
    if annotation in (bool, "bool"):
        lowered = text.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ConfigurationError(f"Invalid boolean for {name}: {raw!r}")
    if annotation in (float, "float"):
        try:
            return float(text)
        except ValueError as e:
            raise ConfigurationError(f"Invalid number for {name}: {raw!r}") from e
    if text == "" and annotation not in (str, "str"):
        return None
    return text
