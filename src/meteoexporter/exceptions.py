"""
Exceptions for station refresh operations.
"""

from typing import Optional


class MeteoExporterError(Exception):
    """Base exception for exporter errors."""

    pass


class FetchError(MeteoExporterError):
    """Error reaching the station endpoint or non-2xx response."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[bytes] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ParseError(MeteoExporterError):
    """Malformed or unrecognized station document."""

    pass


class ConfigurationError(MeteoExporterError):
    """Invalid exporter configuration."""

    pass
