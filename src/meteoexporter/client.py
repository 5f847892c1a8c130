"""
HTTP client for the station latest-readings endpoint.
"""

from typing import Any, Optional

import httpx

from .exceptions import FetchError


class StationClient:
    """
    Client for fetching raw station documents.

    One blocking GET per call, no retries. Redirects are followed and the
    status check applies to the final response. The URL is fully resolved by
    the caller.
    """

    USER_AGENT = "meteotrentino-exporter/0.1.0"

    def __init__(
        self,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout = timeout
        self._client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
            headers={
                "User-Agent": self.USER_AGENT,
                "Accept": "application/xml, text/xml",
            },
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "StationClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def fetch(self, url: str) -> bytes:
        """
        Fetch the raw response body.

        Args:
            url: Fully resolved station URL

        Returns:
            Response body bytes

        Raises:
            FetchError: On transport failure or a status code above 299
        """
        try:
            response = self._client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(f"Request timeout after {self.timeout}s") from e
        except httpx.RequestError as e:
            raise FetchError(f"Network error: {e}") from e

        body = response.content
        if response.status_code > 299:
            raise FetchError(
                f"Response failed with status code: {response.status_code} "
                f"and body: {body[:500]!r}",
                status_code=response.status_code,
                body=body,
            )
        return body
