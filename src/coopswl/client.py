"""
NOAA CO-OPS Data API client.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .config import QueryOptions
from .dates import dashless_iso8601
from .exceptions import ServiceError, TransportError
from .models import MonthWindow

logger = logging.getLogger(__name__)

# Statuses tolerated with a warning instead of failing the request
REDIRECT_CODES = (301, 302, 307, 308)


def is_error_message(body: str) -> bool:
    """
    Check whether a response body is an error message rather than CSV.

    The API returns errors as plain text flanked by blank lines inside a 200
    response, e.g. "\\n\\n Wrong Datum: Datum cannot be null or empty \\n\\n".
    Consecutive line breaks never appear in a well-formed CSV response.
    """
    return "\n\n" in body.replace("\r\n", "\n")


class COOPSClient:
    """
    Client for 6-minute water level data from the NOAA CO-OPS Data API.

    One request covers at most 31 days; callers split longer ranges with
    ``partition_months`` and call ``fetch_csv`` once per window.
    """

    BASE_URL = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
    APPLICATION_NAME = "coops-water-level"

    def __init__(
        self,
        timeout: float = 30,
        follow_redirects: bool = True,
        base_url: Optional[str] = None,
    ):
        self.timeout = timeout
        self.base_url = base_url or self.BASE_URL
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=follow_redirects,
            headers={
                "User-Agent": f"{self.APPLICATION_NAME}/0.1.0",
                "Accept": "text/csv",
            },
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "COOPSClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def build_params(
        self, station_id: str, window: MonthWindow, options: QueryOptions
    ) -> Dict[str, str]:
        """Query parameters for one station and window."""
        params = {
            "product": "water_level",
            "format": "csv",
            **options.as_params(),
            "station": str(station_id),
            "begin_date": dashless_iso8601(window.start),
            "end_date": dashless_iso8601(window.end),
            "application": self.APPLICATION_NAME,
        }
        return params

    async def fetch_csv(
        self, station_id: str, window: MonthWindow, options: QueryOptions
    ) -> str:
        """
        Fetch raw CSV text for one station over one window.

        Args:
            station_id: CO-OPS station id, e.g. '9414290'
            window: Date window of at most 31 days
            options: Datum, units and time zone for the request

        Returns:
            CSV text including its header row

        Raises:
            TransportError: On timeout, network failure, or HTTP error status
            ServiceError: If the body is an error message from the service
        """
        params = self.build_params(station_id, window, options)
        logger.debug(f"GET {self.base_url} {params}")

        try:
            response = await self._client.get(self.base_url, params=params)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request timeout after {self.timeout}s", station_id, window
            ) from e
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}", station_id, window) from e

        if response.history:
            logger.warning(
                f"HTTP redirect ({response.history[0].status_code}) while "
                f"connecting to the CO-OPS API. The base URL may need to be "
                f"updated to {response.url}."
            )

        status = response.status_code
        if status in REDIRECT_CODES:
            logger.warning(
                f"HTTP redirect ({status}) while connecting to the CO-OPS API "
                f"was not followed. The base URL may need to be updated."
            )
        elif not 200 <= status < 300:
            if status >= 500:
                message = f"CO-OPS service temporarily unavailable (HTTP {status})"
            else:
                message = f"HTTP error {status}: {response.reason_phrase}"
            raise TransportError(message, station_id, window)

        body = response.text
        if is_error_message(body):
            raise ServiceError(body.strip(), station_id, window)

        return body
