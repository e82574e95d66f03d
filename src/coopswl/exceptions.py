"""
Exceptions for CO-OPS water level collection.
"""

from typing import Any, Optional


class WaterLevelError(Exception):
    """Base exception for water level collection errors."""

    pass


class ConfigurationError(WaterLevelError):
    """Invalid collection configuration."""

    pass


class InvalidRangeError(WaterLevelError):
    """Date range whose end falls before its start."""

    pass


class FetchError(WaterLevelError):
    """Base class for errors raised while fetching one window for one station."""

    def __init__(
        self,
        message: str,
        station_id: Optional[str] = None,
        window: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.station_id = station_id
        self.window = window

    def __str__(self) -> str:
        if self.station_id is None or self.window is None:
            return self.message
        return f"{self.message} (station {self.station_id}, {self.window})"


class TransportError(FetchError):
    """Network failure, timeout, or unexpected HTTP status."""

    pass


class ServiceError(FetchError):
    """The service reported an error inside an otherwise successful response."""

    pass


class OutputError(WaterLevelError):
    """A station's output file could not be created or written."""

    pass


class TimestampParseError(WaterLevelError):
    """A "Date Time" value could not be parsed."""

    pass
