"""
Python collector for NOAA CO-OPS water level data.

Download 6-minute water level observations for many stations over any date
range. Requests are split into calendar-month windows to respect the API's
31-day limit and reassembled into one CSV file per station.
"""

try:
    from importlib import metadata

    __version__ = metadata.version("coops-water-level")
except Exception:
    __version__ = "unknown"

from .client import COOPSClient, is_error_message
from .collector import CollectionSink, collect_station, output_filename
from .config import (
    DEFAULT_STATIONS,
    CollectionConfig,
    NormalizeOptions,
    QueryOptions,
    load_config,
)
from .dates import (
    dashless_iso8601,
    first_day_of_month,
    last_day_of_month,
    parse_date,
    partition_months,
)
from .exceptions import (
    ConfigurationError,
    FetchError,
    InvalidRangeError,
    OutputError,
    ServiceError,
    TimestampParseError,
    TransportError,
    WaterLevelError,
)
from .models import (
    CollectionReport,
    DateRange,
    MonthWindow,
    StationOutcome,
    StationSpec,
)
from .normalize import normalize_row, normalize_table, resolve_time_reference
from .runner import run_collection
from .table import CSVTable, read_station_csv

__all__ = [
    # Client
    "COOPSClient",
    "is_error_message",
    # Collection
    "CollectionSink",
    "collect_station",
    "output_filename",
    "run_collection",
    # Configuration
    "DEFAULT_STATIONS",
    "CollectionConfig",
    "NormalizeOptions",
    "QueryOptions",
    "load_config",
    # Dates
    "dashless_iso8601",
    "first_day_of_month",
    "last_day_of_month",
    "parse_date",
    "partition_months",
    # Exceptions
    "ConfigurationError",
    "FetchError",
    "InvalidRangeError",
    "OutputError",
    "ServiceError",
    "TimestampParseError",
    "TransportError",
    "WaterLevelError",
    # Models
    "CollectionReport",
    "DateRange",
    "MonthWindow",
    "StationOutcome",
    "StationSpec",
    # Normalization
    "normalize_row",
    "normalize_table",
    "resolve_time_reference",
    # Tables
    "CSVTable",
    "read_station_csv",
]
