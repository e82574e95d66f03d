"""
Row normalization: ISO 8601 timestamps and an optional Unix time column.
"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import NormalizeOptions
from .exceptions import ConfigurationError, TimestampParseError
from .models import OutputRow
from .table import DATE_TIME_COLUMN, UNIX_TIME_COLUMN, CSVTable

INPUT_FORMAT = "%Y-%m-%d %H:%M"
# No offset or "Z" designator, even for GMT
OUTPUT_FORMAT = "%Y-%m-%dT%H:%M:%S"


def resolve_time_reference(
    time_zone: str, station_timezone: Optional[str] = None
) -> tzinfo:
    """
    Time reference in which a station's timestamps are expressed.

    'gmt' is UTC. 'lst' is the station's fixed standard offset and 'lst_ldt'
    follows the station's daylight saving rules. Without a station time zone
    the timestamps are treated as UTC.
    """
    if time_zone == "gmt" or not station_timezone:
        return timezone.utc

    try:
        zone = ZoneInfo(station_timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown time zone: {station_timezone!r}") from e

    if time_zone == "lst_ldt":
        return zone

    reference = datetime(2001, 1, 1, tzinfo=zone)
    standard = reference.utcoffset() - (reference.dst() or timedelta(0))  # type: ignore[operator]
    return timezone(standard, f"{station_timezone} (standard)")


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse a CO-OPS 'YYYY-MM-DD HH:MM' value into a naive datetime."""
    if value is None:
        raise TimestampParseError(f'Missing "{DATE_TIME_COLUMN}" column')
    try:
        return datetime.strptime(value.strip(), INPUT_FORMAT)
    except ValueError as e:
        raise TimestampParseError(
            f'Cannot parse "{DATE_TIME_COLUMN}" value {value!r}'
        ) from e


def normalize_row(
    row: OutputRow,
    options: NormalizeOptions,
    time_reference: tzinfo = timezone.utc,
) -> OutputRow:
    """
    Rewrite one row according to ``options``; the input row is left untouched.

    Raises:
        TimestampParseError: If "Date Time" is missing or malformed
    """
    parsed = parse_timestamp(row.get(DATE_TIME_COLUMN))
    normalized = dict(row)

    if options.convert_timestamp:
        normalized[DATE_TIME_COLUMN] = parsed.strftime(OUTPUT_FORMAT)

    if options.append_unix_time:
        normalized.pop(UNIX_TIME_COLUMN, None)
        epoch = int(parsed.replace(tzinfo=time_reference).timestamp())
        normalized[UNIX_TIME_COLUMN] = str(epoch)

    return normalized


def normalize_table(
    table: CSVTable,
    options: NormalizeOptions,
    time_reference: tzinfo = timezone.utc,
) -> CSVTable:
    """Normalize every row of ``table``, extending the header when needed."""
    header = list(table.header)
    if options.append_unix_time and UNIX_TIME_COLUMN not in header:
        header.append(UNIX_TIME_COLUMN)

    rows = [normalize_row(row, options, time_reference) for row in table.rows]
    return CSVTable(header=header, rows=rows)
