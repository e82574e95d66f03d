"""
Per-station collection: one request per month window, one CSV file per station.
"""

import csv
import logging
from pathlib import Path
from typing import IO, Any, List, Optional, Union

from .client import COOPSClient
from .config import CollectionConfig
from .dates import partition_months
from .exceptions import OutputError, ServiceError, WaterLevelError
from .models import DateRange, StationOutcome, StationSpec
from .normalize import normalize_table, resolve_time_reference
from .table import CSVTable

logger = logging.getLogger(__name__)


def output_filename(station_name: str, datum: str, date_range: DateRange) -> str:
    """e.g. 'alameda--MLLW--2015-07-01-2016-06-30.csv'"""
    return (
        f"{station_name}--{datum}--"
        f"{date_range.start.isoformat()}-{date_range.end.isoformat()}.csv"
    )


class CollectionSink:
    """
    Append-only CSV output for one station.

    Opening truncates any previous file. The first table that carries a header
    fixes the column layout and writes the header line; later tables must
    carry the same header or none. Rows are flushed after every append so a
    failed collection leaves everything appended so far on disk.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.columns: Optional[List[str]] = None
        self.rows_written = 0
        self._file: Optional[IO[str]] = None
        self._writer: Any = None

    @property
    def closed(self) -> bool:
        return self._file is None

    def open(self) -> "CollectionSink":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file, lineterminator="\n")
        self.columns = None
        self.rows_written = 0
        return self

    def append(self, table: CSVTable) -> int:
        """Write ``table``'s rows (and, the first time, its header). Returns rows written."""
        if self._file is None:
            raise ValueError(f"Sink {self.path} is not open")

        if self.columns is None:
            if not table.header:
                return 0
            self.columns = list(table.header)
            self._writer.writerow(self.columns)
        elif table.header and list(table.header) != self.columns:
            raise ValueError(
                f"Column mismatch in {self.path.name}: expected {self.columns}, "
                f"got {table.header}"
            )

        for row in table.rows:
            self._writer.writerow([row.get(name, "") for name in self.columns])
        self._file.flush()

        self.rows_written += len(table.rows)
        return len(table.rows)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            self._writer = None

    def __enter__(self) -> "CollectionSink":
        return self.open()

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


async def collect_station(
    station: StationSpec,
    config: CollectionConfig,
    client: COOPSClient,
    date_range: Optional[DateRange] = None,
) -> StationOutcome:
    """
    Collect one station over the configured range into a single CSV file.

    Windows are fetched strictly in chronological order. The first error
    stops the station: the file keeps the rows appended so far and the
    outcome records the failing window and error.

    Args:
        station: Station to collect
        config: Validated collection configuration
        client: Open CO-OPS client
        date_range: Range to collect, defaults to ``config.date_range``

    Returns:
        StationOutcome describing what was written
    """
    date_range = date_range or config.date_range
    windows = partition_months(date_range.start, date_range.end)
    path = config.output_dir / output_filename(
        station.name, config.query.datum, date_range
    )
    outcome = StationOutcome(station=station, path=path, windows_total=len(windows))

    try:
        time_reference = resolve_time_reference(config.query.time_zone, station.timezone)
    except WaterLevelError as e:
        logger.error(f"{station.name}: {e}")
        outcome.error = e
        return outcome

    if (
        config.normalize.append_unix_time
        and config.query.time_zone != "gmt"
        and not station.timezone
    ):
        logger.warning(
            f"{station.name}: no station time zone set; {config.query.time_zone} "
            f"timestamps are interpreted as UTC for Unix Time"
        )

    logger.info(f'Preparing "{path}"...')

    sink = CollectionSink(path)
    try:
        sink.open()
    except OSError as e:
        outcome.error = OutputError(f"Cannot create {path}: {e}")
        logger.error(f"{station.name}: {outcome.error}")
        return outcome

    try:
        for window in windows:
            logger.info(f"  - Downloading {window} ({station.name})")
            try:
                text = await client.fetch_csv(station.station_id, window, config.query)
                table = CSVTable.from_text(text)
                if config.normalize.enabled:
                    table = normalize_table(table, config.normalize, time_reference)
                if sink.columns and table.header and table.header != sink.columns:
                    raise ServiceError(
                        f"Columns changed from {sink.columns} to {table.header}",
                        station.station_id,
                        window,
                    )
                sink.append(table)
            except OSError as e:
                outcome.failed_window = window
                outcome.error = OutputError(f"Cannot write {path}: {e}")
                break
            except WaterLevelError as e:
                outcome.failed_window = window
                outcome.error = e
                break

            outcome.windows_completed += 1
    finally:
        sink.close()

    outcome.rows_written = sink.rows_written

    if outcome.ok:
        logger.info(f"{station.name}: wrote {outcome.rows_written} rows to {path}")
    else:
        logger.error(
            f"{station.name}: {type(outcome.error).__name__} at "
            f"{outcome.failed_window}: {outcome.error}"
        )
        logger.warning(
            f"{station.name}: partial output left in {path} "
            f"({outcome.windows_completed}/{outcome.windows_total} windows, "
            f"{outcome.rows_written} rows)"
        )

    return outcome
