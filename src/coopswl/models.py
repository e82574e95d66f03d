"""
Data models for CO-OPS water level collection.
"""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

from .exceptions import InvalidRangeError, WaterLevelError

# Ordered mapping of column name to raw string value
OutputRow = Dict[str, str]


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar dates."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidRangeError(
                f"End date {self.end.isoformat()} is before start date "
                f"{self.start.isoformat()}"
            )

    @property
    def days(self) -> int:
        """Number of days covered, counting both ends."""
        return (self.end - self.start).days + 1

    def dashless(self) -> str:
        return f"{self.start:%Y%m%d}-{self.end:%Y%m%d}"

    def __str__(self) -> str:
        return f"{self.start.isoformat()} → {self.end.isoformat()}"


@dataclass(frozen=True)
class MonthWindow(DateRange):
    """A sub-range of at most one calendar month, driving a single request."""

    index: int = 0


@dataclass(frozen=True)
class StationSpec:
    """A monitoring station to collect."""

    name: str
    station_id: str
    timezone: Optional[str] = None  # IANA zone, e.g. 'America/Los_Angeles'


@dataclass
class StationOutcome:
    """Result of collecting one station."""

    station: StationSpec
    path: Path
    windows_total: int
    windows_completed: int = 0
    rows_written: int = 0
    failed_window: Optional[MonthWindow] = None
    error: Optional[WaterLevelError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> str:
        return "success" if self.ok else "error"

    @property
    def partial(self) -> bool:
        """True if the output file holds some but not all windows."""
        return 0 < self.windows_completed < self.windows_total


@dataclass
class CollectionReport:
    """Per-station outcomes of a collection run, in station order."""

    outcomes: List[StationOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[StationOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[StationOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def all_ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        """One line per station, suitable for console output."""
        lines = []
        for outcome in self.outcomes:
            if outcome.ok:
                lines.append(
                    f"{outcome.station.name}: {outcome.rows_written} rows -> {outcome.path}"
                )
            else:
                kind = type(outcome.error).__name__
                where = f" at {outcome.failed_window}" if outcome.failed_window else ""
                lines.append(
                    f"{outcome.station.name}: {kind}{where}: "
                    f"{outcome.error} ({outcome.windows_completed}/"
                    f"{outcome.windows_total} windows written)"
                )
        return "\n".join(lines)
