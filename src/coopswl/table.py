"""
Minimal CSV handling for CO-OPS responses and collected output files.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Union

from .models import OutputRow

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)

DATE_TIME_COLUMN = "Date Time"
UNIX_TIME_COLUMN = "Unix Time"


@dataclass
class CSVTable:
    """A header plus rows keyed by column name, all values kept as strings."""

    header: List[str] = field(default_factory=list)
    rows: List[OutputRow] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> "CSVTable":
        """Parse CSV text whose first record is the header. Blank lines are skipped."""
        records = [r for r in csv.reader(io.StringIO(text)) if r]
        if not records:
            return cls()

        header = records[0]
        rows = []
        for line_number, record in enumerate(records[1:], start=2):
            if len(record) > len(header):
                logger.debug(
                    f"Record {line_number} has {len(record)} fields for "
                    f"{len(header)} columns; extra fields dropped"
                )
            # Pad short records so every row has every column
            padded = record + [""] * (len(header) - len(record))
            rows.append(dict(zip(header, padded)))
        return cls(header=header, rows=rows)

    @property
    def columns(self) -> List[str]:
        """Header extended with any columns added to rows after parsing."""
        columns = list(self.header)
        for row in self.rows:
            for name in row:
                if name not in columns:
                    columns.append(name)
        return columns

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[OutputRow]:
        return iter(self.rows)

    def to_csv(self, include_header: bool = True) -> str:
        """Serialise with '\\n' line endings."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        columns = self.columns
        if include_header and columns:
            writer.writerow(columns)
        for row in self.rows:
            writer.writerow([row.get(name, "") for name in columns])
        return buffer.getvalue()

    def to_pandas(self) -> "pd.DataFrame":
        """Convert to a pandas DataFrame of strings."""
        try:
            import pandas as pd
        except ImportError:
            raise ImportError(
                "pandas is required for DataFrame conversion. Install with: pip install pandas"
            ) from None

        return pd.DataFrame(self.rows, columns=self.columns, dtype="string")


def read_station_csv(path: Union[str, Path], parse_dates: bool = True) -> "pd.DataFrame":
    """
    Load a collected station file into a pandas DataFrame.

    "Date Time" is parsed to datetimes (either the raw 'YYYY-MM-DD HH:MM' or the
    converted ISO 8601 form) and "Unix Time", when present, to integers.
    """
    try:
        import pandas as pd
    except ImportError:
        raise ImportError(
            "pandas is required for DataFrame conversion. Install with: pip install pandas"
        ) from None

    df = pd.read_csv(path, dtype=str, keep_default_na=False)

    if parse_dates and DATE_TIME_COLUMN in df.columns:
        df[DATE_TIME_COLUMN] = pd.to_datetime(df[DATE_TIME_COLUMN], format="ISO8601")
    if UNIX_TIME_COLUMN in df.columns:
        df[UNIX_TIME_COLUMN] = pd.to_numeric(df[UNIX_TIME_COLUMN]).astype("Int64")

    return df
