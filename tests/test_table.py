"""
Tests for CSV parsing and serialisation.
"""

import logging

import pytest

from coopswl.table import CSVTable, read_station_csv

BODY = (
    "Date Time, Water Level, Sigma\n"
    "2015-07-01 00:00,4.151,0.003\n"
    "\n"
    "2015-07-01 00:06,4.180\n"
)


class TestCSVTable:
    """Test CSVTable parsing."""

    def test_from_text(self):
        table = CSVTable.from_text(BODY)

        assert table.header == ["Date Time", " Water Level", " Sigma"]
        assert len(table) == 2
        assert table.rows[0] == {
            "Date Time": "2015-07-01 00:00",
            " Water Level": "4.151",
            " Sigma": "0.003",
        }

    def test_short_records_are_padded(self):
        table = CSVTable.from_text(BODY)

        assert table.rows[1][" Sigma"] == ""

    def test_long_records_are_truncated_and_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="coopswl.table"):
            table = CSVTable.from_text("A,B\n1,2,3\n")

        assert table.rows == [{"A": "1", "B": "2"}]
        assert "Record 2 has 3 fields for 2 columns" in caplog.text

    def test_empty_text(self):
        table = CSVTable.from_text("")

        assert table.header == []
        assert table.rows == []

    def test_header_only(self):
        table = CSVTable.from_text("Date Time, Water Level\n")

        assert table.header == ["Date Time", " Water Level"]
        assert len(table) == 0

    def test_to_csv(self):
        table = CSVTable.from_text(BODY)

        assert table.to_csv().splitlines() == [
            "Date Time, Water Level, Sigma",
            "2015-07-01 00:00,4.151,0.003",
            "2015-07-01 00:06,4.180,",
        ]
        assert not table.to_csv(include_header=False).startswith("Date Time")

    def test_columns_include_added_fields(self):
        table = CSVTable.from_text(BODY)
        table.rows[0]["Unix Time"] = "1435708800"

        assert table.columns[-1] == "Unix Time"

    def test_to_pandas(self):
        pytest.importorskip("pandas")
        df = CSVTable.from_text(BODY).to_pandas()

        assert list(df.columns) == ["Date Time", " Water Level", " Sigma"]
        assert len(df) == 2
        assert df[" Water Level"].iloc[0] == "4.151"


class TestReadStationCSV:
    """Test loading a collected file into pandas."""

    def test_parses_dates_and_unix_time(self, tmp_path):
        pd = pytest.importorskip("pandas")
        path = tmp_path / "sf.csv"
        path.write_text(
            "Date Time, Water Level,Unix Time\n"
            "2001-12-31T23:55:00,3.141,1009842900\n"
            "2002-01-01T00:01:00,3.100,1009843260\n"
        )

        df = read_station_csv(path)

        assert df["Date Time"].iloc[0] == pd.Timestamp("2001-12-31 23:55:00")
        assert df["Unix Time"].iloc[1] == 1009843260
        assert df[" Water Level"].iloc[0] == "3.141"

    def test_raw_timestamps(self, tmp_path):
        pd = pytest.importorskip("pandas")
        path = tmp_path / "sf.csv"
        path.write_text("Date Time, Water Level\n2001-12-31 23:55,3.141\n")

        df = read_station_csv(path)

        assert df["Date Time"].iloc[0] == pd.Timestamp("2001-12-31 23:55:00")
