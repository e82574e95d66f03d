"""
Tests for collection configuration.
"""

import json
from datetime import date
from pathlib import Path

import pytest

from coopswl.config import (
    DEFAULT_STATIONS,
    CollectionConfig,
    load_config,
    parse_stations,
)
from coopswl.exceptions import ConfigurationError
from coopswl.models import StationSpec

BASE = {"start_date": "2015-07-01", "end_date": "2016-06-30"}


class TestCollectionConfig:
    """Test CollectionConfig.from_dict validation."""

    def test_defaults(self):
        config = CollectionConfig.from_dict(BASE)

        assert config.date_range.start == date(2015, 7, 1)
        assert config.date_range.end == date(2016, 6, 30)
        assert [s.name for s in config.stations] == list(DEFAULT_STATIONS)
        assert {s.timezone for s in config.stations} == {"America/Los_Angeles"}
        assert config.query.datum == "MLLW"
        assert config.query.units == "english"
        assert config.query.time_zone == "lst"
        assert config.normalize.convert_timestamp is True
        assert config.normalize.append_unix_time is False
        assert config.output_dir == Path(".")
        assert config.max_concurrency == 1

    def test_values_are_normalised(self):
        config = CollectionConfig.from_dict(
            dict(BASE, datum="navd", units="Meter", time_zone="LST_LDT")
        )

        assert config.query.datum == "NAVD"
        assert config.query.units == "metric"
        assert config.query.time_zone == "lst_ldt"

    def test_dashless_integer_dates(self):
        config = CollectionConfig.from_dict({"start_date": 20150701, "end_date": 20150731})

        assert config.date_range.days == 31

    @pytest.mark.parametrize(
        "key,value,message",
        [
            ("datum", "MSL", "DATUM"),
            ("units", "furlongs", "UNITS"),
            ("time_zone", "pst", "TIME_ZONE"),
            ("convert_to_iso8601", "yes", "CONVERT_TO_ISO8601"),
            ("add_unix_timestamp", 1, "ADD_UNIX_TIMESTAMP"),
            ("max_concurrency", 0, "MAX_CONCURRENCY"),
            ("timeout", "soon", "TIMEOUT"),
        ],
    )
    def test_invalid_values(self, key, value, message):
        with pytest.raises(ConfigurationError, match=message):
            CollectionConfig.from_dict(dict(BASE, **{key: value}))

    def test_string_booleans(self):
        config = CollectionConfig.from_dict(
            dict(BASE, convert_to_iso8601="false", add_unix_timestamp="true")
        )

        assert config.normalize.convert_timestamp is False
        assert config.normalize.append_unix_time is True
        assert config.normalize.enabled

    def test_start_after_end(self):
        with pytest.raises(ConfigurationError, match="START_DATE must be before END_DATE"):
            CollectionConfig.from_dict({"start_date": "2016-07-01", "end_date": "2016-06-30"})

    def test_missing_dates(self):
        with pytest.raises(ConfigurationError, match="START_DATE is required"):
            CollectionConfig.from_dict({"end_date": "2016-06-30"})

    def test_config_is_immutable(self):
        config = CollectionConfig.from_dict(BASE)

        with pytest.raises(AttributeError):
            config.max_concurrency = 4  # type: ignore[misc]


class TestParseStations:
    """Test station listings."""

    def test_mapping_with_timezone(self):
        stations = parse_stations(
            {"sf": 9414290, "alameda": {"id": "9414750", "timezone": "America/Los_Angeles"}}
        )

        assert stations == (
            StationSpec("sf", "9414290"),
            StationSpec("alameda", "9414750", "America/Los_Angeles"),
        )

    def test_empty(self):
        with pytest.raises(ConfigurationError, match="At least one station"):
            parse_stations({})

    def test_missing_id(self):
        with pytest.raises(ConfigurationError, match="has no id"):
            parse_stations({"sf": {"timezone": "UTC"}})

    def test_duplicate_names(self):
        with pytest.raises(ConfigurationError, match="Duplicate station names: sf"):
            parse_stations([StationSpec("sf", "1"), StationSpec("sf", "2")])

    @pytest.mark.parametrize("stations", [["9414290"], "9414290", [{"sf": "9414290"}]])
    def test_non_mapping_values_rejected(self, stations):
        with pytest.raises(ConfigurationError, match="mapping of name to id"):
            parse_stations(stations)

    def test_list_of_ids_in_config(self):
        with pytest.raises(ConfigurationError, match="mapping of name to id"):
            CollectionConfig.from_dict(dict(BASE, stations=["9414290", "9414750"]))


class TestLoadConfig:
    """Test reading JSON config files."""

    def test_load_with_overrides(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(dict(BASE, stations={"sf": "9414290"}, datum="NAVD"))
        )

        config = load_config(path, {"datum": None, "units": "meter"})

        assert config.query.datum == "NAVD"
        assert config.query.units == "metric"
        assert config.stations == (StationSpec("sf", "9414290"),)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_config(path)

    def test_non_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config(path)
