"""
Collection configuration.

A ``CollectionConfig`` is an immutable value built once, validated, and passed
down to the runner, the collectors and the client.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from .dates import parse_date
from .exceptions import ConfigurationError, InvalidRangeError
from .models import DateRange, StationSpec

DATUMS = ("MLLW", "NAVD")

# User-facing unit names mapped to the API's vocabulary
UNIT_SYSTEMS = {
    "feet": "english",
    "meter": "metric",
}

# gmt     Greenwich Mean Time
# lst     Local Standard Time at the station
# lst_ldt Local Standard/Local Daylight Time at the station
TIME_ZONES = ("gmt", "lst", "lst_ldt")

# San Francisco Bay stations
BAY_AREA_TIMEZONE = "America/Los_Angeles"

DEFAULT_STATIONS = {
    "alameda": {"id": "9414750", "timezone": BAY_AREA_TIMEZONE},
    "bolinas": {"id": "9414958", "timezone": BAY_AREA_TIMEZONE},
    "coyote_creek": {"id": "9414575", "timezone": BAY_AREA_TIMEZONE},
    "martinez": {"id": "9415102", "timezone": BAY_AREA_TIMEZONE},
    "point_reyes": {"id": "9415020", "timezone": BAY_AREA_TIMEZONE},
    "port_chicago": {"id": "9415144", "timezone": BAY_AREA_TIMEZONE},
    "redwood_city": {"id": "9414523", "timezone": BAY_AREA_TIMEZONE},
    "richmond": {"id": "9414863", "timezone": BAY_AREA_TIMEZONE},
    "sf": {"id": "9414290", "timezone": BAY_AREA_TIMEZONE},
}


@dataclass(frozen=True)
class QueryOptions:
    """Pass-through request parameters shared by every window of a run."""

    datum: str = "MLLW"
    units: str = "english"
    time_zone: str = "lst"

    def as_params(self) -> Dict[str, str]:
        return {
            "datum": self.datum,
            "time_zone": self.time_zone,
            "units": self.units,
        }


@dataclass(frozen=True)
class NormalizeOptions:
    """Row rewriting applied to every data row."""

    convert_timestamp: bool = True
    append_unix_time: bool = False

    @property
    def enabled(self) -> bool:
        return self.convert_timestamp or self.append_unix_time


@dataclass(frozen=True)
class CollectionConfig:
    """Everything a collection run needs, validated."""

    date_range: DateRange
    stations: Tuple[StationSpec, ...]
    query: QueryOptions = field(default_factory=QueryOptions)
    normalize: NormalizeOptions = field(default_factory=NormalizeOptions)
    output_dir: Path = Path(".")
    timeout: float = 30.0
    max_concurrency: int = 1
    follow_redirects: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CollectionConfig":
        """
        Build a config from plain values, e.g. a parsed JSON file.

        Recognised keys: start_date, end_date, stations, datum, units,
        time_zone, convert_to_iso8601, add_unix_timestamp, output_dir,
        timeout, max_concurrency, follow_redirects.

        Raises:
            ConfigurationError: If any value is missing or not recognised
        """
        for key in ("start_date", "end_date"):
            if data.get(key) in (None, ""):
                raise ConfigurationError(f"{key.upper()} is required")

        start = parse_date(data["start_date"])
        end = parse_date(data["end_date"])
        try:
            date_range = DateRange(start, end)
        except InvalidRangeError as e:
            raise ConfigurationError(
                "START_DATE must be before END_DATE"
            ) from e

        stations = parse_stations(data.get("stations", DEFAULT_STATIONS))

        query = QueryOptions(
            datum=_parse_datum(data.get("datum", "MLLW")),
            units=_parse_units(data.get("units", "feet")),
            time_zone=_parse_time_zone(data.get("time_zone", "lst")),
        )
        normalize = NormalizeOptions(
            convert_timestamp=_parse_bool(
                data.get("convert_to_iso8601", True), "CONVERT_TO_ISO8601"
            ),
            append_unix_time=_parse_bool(
                data.get("add_unix_timestamp", False), "ADD_UNIX_TIMESTAMP"
            ),
        )

        timeout = _parse_number(data.get("timeout", 30.0), "TIMEOUT", float)
        max_concurrency = _parse_number(
            data.get("max_concurrency", 1), "MAX_CONCURRENCY", int
        )

        return cls(
            date_range=date_range,
            stations=stations,
            query=query,
            normalize=normalize,
            output_dir=Path(data.get("output_dir") or "."),
            timeout=timeout,
            max_concurrency=max_concurrency,
            follow_redirects=_parse_bool(
                data.get("follow_redirects", True), "FOLLOW_REDIRECTS"
            ),
        )


def load_config(
    path: Union[str, Path], overrides: Optional[Mapping[str, Any]] = None
) -> CollectionConfig:
    """Load a JSON config file, applying non-None ``overrides`` on top."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    return CollectionConfig.from_dict(data)


def parse_stations(
    stations: Union[Mapping[str, Any], Iterable[StationSpec]],
) -> Tuple[StationSpec, ...]:
    """
    Normalise a station listing into ``StationSpec`` values.

    Mapping values may be a station id, or a dict with ``id`` and an optional
    ``timezone``.
    """
    if isinstance(stations, Mapping):
        specs = []
        for name, value in stations.items():
            if isinstance(value, Mapping):
                station_id = value.get("id")
                timezone = value.get("timezone")
            else:
                station_id, timezone = value, None
            if station_id in (None, ""):
                raise ConfigurationError(f"Station {name!r} has no id")
            specs.append(StationSpec(str(name), str(station_id), timezone))
    else:
        specs = list(stations)
        for spec in specs:
            if not isinstance(spec, StationSpec):
                raise ConfigurationError(
                    f"Stations must be a mapping of name to id, got {spec!r}"
                )

    if not specs:
        raise ConfigurationError("At least one station is required")

    names = [spec.name for spec in specs]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate station names: {', '.join(duplicates)}")

    return tuple(specs)


def _parse_datum(value: Any) -> str:
    datum = str(value).upper()
    if datum not in DATUMS:
        raise ConfigurationError('DATUM must be either "MLLW" or "NAVD"')
    return datum


def _parse_units(value: Any) -> str:
    units = str(value).lower()
    if units in UNIT_SYSTEMS:
        return UNIT_SYSTEMS[units]
    if units in UNIT_SYSTEMS.values():
        return units
    raise ConfigurationError('UNITS must be either "feet" or "meter"')


def _parse_time_zone(value: Any) -> str:
    time_zone = str(value).lower()
    if time_zone not in TIME_ZONES:
        raise ConfigurationError(
            'TIME_ZONE must be one of "gmt", "lst" or "lst_ldt"'
        )
    return time_zone


def _parse_bool(value: Any, name: str) -> bool:
    if value is True or value == "true":
        return True
    if value is False or value == "false":
        return False
    raise ConfigurationError(f"{name} must be either true or false")


def _parse_number(value: Any, name: str, kind: type) -> Any:
    try:
        number = kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a positive number") from e
    if number <= 0:
        raise ConfigurationError(f"{name} must be a positive number")
    return number
