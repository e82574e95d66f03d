"""
Command line interface: ``coops-water-level`` / ``python -m coopswl``.
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from .config import DATUMS, TIME_ZONES, UNIT_SYSTEMS, CollectionConfig, load_config
from .exceptions import ConfigurationError
from .runner import run_collection

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coops-water-level",
        description=(
            "Download 6-minute water level data from the NOAA CO-OPS API for "
            "any date range into one CSV file per station."
        ),
    )
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--start", dest="start_date", help="Start date, YYYY-MM-DD")
    parser.add_argument("--end", dest="end_date", help="End date, YYYY-MM-DD")
    parser.add_argument(
        "--station",
        action="append",
        metavar="NAME=ID",
        help="Station to collect (repeatable); defaults to the config file's stations",
    )
    parser.add_argument("--datum", choices=DATUMS, type=str.upper)
    parser.add_argument("--units", choices=sorted(UNIT_SYSTEMS))
    parser.add_argument("--time-zone", dest="time_zone", choices=TIME_ZONES)
    parser.add_argument(
        "--no-iso8601",
        dest="convert_to_iso8601",
        action="store_const",
        const=False,
        help='Keep "Date Time" exactly as returned by the API',
    )
    parser.add_argument(
        "--unix-time",
        dest="add_unix_timestamp",
        action="store_const",
        const=True,
        help='Append a "Unix Time" column',
    )
    parser.add_argument("--output-dir", dest="output_dir")
    parser.add_argument(
        "--concurrency",
        dest="max_concurrency",
        type=int,
        help="Number of stations collected at once",
    )
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def parse_station_args(values: Sequence[str]) -> Dict[str, str]:
    stations: Dict[str, str] = {}
    for value in values:
        name, sep, station_id = value.partition("=")
        if not sep or not name or not station_id:
            raise ConfigurationError(f"Station must be given as NAME=ID, got {value!r}")
        stations[name] = station_id
    return stations


def config_from_args(args: argparse.Namespace) -> CollectionConfig:
    overrides: Dict[str, Any] = {
        "start_date": args.start_date,
        "end_date": args.end_date,
        "datum": args.datum,
        "units": args.units,
        "time_zone": args.time_zone,
        "convert_to_iso8601": args.convert_to_iso8601,
        "add_unix_timestamp": args.add_unix_timestamp,
        "output_dir": args.output_dir,
        "max_concurrency": args.max_concurrency,
        "timeout": args.timeout,
    }
    if args.station:
        overrides["stations"] = parse_station_args(args.station)

    if args.config:
        return load_config(args.config, overrides)

    return CollectionConfig.from_dict(
        {k: v for k, v in overrides.items() if v is not None}
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run a collection. Returns 0 on success, 1 if any station failed, 2 on bad config."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = config_from_args(args)
    except ConfigurationError as e:
        logger.error(f"BAD CONFIG: {e}")
        return 2

    report = run_collection.sync(config)  # type: ignore[attr-defined]

    print(report.summary())
    return 0 if report.all_ok else 1


if __name__ == "__main__":
    sys.exit(main())
