"""
Multi-station collection runs.
"""

import asyncio
import logging
from typing import Optional, Sequence

from .client import COOPSClient
from .collector import collect_station
from .config import CollectionConfig
from .models import CollectionReport, DateRange, StationOutcome, StationSpec
from .utils import add_sync_version

logger = logging.getLogger(__name__)


@add_sync_version
async def run_collection(
    config: CollectionConfig,
    stations: Optional[Sequence[StationSpec]] = None,
    date_range: Optional[DateRange] = None,
    client: Optional[COOPSClient] = None,
) -> CollectionReport:
    """
    Collect every station, each into its own file.

    Stations are independent: a failed station is reported in its outcome
    and the remaining stations are still collected. Up to
    ``config.max_concurrency`` stations run at once; outcomes are always
    returned in station order.

    Args:
        config: Validated collection configuration
        stations: Stations to collect, defaults to ``config.stations``
        date_range: Range to collect, defaults to ``config.date_range``
        client: Optional CO-OPS client (a temporary one is created if None)

    Returns:
        CollectionReport with one outcome per station

    Examples:
        >>> config = CollectionConfig.from_dict(
        ...     {"start_date": "2015-07-01", "end_date": "2015-09-30",
        ...      "stations": {"sf": "9414290"}}
        ... )
        >>> report = run_collection.sync(config)
        >>> print(report.summary())
    """
    stations = list(stations if stations is not None else config.stations)
    date_range = date_range or config.date_range

    owns_client = client is None
    if client is None:
        client = COOPSClient(
            timeout=config.timeout, follow_redirects=config.follow_redirects
        )

    semaphore = asyncio.Semaphore(config.max_concurrency)

    async def _collect(station: StationSpec) -> StationOutcome:
        async with semaphore:
            return await collect_station(station, config, client, date_range)

    logger.info(
        f"Collecting {len(stations)} station(s) for {date_range} "
        f"(concurrency {config.max_concurrency})"
    )

    try:
        outcomes = await asyncio.gather(*[_collect(s) for s in stations])
    finally:
        if owns_client:
            await client.close()

    report = CollectionReport(outcomes=list(outcomes))
    logger.info(
        f"Collection finished: {len(report.succeeded)} succeeded, "
        f"{len(report.failed)} failed"
    )
    return report
