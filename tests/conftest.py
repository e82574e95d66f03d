"""
Shared fixtures for coopswl tests.
"""

from datetime import date, timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from coopswl.config import CollectionConfig

HEADER = "Date Time, Water Level, Sigma, O or I (for verified), F, R, L, Quality"


def make_body(start: date, end: date, hours=(0, 12)) -> str:
    """CSV text like the CO-OPS API returns, two readings per day."""
    lines = [HEADER]
    day = start
    while day <= end:
        for hour in hours:
            lines.append(f"{day.isoformat()} {hour:02d}:00,3.141,0.004,0,0,0,0,v")
        day += timedelta(days=1)
    return "\n".join(lines) + "\n"


def body_for_window(station_id, window, options):
    return make_body(window.start, window.end)


@pytest.fixture
def make_config(tmp_path):
    """Build a validated config writing into a temporary directory."""

    def _make(**overrides):
        data = {
            "start_date": "2016-01-02",
            "end_date": "2016-03-05",
            "stations": {"sf": "9414290"},
            "output_dir": str(tmp_path),
        }
        data.update(overrides)
        return CollectionConfig.from_dict(data)

    return _make


@pytest.fixture
def fake_client():
    """A stand-in COOPSClient answering every window with valid CSV."""
    client = Mock()
    client.fetch_csv = AsyncMock(side_effect=body_for_window)
    client.close = AsyncMock()
    return client
