import datetime as dt
import os
from pathlib import Path

import pytest

from gpxstats.formats.gpx import TrackPoint

T0 = dt.datetime(2024, 6, 1, 10, 0, 0, tzinfo=dt.timezone.utc)

# meters per degree of latitude on the haversine mean-radius sphere
METERS_PER_DEG = 6371008.8 * 3.141592653589793 / 180.0


@pytest.fixture
def sample_gpx_path() -> Path:
    return Path(__file__).parent / "data" / "sample.gpx"


@pytest.fixture
def make_points():
    """
    Build points walking due north from 45N 7E.

    Each step is (meters_north, ele, seconds_after_T0); ele or seconds may be None.
    """
    def _make(steps):
        return [
            TrackPoint(
                lat=45.0 + north / METERS_PER_DEG,
                lon=7.0,
                ele=ele,
                time=None if secs is None else T0 + dt.timedelta(seconds=secs),
            )
            for north, ele, secs in steps
        ]
    return _make


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the developer's ~/.config and GPXSTATS_* variables out of tests."""
    for name in list(os.environ):
        if name.startswith("GPXSTATS_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
