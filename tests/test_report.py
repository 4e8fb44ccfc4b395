import datetime as dt
from pathlib import Path

import pytest

from gpxstats.analyze.grouping import GroupLabel
from gpxstats.analyze.report import group_title, print_report, tsv_row
from gpxstats.analyze.run import GroupSummary
from gpxstats.analyze.track import TrackStats
from gpxstats.util.units import (
    format_distance,
    format_duration,
    format_elevation,
    parse_meters,
)


def test_parse_meters():
    assert parse_meters("12") == 12.0
    assert parse_meters(" 12.5 ") == 12.5
    assert parse_meters("30ft") == pytest.approx(9.144)
    assert parse_meters("30 ft") == pytest.approx(9.144)
    with pytest.raises(ValueError):
        parse_meters("30yd")


def test_formatting():
    assert format_elevation(100.0) == "328.1 ft"
    assert format_elevation(100.0, "metric") == "100.0 m"
    assert format_distance(1609.344) == "1.0 mi"
    assert format_distance(1609.344, "metric") == "1.6 km"
    assert format_duration(dt.timedelta(hours=1, minutes=5, seconds=59)) == "1:05"
    assert format_duration(dt.timedelta(hours=26)) == "26:00"


def test_undefined_values_render_as_not_available():
    assert format_elevation(None) == "n/a"
    assert format_distance(None, "metric") == "n/a"
    assert format_duration(None) == "n/a"


def test_unknown_unit_system():
    with pytest.raises(ValueError):
        format_elevation(1.0, "cubits")


def test_group_titles():
    p = Path("ride.gpx")
    assert group_title(GroupLabel(p, None, 0, "Morning", 1)) == "ride.gpx: track 1 (Morning), segment 2"
    assert group_title(GroupLabel(p, None, 2, None)) == "ride.gpx: track 3 (<unnamed>)"
    assert group_title(GroupLabel(p)) == "ride.gpx: all tracks"
    assert group_title(GroupLabel()) == "all tracks"


def test_tsv_row_uses_raw_units():
    stats = TrackStats(points=3, ele_start=100.0, ele_end=110.0, ele_min=95.0, ele_max=120.0,
                       ele_gain=15.0, distance_m=1234.5678,
                       total_time=dt.timedelta(seconds=90), moving_time=None)
    row = tsv_row(GroupSummary(GroupLabel(Path("r.gpx"), None, 0, None, 0), stats))

    assert row.split("\t") == [
        "r.gpx", "1", "1", "3", "100.00", "110.00", "95.00", "120.00", "15.00",
        "1234.57", "90.0", "",
    ]


def test_report_for_empty_group(capsys):
    print_report(GroupSummary(GroupLabel(Path("e.gpx"), None, 0, "x", 0), TrackStats()), units="imperial")
    out = capsys.readouterr().out

    assert "e.gpx: track 1 (x), segment 1" in out
    assert "no points" in out
