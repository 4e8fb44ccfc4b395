# gpxstats/analyze/report.py
"""
Human-readable and TSV rendering of run results.
"""

from __future__ import annotations

from typing import Optional

from gpxstats.analyze.grouping import GroupLabel
from gpxstats.analyze.run import GroupSummary
from gpxstats.config import StatsConfig
from gpxstats.util.units import format_distance, format_duration, format_elevation

TSV_COLUMNS = (
    "file", "track", "segment", "points",
    "ele_start_m", "ele_end_m", "ele_min_m", "ele_max_m", "ele_gain_m",
    "distance_m", "total_time_s", "moving_time_s",
)


def group_title(label: GroupLabel) -> str:
    """
    One-line heading for a group, e.g.

      ride.gpx: track 1 (Morning Ride), segment 2
      ride.gpx: track 1 (Morning Ride)
      ride.gpx: all tracks
      all tracks
    """
    if label.track is None:
        title = "all tracks"
    else:
        title = f"track {label.track + 1} ({label.track_name or '<unnamed>'})"
        if label.segment is not None:
            title += f", segment {label.segment + 1}"
    if label.path is not None:
        title = f"{label.path}: {title}"
    return title


def print_parameters(config: StatsConfig, *, units: str) -> None:
    print("parameters:")
    print(f"  min elevation gain : {format_elevation(config.min_elevation_gain, units)}")
    print(f"  min distance       : {format_elevation(config.min_distance, units)}")
    print(f"  standstill time    : {config.standstill_time.total_seconds():g} s")
    if config.join_tracks:
        print("  joining all tracks")
    elif config.join_segments:
        print("  joining segments of each track")
    if config.filter_zero_elevation:
        print("  dropping points with zero elevation")
    if config.filter_elevation_below is not None:
        print(f"  dropping points below {format_elevation(config.filter_elevation_below, units)}")


def print_report(summary: GroupSummary, *, units: str) -> None:
    s = summary.stats
    print(f"\n{group_title(summary.label)}")
    if s.points == 0:
        print("  no points")
        return
    print(f"  points             : {s.points}")
    print(f"  starting elevation : {format_elevation(s.ele_start, units)}")
    print(f"  ending elevation   : {format_elevation(s.ele_end, units)}")
    print(f"  min elevation      : {format_elevation(s.ele_min, units)}")
    print(f"  max elevation      : {format_elevation(s.ele_max, units)}")
    print(f"  elevation gain     : {format_elevation(s.ele_gain, units)}")
    print(f"  total distance     : {format_distance(s.distance_m, units)}")
    print(f"  total time         : {format_duration(s.total_time)}")
    print(f"  moving time        : {format_duration(s.moving_time)}")


def _cell(v: Optional[object], fmt: str = "") -> str:
    if v is None:
        return ""
    return format(v, fmt)


def tsv_row(summary: GroupSummary) -> str:
    lb, s = summary.label, summary.stats.as_dict()
    cells = [
        _cell(lb.path),
        _cell(None if lb.track is None else lb.track + 1),
        _cell(None if lb.segment is None else lb.segment + 1),
        _cell(s["points"]),
        _cell(s["ele_start"], ".2f"),
        _cell(s["ele_end"], ".2f"),
        _cell(s["ele_min"], ".2f"),
        _cell(s["ele_max"], ".2f"),
        _cell(s["ele_gain"], ".2f"),
        _cell(s["distance_m"], ".2f"),
        _cell(s["total_time"], ".1f"),
        _cell(s["moving_time"], ".1f"),
    ]
    return "\t".join(cells)


def print_tsv_header() -> None:
    print("\t".join(TSV_COLUMNS))


def print_tsv_row(summary: GroupSummary) -> None:
    print(tsv_row(summary))
