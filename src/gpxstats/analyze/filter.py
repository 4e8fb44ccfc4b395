# gpxstats/analyze/filter.py
"""
Elevation-based point pre-filter.

Runs before grouping, so a dropped point never reaches min/max/start/end
elevation, distance, or the point count.
"""

from __future__ import annotations

from typing import Iterable

from gpxstats.config import StatsConfig
from gpxstats.formats.gpx import GpxFile, GpxTrack, TrackPoint


def keep_point(point: TrackPoint, config: StatsConfig) -> bool:
    """Return False for points the elevation filters discard."""
    if point.ele is None:
        return True
    if config.filter_zero_elevation and point.ele == 0.0:
        return False
    if config.filter_elevation_below is not None and point.ele < config.filter_elevation_below:
        return False
    return True


def filter_points(points: Iterable[TrackPoint], config: StatsConfig) -> list[TrackPoint]:
    return [p for p in points if keep_point(p, config)]


def filter_file(gpx: GpxFile, config: StatsConfig) -> GpxFile:
    """Apply the filter to every segment; empty segments are kept as []."""
    if not config.filter_zero_elevation and config.filter_elevation_below is None:
        return gpx
    tracks = [
        GpxTrack(name=trk.name, segments=[filter_points(seg, config) for seg in trk.segments])
        for trk in gpx.tracks
    ]
    return GpxFile(path=gpx.path, name=gpx.name, tracks=tracks)
