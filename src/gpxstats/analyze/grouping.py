# gpxstats/analyze/grouping.py
"""
Decide which points are summarized together.

    default           one group per segment   (file -> track -> segment order)
    join_segments     one group per track     (segments concatenated)
    join_tracks       one group per file; with several files, one group
                      for the whole run, in input order

Joining is plain concatenation: the last point of one segment and the first
point of the next become an ordinary adjacent pair. The statistics engine
knows nothing about any of this.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from gpxstats.config import StatsConfig
from gpxstats.errors import GroupingError
from gpxstats.formats.gpx import GpxFile, TrackPoint


@dataclass(frozen=True)
class GroupLabel:
    """
    Where a group came from. Indices are 0-based; a level that was joined
    away is None (track/segment), and `path` is None for a run-wide group
    spanning several files.
    """
    path: Optional[Path] = None
    file_name: Optional[str] = None
    track: Optional[int] = None
    track_name: Optional[str] = None
    segment: Optional[int] = None


@dataclass(frozen=True)
class PointGroup:
    label: GroupLabel
    points: list[TrackPoint]


def _checked(seg, where: str) -> list[TrackPoint]:
    if isinstance(seg, (str, bytes)) or not isinstance(seg, Sequence):
        raise GroupingError(f"{where}: segment is not a sequence of points")
    for i, p in enumerate(seg):
        if not isinstance(p, TrackPoint):
            raise GroupingError(f"{where}: item {i} is {type(p).__name__}, not a TrackPoint")
    return list(seg)


def resolve_groups(files: Sequence[GpxFile], config: StatsConfig) -> list[PointGroup]:
    """Flatten files -> tracks -> segments into an ordered list of groups."""
    groups: list[PointGroup] = []
    run_points: list[TrackPoint] = []

    for f in files:
        if not isinstance(f, GpxFile):
            raise GroupingError(f"expected a GpxFile, got {type(f).__name__}")
        file_points: list[TrackPoint] = []

        for ti, trk in enumerate(f.tracks):
            track_points: list[TrackPoint] = []
            for si, seg in enumerate(trk.segments):
                points = _checked(seg, f"{f.path}: track {ti + 1}, segment {si + 1}")
                if not config.joins_segments:
                    label = GroupLabel(f.path, f.name, ti, trk.name, si)
                    groups.append(PointGroup(label, points))
                track_points.extend(points)

            if config.joins_segments and not config.join_tracks:
                groups.append(PointGroup(GroupLabel(f.path, f.name, ti, trk.name), track_points))
            file_points.extend(track_points)

        run_points.extend(file_points)

    if config.join_tracks and files:
        if len(files) == 1:
            label = GroupLabel(files[0].path, files[0].name)
        else:
            label = GroupLabel()
        groups.append(PointGroup(label, run_points))

    return groups
