# gpxstats/analyze/run.py
"""
Run orchestration: filter -> group -> summarize.

Groups share nothing but the read-only StatsConfig, so with workers > 1
they are summarized in a process pool. Executor.map hands results back in
submission order, which keeps the output in group order no matter which
worker finishes first.
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from itertools import repeat
from pathlib import Path
from typing import Optional, Sequence

from gpxstats.analyze.filter import filter_file
from gpxstats.analyze.grouping import GroupLabel, PointGroup, resolve_groups
from gpxstats.analyze.track import TrackStats, summarize_points
from gpxstats.config import StatsConfig
from gpxstats.formats.gpx import GpxFile, load_gpx


@dataclass(frozen=True)
class GroupSummary:
    label: GroupLabel
    stats: TrackStats


def resolve_run(files: Sequence[GpxFile], config: StatsConfig) -> list[PointGroup]:
    """Filter every file, then resolve the groups of the whole run once."""
    filtered = [filter_file(f, config) for f in files]
    return resolve_groups(filtered, config)


def summarize_group(group: PointGroup, config: StatsConfig) -> TrackStats:
    return summarize_points(group.points, config)


def summarize_groups(
        groups: Sequence[PointGroup],
        config: StatsConfig, *,
        workers: Optional[int] = None,
) -> list[GroupSummary]:
    """Summarize already resolved groups, returning results in group order."""
    if workers is None or workers <= 1 or len(groups) <= 1:
        stats = [summarize_group(g, config) for g in groups]
    else:
        with ProcessPoolExecutor(max_workers=min(workers, len(groups))) as executor:
            stats = list(executor.map(summarize_group, groups, repeat(config)))

    return [GroupSummary(g.label, s) for g, s in zip(groups, stats)]


def summarize_run(
        files: Sequence[GpxFile],
        config: StatsConfig, *,
        workers: Optional[int] = None,
) -> list[GroupSummary]:
    """Summarize every group of a run, in group order."""
    return summarize_groups(resolve_run(files, config), config, workers=workers)


def analyze_track(gpx_path: Path, config: Optional[StatsConfig] = None) -> list[GroupSummary]:
    """Summarize a single GPX file."""
    return summarize_run([load_gpx(gpx_path)], config or StatsConfig())
