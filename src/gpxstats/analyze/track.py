# gpxstats/analyze/track.py
"""
Track statistics for gpxstats

A single forward pass over one group of points, written as a pure step
function over an immutable state so each transition can be tested alone.

Noise handling works with two thresholds:

- distance gate: a point only counts once it is at least `min_distance`
  from the anchor (the last point that counted). Points inside the gate
  still update elevation extremes and the time span, but add no distance,
  no gain and no moving time, and the anchor stays put.
- elevation gate: checked only for points that passed the distance gate.
  A climb counts once it reaches `min_elevation_gain` above the baseline;
  the baseline then ratchets to the new elevation. Smaller rises and all
  descents leave the baseline where it is.

Moving time is credited per distance-gate crossing: the time since the
previous crossing counts as moving if it is at most `standstill_time`.
A longer gap was a standstill and counts for nothing.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass, replace
from typing import Any, Iterable, Optional

from gpxstats.analyze.distance import distance
from gpxstats.config import StatsConfig
from gpxstats.formats.gpx import TrackPoint

ZERO = dt.timedelta(0)


@dataclass(frozen=True)
class TrackStats:
    """Summary of one point group. Meters and timedeltas; None = not available."""
    points: int = 0
    ele_start: Optional[float] = None
    ele_end: Optional[float] = None
    ele_min: Optional[float] = None
    ele_max: Optional[float] = None
    ele_gain: float = 0.0
    distance_m: float = 0.0
    total_time: Optional[dt.timedelta] = None
    moving_time: Optional[dt.timedelta] = None

    def as_dict(self) -> dict[str, Any]:
        """Flat dict with durations in seconds (for TSV/JSON style output)."""
        d = asdict(self)
        for k in ("total_time", "moving_time"):
            d[k] = d[k].total_seconds() if d[k] is not None else None
        return d


@dataclass(frozen=True)
class TrackState:
    points: int = 0
    anchor: Optional[TrackPoint] = None     # last point that passed the distance gate
    ele_ref: Optional[float] = None         # elevation-gain baseline
    ele_start: Optional[float] = None
    ele_end: Optional[float] = None
    ele_min: Optional[float] = None
    ele_max: Optional[float] = None
    ele_gain: float = 0.0
    distance_m: float = 0.0
    time_first: Optional[dt.datetime] = None
    time_last: Optional[dt.datetime] = None
    timestamps: int = 0
    last_moved: Optional[dt.datetime] = None
    moving_time: Optional[dt.timedelta] = ZERO   # None once a needed timestamp is missing


def _elevation_extremes(state: TrackState, ele: Optional[float]) -> dict[str, Any]:
    if ele is None:
        return {}
    return {
        "ele_start": ele if state.ele_start is None else state.ele_start,
        "ele_end": ele,
        "ele_min": ele if state.ele_min is None else min(state.ele_min, ele),
        "ele_max": ele if state.ele_max is None else max(state.ele_max, ele),
    }


def _time_span(state: TrackState, t: Optional[dt.datetime]) -> dict[str, Any]:
    if t is None:
        return {}
    return {
        "time_first": t if state.time_first is None else state.time_first,
        "time_last": t,
        "timestamps": state.timestamps + 1,
    }


def _elevation_gate(
        ele_ref: Optional[float], ele: Optional[float], min_gain: float,
) -> tuple[float, Optional[float]]:
    """Return (gain to add, new baseline)."""
    if ele is None:
        return 0.0, ele_ref
    if ele_ref is None:
        return 0.0, ele
    rise = ele - ele_ref
    if rise >= min_gain and rise > 0:
        return rise, ele
    return 0.0, ele_ref


def _moving_time(
        moving: Optional[dt.timedelta],
        last_moved: Optional[dt.datetime],
        t: Optional[dt.datetime],
        standstill: dt.timedelta,
) -> Optional[dt.timedelta]:
    if moving is None or last_moved is None or t is None:
        return None
    gap = max(t - last_moved, ZERO)
    if gap <= standstill:
        return moving + gap
    return moving


def step(state: TrackState, point: TrackPoint, config: StatsConfig) -> TrackState:
    """Consume one point and return the next state."""
    changes: dict[str, Any] = {"points": state.points + 1}
    changes.update(_elevation_extremes(state, point.ele))
    changes.update(_time_span(state, point.time))

    if state.anchor is None:
        changes.update(anchor=point, ele_ref=point.ele, last_moved=point.time)
        return replace(state, **changes)

    d = distance(state.anchor, point)
    if d < config.min_distance:
        return replace(state, **changes)

    gain, ele_ref = _elevation_gate(state.ele_ref, point.ele, config.min_elevation_gain)
    changes.update(
        distance_m=state.distance_m + d,
        ele_gain=state.ele_gain + gain,
        ele_ref=ele_ref,
        anchor=point,
        moving_time=_moving_time(state.moving_time, state.last_moved, point.time,
                                 config.standstill_time),
        last_moved=point.time,
    )
    return replace(state, **changes)


def finish(state: TrackState) -> TrackStats:
    """
    Turn the final state into a TrackStats.

    total_time is the absolute span between the first and last timestamps
    seen, so points recorded out of time order never give a negative time.
    """
    total_time = None
    moving_time = None
    if state.points >= 2 and state.timestamps >= 2:
        total_time = abs(state.time_last - state.time_first)
        if state.moving_time is not None:
            moving_time = min(state.moving_time, total_time)

    return TrackStats(
        points=state.points,
        ele_start=state.ele_start,
        ele_end=state.ele_end,
        ele_min=state.ele_min,
        ele_max=state.ele_max,
        ele_gain=state.ele_gain,
        distance_m=state.distance_m,
        total_time=total_time,
        moving_time=moving_time,
    )


def summarize_points(points: Iterable[TrackPoint], config: StatsConfig) -> TrackStats:
    state = TrackState()
    for p in points:
        state = step(state, p, config)
    return finish(state)
