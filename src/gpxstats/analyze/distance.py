# gpxstats/analyze/distance.py
"""
Point-to-point distance in meters.

Great-circle distance on a spherical earth (haversine), combined with the
elevation change between the two points. The earth is not a sphere, but the
elevation term matters far more than the ellipsoid does at GPS-fix spacing.
"""

from __future__ import annotations

import math

from haversine import haversine, Unit

from gpxstats.errors import InvalidPointError
from gpxstats.formats.gpx import TrackPoint


def horizontal_distance(a: TrackPoint, b: TrackPoint) -> float:
    if a.lat == b.lat and a.lon == b.lon:
        return 0.0
    try:
        return haversine((a.lat, a.lon), (b.lat, b.lon), unit=Unit.METERS)
    except ValueError as e:
        # haversine rejects out-of-range coordinates
        raise InvalidPointError(f"cannot measure {a} -> {b}: {e}") from e


def vertical_distance(a: TrackPoint, b: TrackPoint) -> float:
    """b.ele - a.ele, or 0.0 when either elevation is missing."""
    if a.ele is None or b.ele is None:
        return 0.0
    return b.ele - a.ele


def distance(a: TrackPoint, b: TrackPoint) -> float:
    """3D distance: sqrt(horizontal^2 + vertical^2)."""
    return math.hypot(horizontal_distance(a, b), vertical_distance(a, b))
