# gpxstats/util/units.py
"""
Unit conversion and formatting helpers.

Everything inside gpxstats works in meters and seconds; conversion to feet,
miles or kilometers happens only here, at the edge, when printing.
"""

from __future__ import annotations

import datetime as dt
from typing import Optional

METERS_TO_FEET = 3.2808399
METERS_TO_MILES = 0.00062137119
METERS_TO_KM = 0.001
FEET_TO_METERS = 0.3048

UNIT_SYSTEMS = ("imperial", "metric")

NOT_AVAILABLE = "n/a"


def parse_meters(text: str) -> float:
    """
    Parse a length given in meters, or in feet with an "ft" suffix.

      "12"     -> 12.0
      "12.5"   -> 12.5
      "30ft"   -> 9.144
      "30 ft"  -> 9.144

    Raises:
      ValueError on anything else (argparse turns it into a usage error).
    """
    s = text.strip()
    if s.endswith("ft"):
        return float(s[:-2].strip()) * FEET_TO_METERS
    return float(s)


def meters_to_feet(meters: float) -> float:
    return meters * METERS_TO_FEET


def meters_to_miles(meters: float) -> float:
    return meters * METERS_TO_MILES


def meters_to_km(meters: float) -> float:
    return meters * METERS_TO_KM


def _check_units(units: str) -> None:
    if units not in UNIT_SYSTEMS:
        raise ValueError(f"unknown unit system: {units!r}")


def format_elevation(meters: Optional[float], units: str = "imperial") -> str:
    """Elevations and elevation gain: feet (imperial) or meters (metric)."""
    _check_units(units)
    if meters is None:
        return NOT_AVAILABLE
    if units == "imperial":
        return f"{meters_to_feet(meters):.1f} ft"
    return f"{meters:.1f} m"


def format_distance(meters: Optional[float], units: str = "imperial") -> str:
    """Track distances: miles (imperial) or kilometers (metric)."""
    _check_units(units)
    if meters is None:
        return NOT_AVAILABLE
    if units == "imperial":
        return f"{meters_to_miles(meters):.1f} mi"
    return f"{meters_to_km(meters):.1f} km"


def format_duration(d: Optional[dt.timedelta]) -> str:
    """Format a duration as H:MM (minutes truncated, hours unbounded)."""
    if d is None:
        return NOT_AVAILABLE
    total_minutes = int(d.total_seconds()) // 60
    hours, mins = divmod(total_minutes, 60)
    return f"{hours}:{mins:02d}"
