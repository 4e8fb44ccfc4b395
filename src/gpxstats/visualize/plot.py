# gpxstats/visualize/plot.py
"""
Plotting routines for gpxstats
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt

from gpxstats.analyze.distance import horizontal_distance
from gpxstats.analyze.grouping import PointGroup
from gpxstats.analyze.report import group_title
from gpxstats.formats.gpx import TrackPoint
from gpxstats.util.units import meters_to_feet, meters_to_km, meters_to_miles


def elevation_profile(points: Sequence[TrackPoint]) -> tuple[list[float], list[float]]:
    """
    Return (distance along the track in meters, elevation in meters).

    Raw point-to-point distance, no thresholds. Points without an elevation
    still move the distance axis along but are not plotted.
    """
    xs: list[float] = []
    ys: list[float] = []
    along = 0.0
    for i, p in enumerate(points):
        if i:
            along += horizontal_distance(points[i - 1], p)
        if p.ele is not None:
            xs.append(along)
            ys.append(p.ele)
    return xs, ys


def plot_elevation(groups: Sequence[PointGroup], *, units: str = "imperial",
                   output: Optional[Path] = None) -> None:
    """One elevation profile line per group; saved to `output` or shown."""
    if units == "imperial":
        to_x, to_y, x_unit, y_unit = meters_to_miles, meters_to_feet, "mi", "ft"
    else:
        to_x, to_y, x_unit, y_unit = meters_to_km, (lambda m: m), "km", "m"

    fig = plt.figure(figsize=(10, 5))
    for g in groups:
        xs, ys = elevation_profile(g.points)
        if not xs:
            continue
        plt.plot([to_x(x) for x in xs], [to_y(y) for y in ys],
                 linewidth=1, label=group_title(g.label))
    plt.xlabel(f"Distance ({x_unit})")
    plt.ylabel(f"Elevation ({y_unit})")
    plt.title("Elevation profile")
    if len(groups) > 1:
        plt.legend(fontsize="small")

    if output is not None:
        fig.savefig(output)
        plt.close(fig)
    else:
        plt.show()
