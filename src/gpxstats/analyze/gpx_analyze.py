#!/usr/bin/env python3
"""
gpxstats: summarize GPX track(s).

Prints elevation (start/end/min/max/gain), total distance, total time and
moving time for every segment, track, or the whole run, filtering GPS noise
with minimum distance / elevation-gain thresholds.
"""

from __future__ import annotations

import argparse
import math
import sys
from pathlib import Path
from typing import Iterable

from gpxstats.analyze.report import (
    print_parameters,
    print_report,
    print_tsv_header,
    print_tsv_row,
)
from gpxstats.analyze.run import resolve_run, summarize_groups
from gpxstats.config import load_config
from gpxstats.errors import GpxStatsError
from gpxstats.formats.gpx import GpxFile, load_gpx
from gpxstats.util.logging import log, log_verbose
from gpxstats.util.units import UNIT_SYSTEMS, parse_meters


def _elevation_arg(text: str) -> float:
    try:
        v = parse_meters(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a length in meters (or ft): {text!r}")
    if not math.isfinite(v):
        raise argparse.ArgumentTypeError(f"must be a finite number: {text!r}")
    return v


def _meters_arg(text: str) -> float:
    try:
        v = parse_meters(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a length in meters (or ft): {text!r}")
    if not math.isfinite(v) or v < 0:
        raise argparse.ArgumentTypeError(f"must be a finite number >= 0: {text!r}")
    return v


def _seconds_arg(text: str) -> float:
    try:
        v = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number of seconds: {text!r}")
    if not math.isfinite(v) or v < 0:
        raise argparse.ArgumentTypeError(f"must be a finite number >= 0: {text!r}")
    return v


def _workers_arg(text: str) -> int:
    try:
        v = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a whole number: {text!r}")
    if v < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1: {text!r}")
    return v


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="gpxstats: Summarize GPX file(s).")
    ap.add_argument("gpx", nargs="+", type=Path,
                    help="GPX file(s), or directories to search for *.gpx.")
    ap.add_argument("-e", "--min-elevation-gain", type=_meters_arg, default=None,
                    help="Minimum climb (meters, or e.g. '30ft') before it counts as "
                         "elevation gain. Default: 10.")
    ap.add_argument("-d", "--min-distance", type=_meters_arg, default=None,
                    help="Minimum movement (meters) for a point to count toward "
                         "distance. Default: 1.")
    ap.add_argument("-t", "--standstill-time", type=_seconds_arg, default=None,
                    help="Seconds without movement (per --min-distance) after which "
                         "the pause no longer counts as moving time. Default: 10.")
    ap.add_argument("--join-segments", action="store_true", default=None,
                    help="Summarize each track as a whole instead of per segment.")
    ap.add_argument("--join-tracks", action="store_true", default=None,
                    help="Summarize all tracks (of all files) together. "
                         "Implies --join-segments.")
    ap.add_argument("--filter-zero-elevation", action="store_true", default=None,
                    help="Drop points whose elevation is exactly 0.")
    ap.add_argument("--filter-elevation-below", type=_elevation_arg, default=None,
                    metavar="METERS",
                    help="Drop points below this elevation.")
    ap.add_argument("--units", choices=UNIT_SYSTEMS, default=None,
                    help="Unit system for the report (default: imperial).")
    ap.add_argument("--tsv", action="store_true",
                    help="Print tab-separated output in meters/seconds (good for piping).")
    ap.add_argument("--workers", type=_workers_arg, default=None,
                    help="Summarize groups in N worker processes.")
    ap.add_argument("--config", type=Path, default=None,
                    help="Config TOML to use instead of ~/.config/gpxstats/config.toml.")
    ap.add_argument("--plot", action="store_true",
                    help="Show an elevation profile of every group (matplotlib).")
    ap.add_argument("--plot-output", type=Path, default=None, metavar="PATH",
                    help="Save the elevation profile to PATH instead of showing it.")
    ap.add_argument("-v", "--verbose", action="store_true",
                    help="More logging.")
    return ap


def collect_inputs(paths: Iterable[Path], *, verbose: bool = False) -> list[Path]:
    """Expand directories to their *.gpx files; skip what does not exist."""
    selected: list[Path] = []
    for p in paths:
        p = p.expanduser()
        if p.is_dir():
            found = sorted(p.rglob("*.gpx"))
            log_verbose(f"Found {len(found)} GPX file(s) under {p}", verbose)
            selected.extend(found)
        elif p.is_file():
            selected.append(p)
        else:
            log(f"Skipping (not a file): {p}")
    return selected


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(user_config_path=args.config)
        stats_cfg = cfg.stats.with_overrides(
            min_elevation_gain=args.min_elevation_gain,
            min_distance=args.min_distance,
            standstill_time=args.standstill_time,
            join_segments=args.join_segments,
            join_tracks=args.join_tracks,
            filter_zero_elevation=args.filter_zero_elevation,
            filter_elevation_below=args.filter_elevation_below,
        )
        units = args.units or cfg.output.units
        workers = args.workers if args.workers is not None else cfg.output.workers

        for key, origin in sorted(cfg.source.items()):
            log_verbose(f"config {key}: {origin}", args.verbose)

        paths = collect_inputs(args.gpx, verbose=args.verbose)
        if not paths:
            log("No GPX files to analyze.")
            return 1

        files: list[GpxFile] = []
        for path in paths:
            log_verbose(f"Reading: {path}", args.verbose)
            gpx = load_gpx(path)
            log_verbose(f"  {len(gpx.tracks)} track(s), {gpx.point_count} point(s)", args.verbose)
            files.append(gpx)

        groups = resolve_run(files, stats_cfg)
        summaries = summarize_groups(groups, stats_cfg, workers=workers)
    except GpxStatsError as e:
        log(f"ERROR: {e}")
        return 1

    if args.tsv:
        print_tsv_header()
        for s in summaries:
            print_tsv_row(s)
    else:
        print("input: " + ", ".join(str(p) for p in paths))
        print_parameters(stats_cfg, units=units)
        for s in summaries:
            if s.stats.points >= 2 and s.stats.total_time is None:
                log_verbose(f"Missing timestamps; no time totals for {s.label}", args.verbose)
            print_report(s, units=units)

    if args.plot or args.plot_output is not None:
        # matplotlib is slow to import; only pay for it when plotting
        from gpxstats.visualize.plot import plot_elevation
        plot_elevation(groups, units=units, output=args.plot_output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
