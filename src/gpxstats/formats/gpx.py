# gpxstats/formats/gpx.py
"""
GPX reading for gpxstats

This module is intentionally format-focused:
- GPX namespace handling (1.1, 1.0, or none at all)
- safely reading ElementTree
- decoding <trk>/<trkseg>/<trkpt> into plain dataclasses

Key design principle:
  The statistics engine never sees XML. It receives ordered files -> tracks ->
  segments -> points, exactly as recorded (no sorting, no de-duplication).
"""

from __future__ import annotations

import datetime as _dt
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from gpxstats.errors import InvalidGpxError
from gpxstats.util.units import parse_meters

GPX_NAMESPACES = (
    "http://www.topografix.com/GPX/1/1",
    "http://www.topografix.com/GPX/1/0",
)


def _namespace(root: ET.Element) -> str:
    """Return the namespace URI of the root <gpx> element ("" if none)."""
    if root.tag.startswith("{"):
        return root.tag[1:].split("}", 1)[0]
    return ""


def qn(tag: str, ns: str) -> str:
    """
    Build an ElementTree-qualified name for a GPX tag.

    ElementTree represents namespaced tags internally as
      "{namespace-uri}tag"
    """
    return f"{{{ns}}}{tag}" if ns else tag


def _parse_gpx_time(text: str) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp commonly found in GPX <time> nodes.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"
      - "2026-01-02T21:14:44"       (no zone; some devices omit it)
    """
    if not text:
        return None
    s = text.strip()
    if not s:
        return None

    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = _dt.datetime.fromisoformat(s)
    except ValueError:
        return None

    # Ensure tz-aware; if naive, assume UTC (conservative for GPX sources)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)

    return dt.astimezone(_dt.timezone.utc)


def _text(elem: ET.Element, tag: str, ns: str) -> Optional[str]:
    """Stripped text of a direct child, or None if missing/blank."""
    t = elem.findtext(qn(tag, ns))
    if t is None:
        return None
    t = t.strip()
    return t or None


@dataclass(frozen=True)
class TrackPoint:
    """One recorded GPS fix. `ele` in meters, `time` tz-aware UTC."""
    lat: float
    lon: float
    ele: Optional[float] = None
    time: Optional[_dt.datetime] = None


@dataclass(frozen=True)
class GpxTrack:
    name: Optional[str]
    segments: list[list[TrackPoint]] = field(default_factory=list)


@dataclass(frozen=True)
class GpxFile:
    path: Optional[Path]
    name: Optional[str]
    tracks: list[GpxTrack] = field(default_factory=list)

    @property
    def point_count(self) -> int:
        return sum(len(seg) for trk in self.tracks for seg in trk.segments)


def read_gpx(path: Path) -> ET.ElementTree:
    """
    Read a GPX file into an ElementTree.

    Raises:
      InvalidGpxError (wrapping ET.ParseError / OSError)
    """
    try:
        return ET.parse(path)
    except ET.ParseError as e:
        raise InvalidGpxError(f"{path}: failed to parse GPX ({e})") from e
    except OSError as e:
        raise InvalidGpxError(f"{path}: failed to read GPX ({e})") from e


def _coordinate(trkpt: ET.Element, attr: str, limit: float, where: str) -> float:
    raw = trkpt.get(attr)
    if raw is None:
        raise InvalidGpxError(f"{where}: missing {attr}")
    try:
        v = float(raw)
    except ValueError as e:
        raise InvalidGpxError(f"{where}: invalid {attr} {raw!r}") from e
    # NaN fails both comparisons, so test the accepted range instead
    if not (-limit <= v <= limit):
        raise InvalidGpxError(f"{where}: {attr} {raw} out of range")
    return v


def _extract_point(trkpt: ET.Element, ns: str, where: str) -> TrackPoint:
    lat = _coordinate(trkpt, "lat", 90.0, where)
    lon = _coordinate(trkpt, "lon", 180.0, where)

    ele = None
    ele_text = _text(trkpt, "ele", ns)
    if ele_text is not None:
        try:
            ele = parse_meters(ele_text)
        except ValueError as e:
            raise InvalidGpxError(f"{where}: invalid elevation {ele_text!r}") from e
        if not math.isfinite(ele):
            raise InvalidGpxError(f"{where}: invalid elevation {ele_text!r}")

    time = None
    time_text = _text(trkpt, "time", ns)
    if time_text is not None:
        time = _parse_gpx_time(time_text)
        if time is None:
            raise InvalidGpxError(f"{where}: invalid date/time {time_text!r}")

    return TrackPoint(lat=lat, lon=lon, ele=ele, time=time)


def parse_gpx(tree: ET.ElementTree, path: Optional[Path] = None) -> GpxFile:
    """
    Decode the track hierarchy of a GPX tree.

    Waypoints and routes are ignored; only <trk> content is summarized.
    A track without a <name> inherits the file's <metadata><name>.
    """
    root = tree.getroot()
    ns = _namespace(root)
    if ns and ns not in GPX_NAMESPACES:
        raise InvalidGpxError(f"{path}: unsupported GPX namespace {ns}")
    if root.tag != qn("gpx", ns):
        raise InvalidGpxError(f"{path}: root element is not <gpx>")

    file_name = None
    md = root.find(qn("metadata", ns))
    if md is not None:
        file_name = _text(md, "name", ns)
    # GPX 1.0 keeps the name directly under <gpx>
    if file_name is None:
        file_name = _text(root, "name", ns)

    tracks: list[GpxTrack] = []
    for tnum, trk in enumerate(root.findall(qn("trk", ns)), start=1):
        segments: list[list[TrackPoint]] = []
        for snum, seg in enumerate(trk.findall(qn("trkseg", ns)), start=1):
            points = []
            for pnum, trkpt in enumerate(seg.findall(qn("trkpt", ns)), start=1):
                where = f"{path}: track {tnum}, segment {snum}, point {pnum}"
                points.append(_extract_point(trkpt, ns, where))
            segments.append(points)
        tracks.append(GpxTrack(name=_text(trk, "name", ns) or file_name, segments=segments))

    return GpxFile(path=path, name=file_name, tracks=tracks)


def load_gpx(path: Path) -> GpxFile:
    """Read and decode a GPX file."""
    return parse_gpx(read_gpx(path), path=path)
