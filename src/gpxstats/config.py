"""
gpxstats configuration loader

This module centralizes *all* configuration handling for gpxstats.

Design goals:
- CLI flags override everything.
- Sensible defaults when no config exists (10 m gain, 1 m distance, 10 s standstill).
- Per-machine config without committing personal preferences:
    ~/.config/gpxstats/config.toml
- Repo-local config:
    <repo_root>/config/config.toml
- Environment variable overrides for automation.

Precedence (highest to lowest) for any given value:
1) CLI argument (applied by the CLI through StatsConfig.with_overrides)
2) Environment variables (GPXSTATS_*)
3) User config: ~/.config/gpxstats/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults

Example config.toml:

    [stats]
    min_elevation_gain = 10.0     # meters
    min_distance = 1.0            # meters
    standstill_time = 10          # seconds
    join_segments = false
    join_tracks = false
    filter_zero_elevation = false
    filter_elevation_below = -100.0

    [output]
    units = "imperial"            # or "metric"
    workers = 4

This module uses Python's built-in tomllib on Python 3.11+, or `tomli` if installed.

The statistics engine never reads this module's files or the environment
itself: it only receives the resulting StatsConfig value.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from gpxstats.errors import ConfigError
from gpxstats.util.units import UNIT_SYSTEMS


# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise ConfigError
      with a clear, user-facing message.

    Missing config files are normal; malformed ones indicate user intent
    and should fail loudly.
    """
    if not path.is_file():
        return {}

    try:
        try:
            # Python 3.11+ standard library
            import tomllib
            return tomllib.loads(path.read_text(encoding="utf-8")) or {}
        except ModuleNotFoundError:
            import tomli
            return tomli.loads(path.read_text(encoding="utf-8")) or {}
    except Exception as e:
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "stats.min_distance")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_bool(v: Any, key: str) -> bool:
    """
    Coerce loosely-typed config values into booleans.

    Accepts common truthy / falsy representations so that TOML values and
    environment variables behave the same way.
    """
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("true", "yes", "y", "1", "on"):
            return True
        if s in ("false", "no", "n", "0", "off"):
            return False
    raise ConfigError(f"{key}: expected a boolean, got {v!r}")


def _as_float(v: Any, key: str) -> float:
    """Coerce a number (or numeric string, e.g. from the environment)."""
    if isinstance(v, bool):
        raise ConfigError(f"{key}: expected a number, got {v!r}")
    try:
        return float(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key}: expected a number, got {v!r}") from e


def _as_optional_float(v: Any, key: str) -> Optional[float]:
    """Like _as_float, but "" / "none" / "off" switch the setting off."""
    if isinstance(v, str) and v.strip().lower() in ("", "none", "off"):
        return None
    return _as_float(v, key)


def _as_int(v: Any, key: str) -> int:
    if isinstance(v, bool):
        raise ConfigError(f"{key}: expected an integer, got {v!r}")
    try:
        return int(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key}: expected an integer, got {v!r}") from e


def _as_units(v: Any, key: str) -> str:
    s = str(v).strip().lower()
    if s not in UNIT_SYSTEMS:
        raise ConfigError(f"{key}: expected one of {', '.join(UNIT_SYSTEMS)}, got {v!r}")
    return s


# ---------------------------------------------------------------------------
# Repo discovery
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the gpxstats repo root.

    Heuristic:
    - The presence of a `config/` directory marks the repo root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StatsConfig:
    """
    Thresholds and grouping flags consumed by the statistics engine.

    Immutable for the duration of a run and shared read-only by every
    point group (also across worker processes).

    Attributes:
    - min_elevation_gain: meters a climb must reach before it counts as gain
    - min_distance: meters a point must move from the anchor to count
    - standstill_time: longest pause that still counts as moving time
    - join_segments: one group per track instead of per segment
    - join_tracks: one group for the whole run (implies join_segments)
    - filter_zero_elevation: drop points whose elevation is exactly 0.0
    - filter_elevation_below: drop points below this elevation (meters)
    """

    min_elevation_gain: float = 10.0
    min_distance: float = 1.0
    standstill_time: dt.timedelta = dt.timedelta(seconds=10)
    join_segments: bool = False
    join_tracks: bool = False
    filter_zero_elevation: bool = False
    filter_elevation_below: Optional[float] = None

    def __post_init__(self) -> None:
        # written as not (x >= 0) so NaN is rejected too
        if not (self.min_elevation_gain >= 0):
            raise ConfigError(f"min_elevation_gain must be >= 0, got {self.min_elevation_gain}")
        if not (self.min_distance >= 0):
            raise ConfigError(f"min_distance must be >= 0, got {self.min_distance}")
        if self.standstill_time < dt.timedelta(0):
            raise ConfigError(f"standstill_time must be >= 0, got {self.standstill_time}")
        if self.filter_elevation_below is not None and not math.isfinite(self.filter_elevation_below):
            raise ConfigError(f"filter_elevation_below must be a finite number, got {self.filter_elevation_below}")

    @property
    def joins_segments(self) -> bool:
        """Segments are concatenated whenever tracks are."""
        return self.join_segments or self.join_tracks

    def with_overrides(self, **values: Any) -> "StatsConfig":
        """
        Return a copy with every non-None value applied.

        Used for CLI flags: an option that was not given stays None and
        leaves the configured value alone. `standstill_time` may be given
        in seconds.
        """
        changes = {k: v for k, v in values.items() if v is not None}
        st = changes.get("standstill_time")
        if st is not None and not isinstance(st, dt.timedelta):
            changes["standstill_time"] = dt.timedelta(seconds=float(st))
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class OutputConfig:
    """How results are presented and how many worker processes compute them."""

    units: str = "imperial"
    workers: Optional[int] = None


@dataclass(frozen=True)
class GpxStatsConfig:
    """
    Fully merged gpxstats configuration.

    Attributes:
    - stats: engine thresholds and flags
    - output: presentation / execution settings
    - source: provenance map showing where each value came from
    """

    stats: StatsConfig
    output: OutputConfig
    source: dict[str, str]


# key -> coercion; keys are the dotted TOML names
_STATS_KEYS = {
    "stats.min_elevation_gain": _as_float,
    "stats.min_distance": _as_float,
    "stats.standstill_time": _as_float,
    "stats.join_segments": _as_bool,
    "stats.join_tracks": _as_bool,
    "stats.filter_zero_elevation": _as_bool,
    "stats.filter_elevation_below": _as_optional_float,
}

_OUTPUT_KEYS = {
    "output.units": _as_units,
    "output.workers": _as_int,
}

_ENV_MAP = {
    "GPXSTATS_MIN_ELEVATION_GAIN": "stats.min_elevation_gain",
    "GPXSTATS_MIN_DISTANCE": "stats.min_distance",
    "GPXSTATS_STANDSTILL_TIME": "stats.standstill_time",
    "GPXSTATS_JOIN_SEGMENTS": "stats.join_segments",
    "GPXSTATS_JOIN_TRACKS": "stats.join_tracks",
    "GPXSTATS_FILTER_ZERO_ELEVATION": "stats.filter_zero_elevation",
    "GPXSTATS_FILTER_ELEVATION_BELOW": "stats.filter_elevation_below",
    "GPXSTATS_UNITS": "output.units",
    "GPXSTATS_WORKERS": "output.workers",
}


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> GpxStatsConfig:
    """
    Load, merge, and validate all gpxstats configuration.

    This function is the single authoritative entry point
    for configuration access.
    """

    # Locate repo and config files
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "gpxstats" / "config.toml"

    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    all_keys = {**_STATS_KEYS, **_OUTPUT_KEYS}
    values: dict[str, Any] = {}
    src = {k: "default" for k in all_keys}

    # Repo, then user (later wins)
    for cfg, label, path in ((repo_cfg, "repo", repo_config_path),
                             (user_cfg, "user", user_config_path)):
        for key, coerce in all_keys.items():
            raw = _deep_get(cfg, key)
            if raw is None:
                continue
            values[key] = coerce(raw, key)
            src[key] = f"{label}:{path}"

    # Environment variable overrides (highest non-CLI precedence)
    for env, key in _ENV_MAP.items():
        raw = os.environ.get(env)
        if raw is None or raw == "":
            continue
        values[key] = all_keys[key](raw, env)
        src[key] = f"env:{env}"

    stats_kwargs = {k.split(".", 1)[1]: v for k, v in values.items() if k.startswith("stats.")}
    if "standstill_time" in stats_kwargs:
        if not math.isfinite(stats_kwargs["standstill_time"]):
            raise ConfigError(f"stats.standstill_time must be a finite number of seconds, got {stats_kwargs['standstill_time']}")
        stats_kwargs["standstill_time"] = dt.timedelta(seconds=stats_kwargs["standstill_time"])

    output_kwargs = {k.split(".", 1)[1]: v for k, v in values.items() if k.startswith("output.")}
    workers = output_kwargs.get("workers")
    if workers is not None and workers < 1:
        raise ConfigError(f"output.workers must be >= 1, got {workers}")

    return GpxStatsConfig(
        stats=StatsConfig(**stats_kwargs),
        output=OutputConfig(**output_kwargs),
        source=src,
    )
