import datetime as dt

import pytest

from gpxstats.config import StatsConfig, load_config
from gpxstats.errors import ConfigError


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults(tmp_path):
    cfg = load_config(repo_root=tmp_path, user_config_path=tmp_path / "none.toml")

    assert cfg.stats == StatsConfig()
    assert cfg.stats.min_elevation_gain == 10.0
    assert cfg.stats.min_distance == 1.0
    assert cfg.stats.standstill_time == dt.timedelta(seconds=10)
    assert cfg.output.units == "imperial"
    assert cfg.output.workers is None
    assert set(cfg.source.values()) == {"default"}


def test_precedence_env_over_user_over_repo(tmp_path, monkeypatch):
    _write(tmp_path / "config" / "config.toml",
           "[stats]\nmin_distance = 2.0\nstandstill_time = 30\njoin_tracks = true\n")
    user = _write(tmp_path / "user.toml", "[stats]\nmin_distance = 3\n[output]\nunits = 'metric'\n")
    monkeypatch.setenv("GPXSTATS_STANDSTILL_TIME", "5")

    cfg = load_config(repo_root=tmp_path, user_config_path=user)

    assert cfg.stats.min_distance == 3.0
    assert cfg.stats.standstill_time == dt.timedelta(seconds=5)
    assert cfg.stats.join_tracks is True
    assert cfg.stats.min_elevation_gain == 10.0
    assert cfg.output.units == "metric"

    assert cfg.source["stats.min_distance"] == f"user:{user}"
    assert cfg.source["stats.standstill_time"] == "env:GPXSTATS_STANDSTILL_TIME"
    assert cfg.source["stats.join_tracks"].startswith("repo:")
    assert cfg.source["stats.min_elevation_gain"] == "default"


def test_env_values_are_coerced(tmp_path, monkeypatch):
    monkeypatch.setenv("GPXSTATS_FILTER_ZERO_ELEVATION", "yes")
    monkeypatch.setenv("GPXSTATS_FILTER_ELEVATION_BELOW", "-50")
    monkeypatch.setenv("GPXSTATS_WORKERS", "4")

    cfg = load_config(repo_root=tmp_path, user_config_path=tmp_path / "none.toml")

    assert cfg.stats.filter_zero_elevation is True
    assert cfg.stats.filter_elevation_below == -50.0
    assert cfg.output.workers == 4


@pytest.mark.parametrize(
    "toml_text",
    [
        "[stats\nmin_distance = 1",
        "[stats]\nmin_distance = 'far'\n",
        "[stats]\njoin_segments = 'maybe'\n",
        "[stats]\nmin_elevation_gain = -1\n",
        "[output]\nunits = 'furlongs'\n",
        "[output]\nworkers = 0\n",
    ],
)
def test_invalid_config_fails(tmp_path, toml_text):
    user = _write(tmp_path / "user.toml", toml_text)
    with pytest.raises(ConfigError):
        load_config(repo_root=tmp_path, user_config_path=user)


def test_negative_thresholds_rejected():
    with pytest.raises(ConfigError):
        StatsConfig(min_distance=-0.5)
    with pytest.raises(ConfigError):
        StatsConfig(standstill_time=dt.timedelta(seconds=-1))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_distance": float("nan")},
        {"min_elevation_gain": float("nan")},
        {"filter_elevation_below": float("nan")},
        {"filter_elevation_below": float("-inf")},
    ],
)
def test_non_finite_thresholds_rejected(kwargs):
    with pytest.raises(ConfigError):
        StatsConfig(**kwargs)


@pytest.mark.parametrize(
    "env, value",
    [("GPXSTATS_MIN_DISTANCE", "nan"), ("GPXSTATS_STANDSTILL_TIME", "inf")],
)
def test_non_finite_env_values_fail(tmp_path, monkeypatch, env, value):
    monkeypatch.setenv(env, value)
    with pytest.raises(ConfigError):
        load_config(repo_root=tmp_path, user_config_path=tmp_path / "none.toml")


def test_with_overrides_skips_unset_values():
    base = StatsConfig(min_distance=2.0)
    cfg = base.with_overrides(min_distance=None, standstill_time=30, join_tracks=True)

    assert cfg.min_distance == 2.0
    assert cfg.standstill_time == dt.timedelta(seconds=30)
    assert cfg.joins_segments
    assert base.join_tracks is False
