from pathlib import Path

import pytest

from gpxstats.analyze.grouping import GroupLabel, resolve_groups
from gpxstats.config import StatsConfig
from gpxstats.errors import GroupingError
from gpxstats.formats.gpx import GpxFile, GpxTrack, TrackPoint


def _pt(i: int) -> TrackPoint:
    return TrackPoint(45.0 + i * 0.0001, 7.0, 100.0)


@pytest.fixture
def two_files():
    a = GpxFile(Path("a.gpx"), "A", [
        GpxTrack("a1", [[_pt(0), _pt(1)], [_pt(2)]]),
        GpxTrack("a2", [[_pt(3)]]),
    ])
    b = GpxFile(Path("b.gpx"), "B", [
        GpxTrack("b1", [[_pt(4), _pt(5)], []]),
    ])
    return [a, b]


def test_default_is_one_group_per_segment(two_files):
    groups = resolve_groups(two_files, StatsConfig())

    assert [g.label for g in groups] == [
        GroupLabel(Path("a.gpx"), "A", 0, "a1", 0),
        GroupLabel(Path("a.gpx"), "A", 0, "a1", 1),
        GroupLabel(Path("a.gpx"), "A", 1, "a2", 0),
        GroupLabel(Path("b.gpx"), "B", 0, "b1", 0),
        GroupLabel(Path("b.gpx"), "B", 0, "b1", 1),
    ]
    assert [len(g.points) for g in groups] == [2, 1, 1, 2, 0]


def test_join_segments_is_one_group_per_track(two_files):
    groups = resolve_groups(two_files, StatsConfig(join_segments=True))

    assert [(g.label.path, g.label.track, g.label.segment) for g in groups] == [
        (Path("a.gpx"), 0, None),
        (Path("a.gpx"), 1, None),
        (Path("b.gpx"), 0, None),
    ]
    assert groups[0].points == [_pt(0), _pt(1), _pt(2)]


def test_join_tracks_single_file(two_files):
    groups = resolve_groups(two_files[:1], StatsConfig(join_tracks=True))

    assert len(groups) == 1
    assert groups[0].label == GroupLabel(Path("a.gpx"), "A")
    assert groups[0].points == [_pt(i) for i in range(4)]


def test_join_tracks_many_files_is_one_run_wide_group(two_files):
    groups = resolve_groups(two_files, StatsConfig(join_tracks=True))

    assert len(groups) == 1
    assert groups[0].label == GroupLabel()
    assert groups[0].points == [_pt(i) for i in range(6)]


def test_join_tracks_implies_join_segments(two_files):
    cfg = StatsConfig(join_tracks=True, join_segments=False)
    assert cfg.joins_segments
    assert len(resolve_groups(two_files, cfg)) == 1


def test_no_files_no_groups():
    assert resolve_groups([], StatsConfig(join_tracks=True)) == []


def test_non_point_in_segment_fails():
    bad = GpxFile(Path("x.gpx"), None, [GpxTrack(None, [[_pt(0), (45.0, 7.0)]])])
    with pytest.raises(GroupingError, match="item 1"):
        resolve_groups([bad], StatsConfig())


def test_non_file_input_fails():
    with pytest.raises(GroupingError):
        resolve_groups([[[_pt(0)]]], StatsConfig())
