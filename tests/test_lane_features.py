import math

import pytest

from lanescoring.features.lane import compute_lane_features
from lanescoring.utils.types import HistoryRecord, LanePoint, LaneSegment, LaneSequence


class _UntouchablePoint:
    @property
    def position_xy(self):
        raise AssertionError("lane point beyond the feature block was accessed")


def _pose(x: float = 0.0, y: float = 0.0, theta: float = 0.0, velocity_heading: float = 0.0) -> HistoryRecord:
    return HistoryRecord(timestamp_s=1.0, position_xy=(x, y), theta=theta, velocity_heading=velocity_heading)


def _point(x: float, y: float, relative_l: float = 0.0, heading: float = 0.0, angle_diff: float = 0.0) -> LanePoint:
    return LanePoint(position_xy=(x, y), relative_l=relative_l, heading=heading, angle_diff=angle_diff)


def test_point_tuple_contents() -> None:
    seq = LaneSequence(
        lane_segments=[LaneSegment(lane_id="l1", lane_points=[_point(0.0, 10.0, 0.5, 0.1, 0.2), _point(10.0, 0.0, -0.5, 0.3, 0.4)])]
    )
    f = compute_lane_features(_pose(), seq, lane_feature_size=8)
    assert len(f) == 8
    assert abs(f[0] - 0.0) < 1e-12
    assert f[1:4] == [0.5, 0.1, 0.2]
    assert abs(f[4] - 1.0) < 1e-12
    assert f[5:8] == [-0.5, 0.3, 0.4]


def test_bearing_is_relative_to_heading() -> None:
    seq = LaneSequence(lane_segments=[LaneSegment(lane_id="l1", lane_points=[_point(1.0, 1.0)])])
    f = compute_lane_features(_pose(theta=0.3), seq, lane_feature_size=4)
    assert abs(f[0] - math.sin(math.atan2(1.0, 1.0) - 0.3)) < 1e-12


def test_short_sequence_repeats_last_tuple() -> None:
    seq = LaneSequence(
        lane_segments=[
            LaneSegment(lane_id="a", lane_points=[_point(1.0, 2.0, 0.1, 0.2, 0.3)]),
            LaneSegment(lane_id="b", lane_points=[_point(3.0, 5.0, 0.7, 0.8, 0.9)]),
        ]
    )
    f = compute_lane_features(_pose(), seq, lane_feature_size=20)
    assert len(f) == 20
    last = f[4:8]
    for k in range(8, 20, 4):
        assert f[k : k + 4] == last
    assert f[0:4] != last


def test_long_sequence_stops_at_block_size() -> None:
    seq = LaneSequence(
        lane_segments=[
            LaneSegment(lane_id="a", lane_points=[_point(0.0, 1.0), _point(0.0, 2.0)]),
            LaneSegment(lane_id="b", lane_points=[_UntouchablePoint(), _UntouchablePoint()]),
        ]
    )
    f = compute_lane_features(_pose(), seq, lane_feature_size=8)
    assert len(f) == 8


def test_points_without_position_do_not_consume_slots() -> None:
    seq = LaneSequence(
        lane_segments=[
            LaneSegment(
                lane_id="a",
                lane_points=[LanePoint(position_xy=None, relative_l=9.0), _point(0.0, 1.0, 0.1), _point(0.0, 2.0, 0.2)],
            )
        ]
    )
    f = compute_lane_features(_pose(), seq, lane_feature_size=8)
    assert f[1] == 0.1
    assert f[5] == 0.2


def test_missing_pose_or_points_gives_empty_block() -> None:
    seq = LaneSequence(lane_segments=[LaneSegment(lane_id="a", lane_points=[_point(0.0, 1.0)])])
    no_position = HistoryRecord(timestamp_s=1.0)
    uninitialized = HistoryRecord(timestamp_s=1.0, position_xy=(0.0, 0.0), initialized=False)
    assert compute_lane_features(no_position, seq) == []
    assert compute_lane_features(uninitialized, seq) == []
    assert compute_lane_features(None, seq) == []
    assert compute_lane_features(_pose(), LaneSequence(lane_segments=[])) == []


def test_filtered_kinematics_uses_velocity_heading() -> None:
    seq = LaneSequence(lane_segments=[LaneSegment(lane_id="a", lane_points=[_point(0.0, 1.0)])])
    pose = _pose(theta=0.0, velocity_heading=0.5)
    assert compute_lane_features(pose, seq, lane_feature_size=4, use_filtered_kinematics=False)[0] == 0.0
    assert abs(compute_lane_features(pose, seq, lane_feature_size=4, use_filtered_kinematics=True)[0] - math.sin(-0.5)) < 1e-12


def test_block_size_must_be_positive_multiple_of_four() -> None:
    seq = LaneSequence(lane_segments=[LaneSegment(lane_id="a", lane_points=[_point(0.0, 1.0), _point(0.0, 2.0), _point(0.0, 3.0)])])
    for size in (6, 0, -4):
        with pytest.raises(ValueError):
            compute_lane_features(_pose(), seq, lane_feature_size=size)
    assert len(compute_lane_features(_pose(), seq, lane_feature_size=12)) == 12
