from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Sequence, Tuple

Point2D = Tuple[float, float]


class LaneTurnType(IntEnum):
    NO_TURN = 1
    LEFT_TURN = 2
    RIGHT_TURN = 3
    U_TURN = 4


def _point_or_none(v: Any) -> Optional[Point2D]:
    if v is None:
        return None
    x, y = v
    return (float(x), float(y))


@dataclass(frozen=True)
class LaneFeature:
    """Measurements of an obstacle relative to the lane it is associated with."""

    angle_diff: float
    lane_l: float
    dist_to_left_boundary: float
    dist_to_right_boundary: float
    lane_turn_type: LaneTurnType = LaneTurnType.NO_TURN

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "LaneFeature":
        return LaneFeature(
            angle_diff=float(d.get("angle_diff", 0.0)),
            lane_l=float(d.get("lane_l", 0.0)),
            dist_to_left_boundary=float(d.get("dist_to_left_boundary", 0.0)),
            dist_to_right_boundary=float(d.get("dist_to_right_boundary", 0.0)),
            lane_turn_type=LaneTurnType(int(d.get("lane_turn_type", LaneTurnType.NO_TURN))),
        )


@dataclass(frozen=True)
class LanePoint:
    position_xy: Optional[Point2D]
    relative_l: float = 0.0
    heading: float = 0.0
    angle_diff: float = 0.0

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "LanePoint":
        return LanePoint(
            position_xy=_point_or_none(d.get("position_xy")),
            relative_l=float(d.get("relative_l", 0.0)),
            heading=float(d.get("heading", 0.0)),
            angle_diff=float(d.get("angle_diff", 0.0)),
        )


@dataclass(frozen=True)
class LaneSegment:
    lane_id: str
    lane_points: Sequence[LanePoint]

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "LaneSegment":
        return LaneSegment(
            lane_id=str(d.get("lane_id", "")),
            lane_points=tuple(LanePoint.from_dict(p) for p in (d.get("lane_points") or [])),
        )


@dataclass(frozen=True)
class LaneSequence:
    """One candidate future path: lane segments in driving order."""

    lane_segments: Sequence[LaneSegment]
    lane_sequence_id: Optional[int] = None

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "LaneSequence":
        seq_id = d.get("lane_sequence_id")
        return LaneSequence(
            lane_segments=tuple(LaneSegment.from_dict(s) for s in (d.get("lane_segments") or [])),
            lane_sequence_id=int(seq_id) if seq_id is not None else None,
        )


@dataclass(frozen=True)
class LaneGraph:
    lane_sequences: Sequence[Optional[LaneSequence]]

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "LaneGraph":
        return LaneGraph(lane_sequences=tuple(LaneSequence.from_dict(s) for s in (d.get("lane_sequences") or [])))


@dataclass(frozen=True)
class LaneInfo:
    lane_feature: Optional[LaneFeature] = None
    lane_graph: Optional[LaneGraph] = None

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "LaneInfo":
        lf = d.get("lane_feature")
        lg = d.get("lane_graph")
        return LaneInfo(
            lane_feature=LaneFeature.from_dict(lf) if lf is not None else None,
            lane_graph=LaneGraph.from_dict(lg) if lg is not None else None,
        )


@dataclass(frozen=True)
class HistoryRecord:
    """
    One timestamped observation of a tracked obstacle.

    ``theta`` and ``speed`` are the raw measurements, ``velocity_heading`` and
    ``filtered_speed`` the tracker-filtered variants.
    """

    timestamp_s: float
    position_xy: Optional[Point2D] = None
    theta: float = 0.0
    velocity_heading: float = 0.0
    speed: float = 0.0
    filtered_speed: float = 0.0
    lane: Optional[LaneInfo] = None
    initialized: bool = True

    def heading(self, use_filtered: bool) -> float:
        return float(self.velocity_heading) if use_filtered else float(self.theta)

    def speed_value(self, use_filtered: bool) -> float:
        return float(self.filtered_speed) if use_filtered else float(self.speed)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "HistoryRecord":
        lane = d.get("lane")
        return HistoryRecord(
            timestamp_s=float(d["timestamp_s"]),
            position_xy=_point_or_none(d.get("position_xy")),
            theta=float(d.get("theta", 0.0)),
            velocity_heading=float(d.get("velocity_heading", 0.0)),
            speed=float(d.get("speed", 0.0)),
            filtered_speed=float(d.get("filtered_speed", 0.0)),
            lane=LaneInfo.from_dict(lane) if lane is not None else None,
            initialized=bool(d.get("initialized", True)),
        )


@dataclass(frozen=True)
class Obstacle:
    """Read-only view of a tracked obstacle; ``history`` is ordered newest first."""

    obstacle_id: int
    history: Sequence[HistoryRecord]

    @property
    def latest_record(self) -> Optional[HistoryRecord]:
        if len(self.history) == 0:
            return None
        return self.history[0]

    @property
    def timestamp_s(self) -> float:
        latest = self.latest_record
        return float(latest.timestamp_s) if latest is not None else float("nan")

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Obstacle":
        return Obstacle(
            obstacle_id=int(d["obstacle_id"]),
            history=tuple(HistoryRecord.from_dict(r) for r in (d.get("history") or [])),
        )


@dataclass(frozen=True)
class ScoredHypothesis:
    obstacle_id: int
    sequence_index: int
    lane_sequence_id: Optional[int]
    probability: float
