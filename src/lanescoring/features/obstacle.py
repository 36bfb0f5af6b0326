from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List

import numpy as np

from lanescoring.utils.types import LaneTurnType, Obstacle


logger = logging.getLogger("lanescoring.features.obstacle")

OBSTACLE_FEATURE_SIZE = 14

# Time-to-boundary guard: below this lateral speed (m/s) the division is
# replaced by TIME_TO_BOUNDARY_SCALE * distance * sign.
LATERAL_SPEED_THRESHOLD = 0.05
TIME_TO_BOUNDARY_SCALE = 20.0

_TIMESTAMP_TOLERANCE = 1e-10


@dataclass
class HistoryWindow:
    """Parallel series collected from the history window, newest first."""

    thetas: List[float] = field(default_factory=list)
    lane_ls: List[float] = field(default_factory=list)
    dist_lbs: List[float] = field(default_factory=list)
    dist_rbs: List[float] = field(default_factory=list)
    lane_types: List[LaneTurnType] = field(default_factory=list)
    speeds: List[float] = field(default_factory=list)
    timestamps: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.timestamps)


def collect_history_window(obstacle: Obstacle, history_window_s: float, use_filtered_kinematics: bool = False) -> HistoryWindow:
    window = HistoryWindow()
    cutoff_s = obstacle.timestamp_s - float(history_window_s)
    for record in obstacle.history:
        if not record.initialized:
            continue
        if record.timestamp_s < cutoff_s - _TIMESTAMP_TOLERANCE:
            break
        lane = record.lane
        if lane is None or lane.lane_feature is None:
            continue
        lf = lane.lane_feature
        window.thetas.append(float(lf.angle_diff))
        window.lane_ls.append(float(lf.lane_l))
        window.dist_lbs.append(float(lf.dist_to_left_boundary))
        window.dist_rbs.append(float(lf.dist_to_right_boundary))
        window.lane_types.append(LaneTurnType(lf.lane_turn_type))
        window.timestamps.append(float(record.timestamp_s))
        window.speeds.append(record.speed_value(use_filtered_kinematics))
    return window


def _newest_pair_mean(values: List[float]) -> float:
    if len(values) > 1:
        return (values[0] + values[1]) / 2.0
    return values[0]


def time_to_boundary(dist: float, speed_lateral: float) -> float:
    speed_sign = 1.0 if speed_lateral > 0.0 else -1.0
    if abs(speed_lateral) > LATERAL_SPEED_THRESHOLD:
        return dist / speed_lateral
    return TIME_TO_BOUNDARY_SCALE * dist * speed_sign


def _rate(values: List[float], timestamps: List[float]) -> float:
    if len(timestamps) < 2:
        return 0.0
    dt = timestamps[0] - timestamps[-1]
    if dt == 0.0:
        return 0.0
    return (values[0] - values[-1]) / dt


def compute_obstacle_features(obstacle: Obstacle, history_window_s: float, use_filtered_kinematics: bool = False) -> List[float]:
    """
    Summarize the obstacle's recent history into ``OBSTACLE_FEATURE_SIZE`` values.

    The scan walks the history newest first and stops at the first record older
    than ``history_window_s`` before the latest one. An empty list means no
    usable record was found.
    """
    w = collect_history_window(obstacle, history_window_s, use_filtered_kinematics)
    if len(w) == 0:
        logger.debug("Obstacle [%s] has no usable history within %.2f s.", obstacle.obstacle_id, history_window_s)
        return []

    theta_mean = float(np.mean(w.thetas))
    theta_filtered = _newest_pair_mean(w.thetas)
    theta_delta = w.thetas[0] - w.thetas[1] if len(w.thetas) > 1 else w.thetas[0]
    lane_l_mean = float(np.mean(w.lane_ls))
    lane_l_filtered = _newest_pair_mean(w.lane_ls)
    speed_mean = float(np.mean(w.speeds))

    speed_lateral = math.sin(theta_filtered) * speed_mean
    time_to_lb = time_to_boundary(w.dist_lbs[0], speed_lateral)
    time_to_rb = -time_to_boundary(w.dist_rbs[0], speed_lateral)

    return [
        theta_filtered,
        theta_mean,
        theta_filtered - theta_mean,
        theta_delta,
        lane_l_filtered,
        lane_l_mean,
        lane_l_filtered - lane_l_mean,
        speed_mean,
        w.dist_lbs[0],
        _rate(w.dist_lbs, w.timestamps),
        time_to_lb,
        w.dist_rbs[0],
        _rate(w.dist_rbs, w.timestamps),
        time_to_rb,
    ]
