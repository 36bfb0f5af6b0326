from .lane import LANE_FEATURE_SIZE, VALUES_PER_POINT, compute_lane_features
from .obstacle import (
    LATERAL_SPEED_THRESHOLD,
    OBSTACLE_FEATURE_SIZE,
    TIME_TO_BOUNDARY_SCALE,
    HistoryWindow,
    collect_history_window,
    compute_obstacle_features,
)

__all__ = [
    "HistoryWindow",
    "LANE_FEATURE_SIZE",
    "LATERAL_SPEED_THRESHOLD",
    "OBSTACLE_FEATURE_SIZE",
    "TIME_TO_BOUNDARY_SCALE",
    "VALUES_PER_POINT",
    "collect_history_window",
    "compute_lane_features",
    "compute_obstacle_features",
]
