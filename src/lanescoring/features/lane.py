from __future__ import annotations

import logging
import math
from typing import List, Optional

from lanescoring.utils.types import HistoryRecord, LaneSequence


logger = logging.getLogger("lanescoring.features.lane")

LANE_FEATURE_SIZE = 40
VALUES_PER_POINT = 4


def compute_lane_features(
    latest: Optional[HistoryRecord],
    lane_sequence: LaneSequence,
    lane_feature_size: int = LANE_FEATURE_SIZE,
    use_filtered_kinematics: bool = False,
) -> List[float]:
    """
    Encode the geometry of ``lane_sequence`` relative to the obstacle pose.

    Every visited lane point contributes ``[sin(bearing - heading), relative_l,
    heading, angle_diff]``. Points are visited in order until
    ``lane_feature_size`` values exist; if the sequence runs out first, the last
    emitted 4-tuple is repeated to fill the block.
    """
    size = int(lane_feature_size)
    if size <= 0 or size % VALUES_PER_POINT != 0:
        raise ValueError(f"lane_feature_size must be a positive multiple of {VALUES_PER_POINT}, got {size}")
    if latest is None or not latest.initialized:
        logger.debug("Obstacle has no latest record.")
        return []
    if latest.position_xy is None:
        logger.debug("Obstacle has no position.")
        return []

    heading = latest.heading(use_filtered_kinematics)
    ox, oy = latest.position_xy
    values: List[float] = []
    for segment in lane_sequence.lane_segments:
        if len(values) >= size:
            break
        for point in segment.lane_points:
            if len(values) >= size:
                break
            if point.position_xy is None:
                logger.error("Lane point has no position.")
                continue
            diff_x = point.position_xy[0] - ox
            diff_y = point.position_xy[1] - oy
            angle = math.atan2(diff_x, diff_y)
            values.append(math.sin(angle - heading))
            values.append(float(point.relative_l))
            values.append(float(point.heading))
            values.append(float(point.angle_diff))

    while VALUES_PER_POINT <= len(values) < size:
        values.extend(values[-VALUES_PER_POINT:])
    return values
