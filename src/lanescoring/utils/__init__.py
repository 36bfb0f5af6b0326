from .config import get_section, load_yaml, resolve_path
from .logging import setup_logging
from .types import (
    HistoryRecord,
    LaneFeature,
    LaneGraph,
    LaneInfo,
    LanePoint,
    LaneSegment,
    LaneSequence,
    LaneTurnType,
    Obstacle,
    ScoredHypothesis,
)

__all__ = [
    "HistoryRecord",
    "LaneFeature",
    "LaneGraph",
    "LaneInfo",
    "LanePoint",
    "LaneSegment",
    "LaneSequence",
    "LaneTurnType",
    "Obstacle",
    "ScoredHypothesis",
    "get_section",
    "load_yaml",
    "resolve_path",
    "setup_logging",
]
