import logging
from pathlib import Path

import pytest

from lanescoring.evaluation.evaluator import EvaluatorConfig
from lanescoring.utils.config import get_section, load_yaml, resolve_path
from lanescoring.utils.logging import setup_logging
from lanescoring.utils.types import LaneTurnType, Obstacle

ROOT = Path(__file__).resolve().parents[1]


def test_sample_config_parses() -> None:
    d = load_yaml(str(ROOT / "configs" / "mlp_evaluator.yaml"))
    cfg = EvaluatorConfig.from_dict(d, base_dir=str(ROOT))
    assert cfg.model_path == str((ROOT / "models" / "mlp_vehicle_model.npz").resolve())
    assert cfg.lane_feature_size == 40
    assert cfg.input_layout == "obstacle_lane"


def test_load_yaml_rejects_non_mapping(tmp_path) -> None:
    p = tmp_path / "list.yaml"
    p.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_yaml(str(p))
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert load_yaml(str(empty)) == {}


def test_get_section_and_resolve_path(tmp_path) -> None:
    assert get_section({"a": None}, "a") == {}
    assert get_section({}, "a") == {}
    with pytest.raises(ValueError):
        get_section({"a": 3}, "a")
    assert resolve_path("/abs/model.npz", str(tmp_path)) == "/abs/model.npz"


def test_obstacle_from_yaml_dump(tmp_path) -> None:
    p = tmp_path / "obstacles.yaml"
    p.write_text(
        """
obstacles:
  - obstacle_id: 42
    history:
      - timestamp_s: 10.0
        position_xy: [1.0, 2.0]
        theta: 0.1
        speed: 3.0
        lane:
          lane_feature:
            angle_diff: 0.2
            lane_l: 1.2
            dist_to_left_boundary: 2.5
            dist_to_right_boundary: 1.5
            lane_turn_type: 2
          lane_graph:
            lane_sequences:
              - lane_sequence_id: 7
                lane_segments:
                  - lane_id: l1
                    lane_points:
                      - position_xy: [1.0, 7.0]
                        relative_l: 0.3
                      - relative_l: 0.4
      - timestamp_s: 9.0
        initialized: false
""",
        encoding="utf-8",
    )
    obstacles = [Obstacle.from_dict(o) for o in load_yaml(str(p))["obstacles"]]
    o = obstacles[0]
    assert o.obstacle_id == 42
    assert o.timestamp_s == 10.0
    assert o.latest_record.position_xy == (1.0, 2.0)
    assert o.latest_record.lane.lane_feature.lane_turn_type is LaneTurnType.LEFT_TURN
    seq = o.latest_record.lane.lane_graph.lane_sequences[0]
    assert seq.lane_sequence_id == 7
    assert seq.lane_segments[0].lane_points[1].position_xy is None
    assert o.history[1].initialized is False


def test_setup_logging_enables_debug_for_selected_modules() -> None:
    name = "lanescoring.features.lane"
    try:
        setup_logging(level="WARNING", debug_modules=["features.lane"])
        assert logging.getLogger(name).level == logging.DEBUG
        assert logging.getLogger(name).isEnabledFor(logging.DEBUG)
    finally:
        logging.getLogger(name).setLevel(logging.NOTSET)
