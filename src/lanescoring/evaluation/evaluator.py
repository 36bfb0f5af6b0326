from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence

from lanescoring.features.lane import LANE_FEATURE_SIZE, VALUES_PER_POINT, compute_lane_features
from lanescoring.features.obstacle import OBSTACLE_FEATURE_SIZE, compute_obstacle_features
from lanescoring.model.forward import compute_probability
from lanescoring.model.network import ModelStore, NetworkModel
from lanescoring.utils.config import get_section, resolve_path
from lanescoring.utils.types import LaneSequence, Obstacle, ScoredHypothesis


logger = logging.getLogger("lanescoring.evaluation.evaluator")

InputLayout = Literal["obstacle_lane", "lane_lane"]
_INPUT_LAYOUTS = ("obstacle_lane", "lane_lane")


@dataclass(frozen=True)
class EvaluatorConfig:
    model_path: Optional[str]
    strict_activations: bool
    history_window_s: float
    use_filtered_kinematics: bool
    lane_feature_size: int
    input_layout: InputLayout

    @staticmethod
    def from_dict(d: Dict[str, Any], base_dir: Optional[str] = None) -> "EvaluatorConfig":
        model = get_section(d, "model")
        features = get_section(d, "features")
        evaluation = get_section(d, "evaluation")

        lane_feature_size = int(features.get("lane_feature_size", LANE_FEATURE_SIZE))
        if lane_feature_size <= 0 or lane_feature_size % VALUES_PER_POINT != 0:
            raise ValueError(f"features.lane_feature_size must be a positive multiple of {VALUES_PER_POINT}")
        history_window_s = float(features.get("history_window_s", 5.0))
        if history_window_s < 0.0:
            raise ValueError("features.history_window_s must be non-negative")
        input_layout = str(evaluation.get("input_layout", "obstacle_lane")).lower()
        if input_layout not in _INPUT_LAYOUTS:
            raise ValueError(f"evaluation.input_layout must be one of: {', '.join(_INPUT_LAYOUTS)}")

        raw_path = model.get("path")
        return EvaluatorConfig(
            model_path=resolve_path(str(raw_path), base_dir) if raw_path else None,
            strict_activations=bool(model.get("strict_activations", False)),
            history_window_s=history_window_s,
            use_filtered_kinematics=bool(features.get("use_filtered_kinematics", False)),
            lane_feature_size=lane_feature_size,
            input_layout=input_layout,  # type: ignore[arg-type]
        )

    @property
    def input_size(self) -> int:
        if self.input_layout == "lane_lane":
            return 2 * self.lane_feature_size
        return OBSTACLE_FEATURE_SIZE + self.lane_feature_size


@dataclass
class EvaluationContext:
    """Scratch state for one evaluation cycle; never share one across threads."""

    obstacle_features: Dict[int, List[float]] = field(default_factory=dict)

    def clear(self) -> None:
        self.obstacle_features.clear()


def build_feature_vector(obstacle_block: Sequence[float], lane_block: Sequence[float], layout: InputLayout) -> List[float]:
    if layout == "lane_lane":
        # legacy assembly: the obstacle block is computed but not fed to the model
        return list(lane_block) + list(lane_block)
    return list(obstacle_block) + list(lane_block)


class MLPEvaluator:
    def __init__(self, cfg: EvaluatorConfig, model: NetworkModel) -> None:
        self._cfg = cfg
        self._model = model
        if model.dim_input != 0 and model.dim_input != cfg.input_size:
            logger.warning(
                "Model dim_input=%d does not match the %s input size %d; every hypothesis will score 0.0.",
                model.dim_input,
                cfg.input_layout,
                cfg.input_size,
            )

    @staticmethod
    def from_config(cfg: EvaluatorConfig) -> "MLPEvaluator":
        if cfg.model_path is None:
            logger.error("No model path configured.")
        store = ModelStore(cfg.model_path, strict_activations=cfg.strict_activations)
        return MLPEvaluator(cfg, store.model)

    @property
    def config(self) -> EvaluatorConfig:
        return self._cfg

    @property
    def model(self) -> NetworkModel:
        return self._model

    def evaluate(self, obstacle: Optional[Obstacle], context: Optional[EvaluationContext] = None) -> List[ScoredHypothesis]:
        ctx = context if context is not None else EvaluationContext()
        ctx.clear()
        if obstacle is None:
            logger.error("Invalid obstacle.")
            return []

        oid = obstacle.obstacle_id
        latest = obstacle.latest_record
        if latest is None or not latest.initialized:
            logger.debug("Obstacle [%s] has no latest feature.", oid)
            return []
        if latest.lane is None:
            logger.debug("Obstacle [%s] has no lane feature.", oid)
            return []
        lane_graph = latest.lane.lane_graph
        if lane_graph is None:
            logger.debug("Obstacle [%s] has no lane graph.", oid)
            return []
        if len(lane_graph.lane_sequences) == 0:
            logger.debug("Obstacle [%s] has no lane sequences.", oid)
            return []

        out: List[ScoredHypothesis] = []
        for i, lane_sequence in enumerate(lane_graph.lane_sequences):
            if lane_sequence is None:
                raise ValueError(f"Obstacle [{oid}] lane graph returned no lane sequence at index {i}")
            probability = self._score(obstacle, lane_sequence, ctx)
            if probability is None:
                continue
            out.append(
                ScoredHypothesis(
                    obstacle_id=oid,
                    sequence_index=i,
                    lane_sequence_id=lane_sequence.lane_sequence_id,
                    probability=probability,
                )
            )
        return out

    def evaluate_all(self, obstacles: Iterable[Obstacle]) -> Dict[int, List[ScoredHypothesis]]:
        return {o.obstacle_id: self.evaluate(o) for o in obstacles}

    def extract_feature_vector(
        self, obstacle: Obstacle, lane_sequence: LaneSequence, context: EvaluationContext
    ) -> Optional[List[float]]:
        oid = obstacle.obstacle_id
        obstacle_block = context.obstacle_features.get(oid)
        if obstacle_block is None:
            obstacle_block = compute_obstacle_features(
                obstacle,
                history_window_s=self._cfg.history_window_s,
                use_filtered_kinematics=self._cfg.use_filtered_kinematics,
            )
            context.obstacle_features[oid] = obstacle_block
        if len(obstacle_block) != OBSTACLE_FEATURE_SIZE:
            logger.debug(
                "Obstacle [%s] has fewer than expected obstacle feature_values %d.", oid, len(obstacle_block)
            )
            return None

        lane_block = compute_lane_features(
            obstacle.latest_record,
            lane_sequence,
            lane_feature_size=self._cfg.lane_feature_size,
            use_filtered_kinematics=self._cfg.use_filtered_kinematics,
        )
        if len(lane_block) != self._cfg.lane_feature_size:
            logger.debug("Obstacle [%s] has fewer than expected lane feature_values %d.", oid, len(lane_block))
            return None
        return build_feature_vector(obstacle_block, lane_block, self._cfg.input_layout)

    def _score(self, obstacle: Obstacle, lane_sequence: LaneSequence, context: EvaluationContext) -> Optional[float]:
        features = self.extract_feature_vector(obstacle, lane_sequence, context)
        if features is None:
            return None
        return compute_probability(self._model, features)
