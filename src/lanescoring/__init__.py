from .evaluation import EvaluationContext, EvaluatorConfig, MLPEvaluator
from .features import LANE_FEATURE_SIZE, OBSTACLE_FEATURE_SIZE, compute_lane_features, compute_obstacle_features
from .model import Activation, Layer, ModelStore, NetworkModel, compute_probability, load_model

__all__ = [
    "Activation",
    "EvaluationContext",
    "EvaluatorConfig",
    "LANE_FEATURE_SIZE",
    "Layer",
    "MLPEvaluator",
    "ModelStore",
    "NetworkModel",
    "OBSTACLE_FEATURE_SIZE",
    "compute_lane_features",
    "compute_obstacle_features",
    "compute_probability",
    "load_model",
]
