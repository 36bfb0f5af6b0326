from .evaluator import EvaluationContext, EvaluatorConfig, MLPEvaluator, build_feature_vector

__all__ = ["EvaluationContext", "EvaluatorConfig", "MLPEvaluator", "build_feature_vector"]
