from .activations import Activation, relu, resolve_activation, sigmoid, tanh
from .forward import MIN_STD, compute_probability, normalize
from .network import Layer, ModelStore, NetworkModel, load_model, save_model_npz

__all__ = [
    "Activation",
    "Layer",
    "ModelStore",
    "MIN_STD",
    "NetworkModel",
    "compute_probability",
    "load_model",
    "normalize",
    "relu",
    "resolve_activation",
    "save_model_npz",
    "sigmoid",
    "tanh",
]
