from __future__ import annotations

import logging
from enum import Enum

import numpy as np


logger = logging.getLogger("lanescoring.model.activations")


def relu(x: np.ndarray) -> np.ndarray:
    return np.maximum(0.0, x)


def sigmoid(x: np.ndarray) -> np.ndarray:
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-x))


def tanh(x: np.ndarray) -> np.ndarray:
    return np.tanh(x)


class Activation(str, Enum):
    RELU = "relu"
    SIGMOID = "sigmoid"
    TANH = "tanh"

    def apply(self, x: np.ndarray) -> np.ndarray:
        if self is Activation.RELU:
            return relu(x)
        if self is Activation.TANH:
            return tanh(x)
        return sigmoid(x)


def resolve_activation(name: str, strict: bool = False) -> Activation:
    """
    Map a serialized activation name onto :class:`Activation`.

    Unknown names fall back to sigmoid with a warning unless ``strict`` is set,
    in which case they raise ``ValueError``.
    """
    for act in Activation:
        if act.value == str(name):
            return act
    if strict:
        raise ValueError(f"Unknown activation function: {name!r}")
    logger.warning("Undefined activation func: %s, and default sigmoid will be used instead.", name)
    return Activation.SIGMOID
