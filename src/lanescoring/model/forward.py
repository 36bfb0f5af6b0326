from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from lanescoring.model.network import NetworkModel


logger = logging.getLogger("lanescoring.model.forward")

# Features whose stored std is at or below this are only mean-centered.
MIN_STD = 1e-12


def normalize(values: np.ndarray, mean: np.ndarray, std: np.ndarray) -> np.ndarray:
    scale = np.where(np.abs(std) > MIN_STD, std, 1.0)
    return (values - mean) / scale


def compute_probability(model: NetworkModel, features: Sequence[float]) -> float:
    """
    Normalize ``features`` and propagate them through every layer of ``model``.

    Returns 0.0 when the input length does not match ``model.dim_input``, when
    consecutive layer shapes disagree, or when the last layer does not emit
    exactly one value.
    """
    if len(features) != model.dim_input:
        logger.error(
            "Model feature size %d not consistent with model definition dim_input=%d.",
            len(features),
            model.dim_input,
        )
        return 0.0

    x = normalize(np.asarray(features, dtype=np.float64), model.samples_mean, model.samples_std)
    for i, layer in enumerate(model.layers):
        if x.shape[0] != layer.input_dim:
            logger.error("Layer %d expects %d inputs but received %d.", i, layer.input_dim, x.shape[0])
            return 0.0
        x = layer.forward(x)

    if x.shape[0] != 1:
        logger.error("Model output layer has incorrect # outputs: %d", x.shape[0])
        return 0.0
    return float(x[0])
