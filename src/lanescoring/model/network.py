from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import yaml

from lanescoring.model.activations import Activation, resolve_activation
from lanescoring.utils.config import load_yaml


logger = logging.getLogger("lanescoring.model.network")


def _frozen(a: Any, ndim: int, name: str) -> np.ndarray:
    arr = np.array(a, dtype=np.float64)
    if arr.ndim != ndim:
        raise ValueError(f"{name} must be {ndim}-dimensional, got shape {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class Layer:
    input_dim: int
    output_dim: int
    weights: np.ndarray
    bias: np.ndarray
    activation: Activation

    @staticmethod
    def build(
        input_dim: int,
        output_dim: int,
        weights: Any,
        bias: Any,
        activation: str,
        strict_activations: bool = False,
    ) -> "Layer":
        input_dim = int(input_dim)
        output_dim = int(output_dim)
        w = np.asarray(weights, dtype=np.float64)
        if w.ndim == 1 and w.size == input_dim * output_dim:
            # flat row-major storage
            w = w.reshape(input_dim, output_dim)
        w = _frozen(w, 2, "layer_input_weight")
        b = _frozen(bias, 1, "layer_bias")
        if w.shape != (input_dim, output_dim):
            raise ValueError(f"Expected weight matrix {(input_dim, output_dim)}, got {w.shape}")
        if b.shape != (output_dim,):
            raise ValueError(f"Expected bias vector of length {output_dim}, got {b.shape[0]}")
        return Layer(
            input_dim=input_dim,
            output_dim=output_dim,
            weights=w,
            bias=b,
            activation=resolve_activation(activation, strict=strict_activations),
        )

    def forward(self, x: np.ndarray) -> np.ndarray:
        return self.activation.apply(x @ self.weights + self.bias)


@dataclass(frozen=True)
class NetworkModel:
    """
    Feed-forward network with per-feature input normalization statistics.

    Instances are immutable after construction; all arrays are read-only so a
    single model can be shared by concurrent evaluations.
    """

    dim_input: int
    layers: Tuple[Layer, ...]
    samples_mean: np.ndarray
    samples_std: np.ndarray

    @property
    def num_layer(self) -> int:
        return len(self.layers)

    @property
    def dim_output(self) -> int:
        if not self.layers:
            return 0
        return self.layers[-1].output_dim

    @staticmethod
    def empty() -> "NetworkModel":
        return NetworkModel(
            dim_input=0,
            layers=(),
            samples_mean=_frozen([], 1, "samples_mean"),
            samples_std=_frozen([], 1, "samples_std"),
        )

    @staticmethod
    def from_dict(d: Mapping[str, Any], strict_activations: bool = False) -> "NetworkModel":
        dim_input = int(d["dim_input"])
        layer_dicts: Sequence[Mapping[str, Any]] = list(d.get("layer") or [])
        num_layer = int(d.get("num_layer", len(layer_dicts)))
        if num_layer != len(layer_dicts):
            raise ValueError(f"num_layer={num_layer} but {len(layer_dicts)} layers are described")

        layers: List[Layer] = []
        for ld in layer_dicts:
            layers.append(
                Layer.build(
                    input_dim=ld["layer_input_dim"],
                    output_dim=ld["layer_output_dim"],
                    weights=ld["layer_input_weight"],
                    bias=ld["layer_bias"],
                    activation=str(ld.get("layer_activation_type", "")),
                    strict_activations=strict_activations,
                )
            )

        mean = _frozen(d["samples_mean"], 1, "samples_mean")
        std = _frozen(d["samples_std"], 1, "samples_std")
        if mean.shape[0] != dim_input or std.shape[0] != dim_input:
            raise ValueError(
                f"Normalization statistics must have length dim_input={dim_input}, "
                f"got mean={mean.shape[0]} std={std.shape[0]}"
            )
        return NetworkModel(dim_input=dim_input, layers=tuple(layers), samples_mean=mean, samples_std=std)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dim_input": self.dim_input,
            "num_layer": self.num_layer,
            "layer": [
                {
                    "layer_input_dim": layer.input_dim,
                    "layer_output_dim": layer.output_dim,
                    "layer_input_weight": layer.weights.tolist(),
                    "layer_bias": layer.bias.tolist(),
                    "layer_activation_type": layer.activation.value,
                }
                for layer in self.layers
            ],
            "samples_mean": self.samples_mean.tolist(),
            "samples_std": self.samples_std.tolist(),
        }


def _npz_to_dict(npz: Mapping[str, np.ndarray]) -> Dict[str, Any]:
    num_layer = int(npz["num_layer"])
    layers = []
    for i in range(num_layer):
        p = f"layer_{i}_"
        layers.append(
            {
                "layer_input_dim": int(npz[p + "input_dim"]),
                "layer_output_dim": int(npz[p + "output_dim"]),
                "layer_input_weight": npz[p + "weight"],
                "layer_bias": npz[p + "bias"],
                "layer_activation_type": str(npz[p + "activation"]),
            }
        )
    return {
        "dim_input": int(npz["dim_input"]),
        "num_layer": num_layer,
        "layer": layers,
        "samples_mean": npz["samples_mean"],
        "samples_std": npz["samples_std"],
    }


def save_model_npz(model: NetworkModel, path: str) -> None:
    arrays: Dict[str, np.ndarray] = {
        "dim_input": np.asarray(model.dim_input, dtype=np.int64),
        "num_layer": np.asarray(model.num_layer, dtype=np.int64),
        "samples_mean": np.asarray(model.samples_mean, dtype=np.float64),
        "samples_std": np.asarray(model.samples_std, dtype=np.float64),
    }
    for i, layer in enumerate(model.layers):
        p = f"layer_{i}_"
        arrays[p + "input_dim"] = np.asarray(layer.input_dim, dtype=np.int64)
        arrays[p + "output_dim"] = np.asarray(layer.output_dim, dtype=np.int64)
        arrays[p + "weight"] = np.asarray(layer.weights, dtype=np.float64)
        arrays[p + "bias"] = np.asarray(layer.bias, dtype=np.float64)
        arrays[p + "activation"] = np.asarray(layer.activation.value)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        np.savez(f, **arrays)


def load_model(path: str, strict_activations: bool = False) -> Optional[NetworkModel]:
    """
    Load a model from a ``.npz`` archive, or from a YAML description when the
    path ends in ``.yaml``/``.yml``. Returns ``None`` if the file cannot be read
    or parsed.
    """
    p = Path(path)
    try:
        if p.suffix.lower() in {".yaml", ".yml"}:
            model = NetworkModel.from_dict(load_yaml(str(p)), strict_activations=strict_activations)
        else:
            loaded = np.load(str(p), allow_pickle=False)
            if isinstance(loaded, np.ndarray):
                # a bare .npy array, not an archive
                raise ValueError("expected an .npz archive, got a single array")
            with loaded as npz:
                model = NetworkModel.from_dict(_npz_to_dict(npz), strict_activations=strict_activations)
    except OSError:
        logger.error("Unable to open the model file: %s.", path)
        return None
    except (EOFError, KeyError, ValueError, TypeError, yaml.YAMLError, zipfile.BadZipFile) as e:
        logger.error("Unable to load the model file: %s (%s).", path, e)
        return None
    logger.debug("Succeeded in loading the model file: %s.", path)
    return model


class ModelStore:
    """
    Holds the network loaded at construction; keeps an empty model if loading
    fails. The held model never changes afterwards.
    """

    def __init__(self, model_path: Optional[str] = None, strict_activations: bool = False) -> None:
        model = None
        if model_path is not None:
            model = load_model(model_path, strict_activations=strict_activations)
        self._loaded = model is not None
        self._model = model if model is not None else NetworkModel.empty()

    @property
    def model(self) -> NetworkModel:
        return self._model

    @property
    def is_loaded(self) -> bool:
        return self._loaded
