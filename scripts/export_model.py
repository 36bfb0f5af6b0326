from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lanescoring.model.network import NetworkModel, save_model_npz
from lanescoring.utils.config import load_yaml, resolve_path
from lanescoring.utils.logging import setup_logging


def main() -> None:
    ap = argparse.ArgumentParser(description="Convert a YAML network description into the binary .npz model resource")
    ap.add_argument("--model", required=True, help="YAML model description")
    ap.add_argument("--out", required=True, help="Output .npz path")
    ap.add_argument("--strict-activations", action="store_true", help="Reject unknown activation names")
    ap.add_argument("--log-level", default="INFO")
    args = ap.parse_args()

    base_dir = os.getcwd()
    setup_logging(level=args.log_level)

    model = NetworkModel.from_dict(load_yaml(resolve_path(args.model, base_dir)), strict_activations=args.strict_activations)
    out_path = resolve_path(args.out, base_dir)
    save_model_npz(model, out_path)
    print(f"Saved model to: {out_path}")
    print(f"dim_input={model.dim_input} num_layer={model.num_layer} dim_output={model.dim_output}")
    for i, layer in enumerate(model.layers):
        print(f"  layer {i}: {layer.input_dim} -> {layer.output_dim} ({layer.activation.value})")


if __name__ == "__main__":
    main()
