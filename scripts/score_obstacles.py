from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lanescoring.evaluation.evaluator import EvaluatorConfig, MLPEvaluator
from lanescoring.utils.config import load_yaml, resolve_path
from lanescoring.utils.logging import setup_logging
from lanescoring.utils.types import Obstacle


def main() -> None:
    ap = argparse.ArgumentParser(description="Score the lane sequences of obstacles dumped to YAML")
    ap.add_argument("--config", default="configs/mlp_evaluator.yaml", help="Evaluator YAML")
    ap.add_argument("--obstacles", required=True, help="YAML file with an 'obstacles' list")
    ap.add_argument("--log-level", default="INFO")
    ap.add_argument("--log-file", default=None)
    ap.add_argument("--debug-module", action="append", default=[], help="lanescoring submodule to log at DEBUG, e.g. evaluation.evaluator")
    args = ap.parse_args()

    base_dir = os.getcwd()
    setup_logging(level=args.log_level, log_file=args.log_file, debug_modules=args.debug_module)

    cfg = EvaluatorConfig.from_dict(load_yaml(resolve_path(args.config, base_dir)), base_dir=base_dir)
    evaluator = MLPEvaluator.from_config(cfg)

    dump = load_yaml(resolve_path(args.obstacles, base_dir))
    obstacles = [Obstacle.from_dict(o) for o in (dump.get("obstacles") or [])]
    for oid, scored in evaluator.evaluate_all(obstacles).items():
        for s in scored:
            print(
                json.dumps(
                    {
                        "obstacle_id": oid,
                        "sequence_index": s.sequence_index,
                        "lane_sequence_id": s.lane_sequence_id,
                        "probability": s.probability,
                    }
                )
            )


if __name__ == "__main__":
    main()
