"""
scripts/11_generate_predictions.py
Generate predictions for the next issue and store them in Supabase.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from superlotto.pipeline.prediction_generator import PredictionGenerator
from superlotto.pipeline.weight_learner import WeightLearner
from superlotto.utils.config import get_learning_params
from superlotto.utils.logger import get_logger
from superlotto.utils.supabase_repository import (
    SupabaseDrawRepository,
    SupabasePredictionStore,
    SupabaseWeightStore,
)

log = get_logger("generate")


def main():
    parser = argparse.ArgumentParser(description="Generate super-lotto predictions")
    parser.add_argument("--method", default=None, help="Method code (default: all methods)")
    parser.add_argument("--count", type=int, default=5, help="Combinations per method")
    parser.add_argument("--best", action="store_true", help="Keep only the best-scoring combination per method")
    parser.add_argument("--issue", default=None, help="Target issue (default: latest + 1)")
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    learner = WeightLearner.from_config(SupabaseWeightStore(), get_learning_params())
    learner.bootstrap()
    generator = PredictionGenerator(
        SupabaseDrawRepository(),
        SupabasePredictionStore(),
        learner,
        seed=args.seed,
    )

    if args.best:
        candidates = generator.generate_best(args.count, method=args.method, target_issue=args.issue)
    else:
        candidates = generator.generate(args.count, method=args.method, target_issue=args.issue)

    print("\n" + "=" * 60)
    print(f"PREDICTIONS FOR ISSUE {candidates[0].target_issue if candidates else '-'}")
    print("=" * 60)
    for c in candidates:
        front = " ".join(f"{n:02d}" for n in c.front)
        back = " ".join(f"{n:02d}" for n in c.back)
        score = f"{c.score:6.2f}" if c.score is not None else "     -"
        print(f"  {c.method:15s} | {front} + {back} | score={score}")
    print("=" * 60)


if __name__ == "__main__":
    main()
