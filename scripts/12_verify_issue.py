"""
scripts/12_verify_issue.py
Verify stored predictions for an issue once its draw is recorded,
then print the accuracy ranking.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from superlotto.pipeline.accuracy_tracker import SORT_KEYS
from superlotto.pipeline.result_checker import Verifier
from superlotto.pipeline.weight_learner import WeightLearner
from superlotto.utils.config import get_learning_params, get_prize_table
from superlotto.utils.errors import DrawNotResolvedError
from superlotto.utils.logger import get_logger
from superlotto.utils.supabase_repository import (
    SupabaseDrawRepository,
    SupabasePredictionStore,
    SupabaseWeightStore,
)

log = get_logger("verify")


def main():
    parser = argparse.ArgumentParser(description="Verify super-lotto predictions for an issue")
    parser.add_argument("issue", help="Issue id to verify")
    parser.add_argument("--sort-by", choices=list(SORT_KEYS), default="composite")
    args = parser.parse_args()

    predictions = SupabasePredictionStore()
    learner = WeightLearner.from_config(SupabaseWeightStore(), get_learning_params())
    learner.bootstrap()
    verifier = Verifier(SupabaseDrawRepository(), predictions, learner, get_prize_table())

    try:
        verified = verifier.verify(args.issue)
    except DrawNotResolvedError as exc:
        log.warning(str(exc))
        sys.exit(1)

    print("\n" + "=" * 60)
    print(f"VERIFIED {len(verified)} PREDICTIONS FOR ISSUE {args.issue}")
    print("=" * 60)
    for c in verified:
        print(f"  {c.method:15s} | hits={c.front_hits}+{c.back_hits} | {c.prize_tier}")

    print("\nACCURACY RANKING")
    for row in verifier.accuracy.rankings(sort_by=args.sort_by):
        print(
            f"  #{row.rank:<2d} {row.method:15s} | n={row.total_predictions:4d} "
            f"| avg={row.avg_front_hits:.2f}+{row.avg_back_hits:.2f} "
            f"| prize={row.prize_rate:5.2f}% | score={row.composite_score:6.2f}"
        )

    print("\nMETHOD WEIGHTS")
    for w in learner.get_method_weights():
        print(f"  {w.method_code:15s} | weight={w.weight:.4f} | hit_rate={w.hit_rate:.4f} | {w.total_hits}/{w.total_predictions}")
    print("=" * 60)


if __name__ == "__main__":
    main()
