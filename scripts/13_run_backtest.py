"""
scripts/13_run_backtest.py
Replay recent draws through one or all prediction methods and print ROI.
Draws come from Supabase, or from a local JSONL file with --draws-file.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from superlotto.models.model_loader import ModelLoader
from superlotto.pipeline.backtester import Backtester, summarize
from superlotto.pipeline.draw_importer import parse_jsonl, read_source
from superlotto.utils.config import get_prize_table
from superlotto.utils.logger import get_logger
from superlotto.utils.repository import InMemoryDrawRepository
from superlotto.utils.supabase_repository import SupabaseDrawRepository

log = get_logger("backtest")


def main():
    parser = argparse.ArgumentParser(description="Backtest super-lotto prediction methods")
    parser.add_argument("--method", default=None, help="Method code (default: all methods)")
    parser.add_argument("--issues", type=int, default=50)
    parser.add_argument("--per-issue", type=int, default=5)
    parser.add_argument("--walk-forward", action="store_true", help="Predict each issue from older draws only")
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--draws-file", default=None, help="JSONL draws instead of Supabase")
    parser.add_argument("--json", default=None, help="Write full results to this JSON file")
    args = parser.parse_args()

    if args.draws_file:
        draws, _ = parse_jsonl(read_source(args.draws_file).splitlines())
        repo = InMemoryDrawRepository(draws)
    else:
        repo = SupabaseDrawRepository()

    loader = ModelLoader(seed=args.seed)
    backtester = Backtester(
        repo,
        loader.load,
        get_prize_table(),
        walk_forward=args.walk_forward,
        max_workers=args.workers,
    )
    results = backtester.run(args.method, args.issues, args.per_issue)

    print("\n" + "=" * 60)
    print("BACKTEST SUMMARY")
    print("=" * 60)
    for r in results:
        print(
            f"  {r.method:15s} | avg={r.avg_front_hits:.2f}+{r.avg_back_hits:.2f} "
            f"| prize={r.prize_rate:5.2f}% | ROI={r.roi:8.2f}% | best={r.best_prize or '-'}"
        )
        print(f"  {'':15s}   {r.evaluation}")
    print("=" * 60)

    if args.json:
        with open(args.json, "w", encoding="utf-8") as f:
            json.dump(summarize(results), f, ensure_ascii=False, indent=2)
        log.info(f"Results written to {args.json}")


if __name__ == "__main__":
    main()
