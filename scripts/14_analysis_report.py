"""
scripts/14_analysis_report.py
Print frequency, gap and association analysis for the stored history.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from superlotto.domain.zone import NumberZone
from superlotto.pipeline.analysis_report import AnalysisReport
from superlotto.utils.config import get_analysis_params
from superlotto.utils.supabase_repository import SupabaseDrawRepository


def main():
    parser = argparse.ArgumentParser(description="Super-lotto history analysis")
    parser.add_argument("--zone", choices=["front", "back"], default="front")
    parser.add_argument("--top", type=int, default=10)
    parser.add_argument("--sequential", action="store_true", help="Draw-to-draw association rules")
    args = parser.parse_args()

    zone = NumberZone.FRONT if args.zone == "front" else NumberZone.BACK
    report = AnalysisReport(SupabaseDrawRepository(), get_analysis_params())

    print("\n" + "=" * 60)
    print(f"{zone.name} ZONE ANALYSIS")
    print("=" * 60)
    print(f"  hot      : {report.hot_numbers(zone, args.top)}")
    print(f"  cold     : {report.cold_numbers(zone, args.top)}")
    print(f"  due      : {report.due_numbers(zone, args.top)}")
    print(f"  high gap : {report.high_gap_numbers(zone, args.top)}")

    print("\n  number | count |     % | gap now | gap avg | gap max")
    gaps = {g["number"]: g for g in report.gap_table(zone)}
    for row in report.frequency_table(zone):
        g = gaps[row["number"]]
        print(
            f"  {row['number']:6d} | {row['count']:5d} | {row['percentage']:5.1f} "
            f"| {g['current']:7d} | {g['average']:7.2f} | {g['max']:7d}"
        )

    print("\n  association rules")
    for rule in report.association_rules(zone, sequential=args.sequential, limit=args.top):
        print(f"  {rule.zone_tag:9s} {rule.describe()}")

    stats = report.draw_statistics()
    print(f"\n  odd:even   : {stats['odd_even']}")
    print(f"  sum ranges : {stats['sum_ranges']}")
    print(f"  consecutive: {stats['consecutive']}")
    print("=" * 60)


if __name__ == "__main__":
    main()
