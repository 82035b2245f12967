"""
scripts/10_import_draws.py
Load historical draws from a JSONL file or URL into Supabase.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from superlotto.pipeline.draw_importer import import_draws
from superlotto.utils.logger import get_logger
from superlotto.utils.supabase_repository import SupabaseDrawRepository

log = get_logger("import_draws")


def main():
    parser = argparse.ArgumentParser(description="Import super-lotto draw history")
    parser.add_argument("source", help="Path or http(s) URL of a JSONL file")
    parser.add_argument("--min-issue", type=int, default=0, help="Skip issues below this number")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, no DB writes")
    args = parser.parse_args()

    repo = SupabaseDrawRepository()
    result = import_draws(args.source, repo.save_draw, min_issue=args.min_issue, dry_run=args.dry_run)

    print("\n" + "=" * 60)
    print("IMPORT SUMMARY")
    print("=" * 60)
    print(f"  parsed={result['parsed']:5d} | inserted={result['inserted']:5d} | rejected={result['rejected']:3d}")
    print("=" * 60)


if __name__ == "__main__":
    main()
