"""
superlotto/pipeline/accuracy_tracker.py
Per-method accuracy statistics over verified predictions and rankings.
"""
from __future__ import annotations

from collections import Counter

from superlotto.domain.methods import PredictionMethod
from superlotto.domain.prizes import PrizeTable
from superlotto.domain.records import AccuracyStats, PredictionCandidate
from superlotto.utils.logger import get_logger
from superlotto.utils.repository import PredictionStore

log = get_logger("pipeline.accuracy")

SORT_KEYS = {
    "composite": lambda s: s.composite_score,
    "hit": lambda s: s.avg_front_hits,
    "prize": lambda s: s.prize_rate,
    "high": lambda s: s.high_prize_count,
}


def composite_score(stats: AccuracyStats) -> float:
    """
    Blend of front/back hit rate, prize rate, high-tier wins and a
    sample-size confidence term that saturates at 100 predictions.
    """
    front_hit_rate = stats.avg_front_hits / 5 * 100
    back_hit_rate = stats.avg_back_hits / 2 * 100
    return (
        front_hit_rate * 0.25
        + back_hit_rate * 0.15
        + stats.prize_rate * 0.30
        + stats.high_prize_count * 2.0
        + min(stats.total_predictions / 100, 1.0) * 10
    )


def compute_accuracy(
    method: str,
    predictions: list[PredictionCandidate],
    prize_table: PrizeTable,
) -> AccuracyStats:
    try:
        name = PredictionMethod.from_code(method).display_name
    except ValueError:
        name = method
    stats = AccuracyStats(method=method, method_name=name)
    verified = [p for p in predictions if p.verified]
    if not verified:
        return stats

    total = len(verified)
    tiers = Counter(p.prize_tier for p in verified if prize_table.is_winning(p.prize_tier))

    stats.total_predictions = total
    stats.avg_front_hits = sum(p.front_hits or 0 for p in verified) / total
    stats.avg_back_hits = sum(p.back_hits or 0 for p in verified) / total
    stats.prize_counts = {tier: tiers.get(tier, 0) for tier in prize_table.tiers}
    stats.total_prize_count = sum(tiers.values())
    stats.prize_rate = stats.total_prize_count * 100 / total
    stats.high_prize_count = sum(c for t, c in tiers.items() if prize_table.is_high_prize(t))
    stats.composite_score = composite_score(stats)
    return stats


def rank_accuracy(
    stats: list[AccuracyStats],
    sort_by: str = "composite",
    ascending: bool = False,
) -> list[AccuracyStats]:
    """Sort by one of composite / hit / prize / high and assign 1-based ranks."""
    key = SORT_KEYS.get(sort_by)
    if key is None:
        raise ValueError(f"Unknown sort key {sort_by!r}. Valid keys: {', '.join(SORT_KEYS)}")
    ranked = sorted(stats, key=key, reverse=not ascending)
    for i, row in enumerate(ranked, start=1):
        row.rank = i
    return ranked


class AccuracyTracker:
    def __init__(self, predictions: PredictionStore, prize_table: PrizeTable):
        self.predictions = predictions
        self.prize_table = prize_table

    def refresh(self, methods: list[str] | None = None) -> list[AccuracyStats]:
        """Recompute and store stats for the given methods (all verified methods by default)."""
        verified = self.predictions.load_verified_predictions()
        by_method: dict[str, list[PredictionCandidate]] = {}
        for p in verified:
            by_method.setdefault(p.method, []).append(p)

        codes = methods if methods is not None else sorted(by_method)
        stats = [compute_accuracy(code, by_method.get(code, []), self.prize_table) for code in codes]
        stats = rank_accuracy(stats)
        self.predictions.save_accuracy_stats(stats)
        log.info(f"Accuracy stats refreshed for {len(stats)} methods")
        return stats

    def rankings(self, sort_by: str = "composite", ascending: bool = False) -> list[AccuracyStats]:
        return rank_accuracy(self.predictions.load_accuracy_stats(), sort_by, ascending)
