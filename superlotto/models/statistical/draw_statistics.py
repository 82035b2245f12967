"""
superlotto/models/statistical/draw_statistics.py
Shape statistics over draw history: odd/even ratio, sum ranges,
consecutive pairs, repeated front sets and band spread.
"""
from __future__ import annotations

from collections import Counter
from typing import Any

from superlotto.domain.draw import Draw
from superlotto.models.statistical.band_distribution import BandAnalyzer

SUM_RANGES: list[tuple[str, int, int | None]] = [
    ("15-60", 15, 60),  # 1+2+3+4+5 is the lowest front sum
    ("61-90", 61, 90),
    ("91-120", 91, 120),
    ("121-150", 121, 150),
    ("151+", 151, None),
]


def _sum_range(total: int) -> str | None:
    for label, lo, hi in SUM_RANGES:
        if total >= lo and (hi is None or total <= hi):
            return label
    return None


class DrawStatistics:
    def __init__(self, bands: BandAnalyzer | None = None):
        self.bands = bands or BandAnalyzer()

    def odd_even_distribution(self, history: list[Draw]) -> dict[str, int]:
        counter = Counter(d.front_odd_count for d in history)
        return {f"{k}:{5 - k}": counter.get(k, 0) for k in range(5, -1, -1)}

    def sum_distribution(self, history: list[Draw]) -> dict[str, int]:
        counter = Counter(_sum_range(d.front_sum) for d in history)
        return {label: counter.get(label, 0) for label, _, _ in SUM_RANGES}

    def consecutive_distribution(self, history: list[Draw]) -> dict[int, int]:
        counter = Counter(d.front_consecutive for d in history)
        return {k: counter.get(k, 0) for k in range(5)}

    def repeated_front_sets(self, history: list[Draw]) -> list[dict[str, Any]]:
        """Front sets drawn at least twice, most repeated first."""
        groups: dict[tuple[int, ...], list[str]] = {}
        for draw in history:
            groups.setdefault(draw.front, []).append(draw.issue)
        repeated = [
            {"front": list(front), "count": len(issues), "issues": issues}
            for front, issues in groups.items()
            if len(issues) >= 2
        ]
        repeated.sort(key=lambda g: g["count"], reverse=True)
        return repeated

    def summary(self, history: list[Draw]) -> dict[str, Any]:
        return {
            "draws": len(history),
            "odd_even": self.odd_even_distribution(history),
            "sum_ranges": self.sum_distribution(history),
            "consecutive": self.consecutive_distribution(history),
            "bands": self.bands.get_band_distribution(history),
            "repeated_front_sets": self.repeated_front_sets(history),
        }
