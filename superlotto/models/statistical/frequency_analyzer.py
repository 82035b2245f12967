"""
superlotto/models/statistical/frequency_analyzer.py
Hot/cold ranking based on occurrence counts in recent draws.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass

from superlotto.domain.draw import Draw
from superlotto.domain.zone import NumberZone
from superlotto.models.statistical.gap_analyzer import NumberGap


@dataclass(frozen=True)
class NumberFrequency:
    number: int
    count: int
    rate: float        # count / draws in window
    percentage: float  # rate * 100


class FrequencyAnalyzer:
    """Count how often each number appears in recent draws."""

    def __init__(self, hot_cold_window: int = 30):
        self.hot_cold_window = hot_cold_window

    def get_counts(self, history: list[Draw], zone: NumberZone, window: int | None = None) -> dict[int, int]:
        recent = history if window is None else history[:window]
        counter = Counter(n for draw in recent for n in draw.numbers(zone))
        return {n: counter.get(n, 0) for n in zone.numbers}

    def frequency(
        self,
        history: list[Draw],
        zone: NumberZone,
        window: int | None = None,
    ) -> dict[int, NumberFrequency]:
        """
        Returns {number: NumberFrequency} ordered by number.
        The rate is relative to the draws in the window, not the zone size.
        """
        n_draws = len(history) if window is None else min(window, len(history))
        counts = self.get_counts(history, zone, window)
        result: dict[int, NumberFrequency] = {}
        for num, count in counts.items():
            rate = count / n_draws if n_draws else 0.0
            result[num] = NumberFrequency(num, count, rate, rate * 100)
        return result

    # ── Hot / cold ────────────────────────────────────────────────

    def rank_hot(self, history: list[Draw], zone: NumberZone) -> list[int]:
        """All numbers, hottest first; ties by number ascending."""
        counts = self.get_counts(history, zone, self.hot_cold_window)
        return sorted(counts, key=lambda n: (-counts[n], n))

    def rank_cold(self, history: list[Draw], zone: NumberZone) -> list[int]:
        """Exact reverse of the hot ranking, so hot and cold never overlap for n <= pool/2."""
        return list(reversed(self.rank_hot(history, zone)))

    def get_hot_numbers(self, history: list[Draw], zone: NumberZone, top_n: int) -> list[int]:
        return sorted(self.rank_hot(history, zone)[:top_n])

    def get_cold_numbers(self, history: list[Draw], zone: NumberZone, bottom_n: int) -> list[int]:
        return sorted(self.rank_cold(history, zone)[:bottom_n])

    # ── Composite score ───────────────────────────────────────────

    def get_number_scores(
        self,
        history: list[Draw],
        zone: NumberZone,
        gaps: Mapping[int, NumberGap],
    ) -> dict[int, float]:
        """
        0-100 score per number: half min-max scaled frequency over the
        hot/cold window, half closeness of the current gap to its average.
        """
        counts = self.get_counts(history, zone, self.hot_cold_window)
        lo_count = min(counts.values())
        hi_count = max(counts.values())

        scores: dict[int, float] = {}
        for num in zone.numbers:
            freq_score = (counts[num] - lo_count) / (hi_count - lo_count + 0.001) * 100

            gap_score = 0.0
            gap = gaps.get(num)
            if gap is not None and gap.avg_gap > 0:
                ratio = gap.current_gap / gap.avg_gap
                if 0.8 <= ratio <= 1.5:
                    gap_score = 100 - abs(ratio - 1) * 50
                elif ratio > 1.5:
                    gap_score = 80.0

            scores[num] = freq_score * 0.5 + gap_score * 0.5
        return scores
