"""
superlotto/pipeline/prediction_scorer.py
Score candidate combinations against recent history to pick the best of N.
"""
from __future__ import annotations

from collections import Counter

from superlotto.domain.draw import Combination, Draw
from superlotto.domain.zone import NumberZone
from superlotto.models.statistical.band_distribution import BandAnalyzer

SCORE_WEIGHTS: dict[str, float] = {
    "hot": 0.30,
    "sum": 0.20,
    "odd_even": 0.20,
    "distribution": 0.15,
    "correlation": 0.15,
}

SUM_BAND_WIDTH = 20


class PredictionScorer:
    """Each sub-score is 0-100; the total is their weighted sum."""

    def __init__(self, history: list[Draw], window: int = 100, bands: BandAnalyzer | None = None):
        self.recent = history[:window]
        self.bands = bands or BandAnalyzer()
        self.front_freq = Counter(n for d in self.recent for n in d.front)
        self.back_freq = Counter(n for d in self.recent for n in d.back)
        sum_bands = Counter(d.front_sum // SUM_BAND_WIDTH for d in self.recent)
        self.common_sum_band = sum_bands.most_common(1)[0][0] if sum_bands else None

    def hot_score(self, combo: Combination) -> float:
        front, back = combo
        score = 0.0
        if self.front_freq:
            top = max(self.front_freq.values())
            score += sum(self.front_freq.get(n, 0) for n in front) / (top * NumberZone.FRONT.count) * 100 * 0.7
        if self.back_freq:
            top = max(self.back_freq.values())
            score += sum(self.back_freq.get(n, 0) for n in back) / (top * NumberZone.BACK.count) * 100 * 0.3
        return score

    def sum_score(self, combo: Combination) -> float:
        if self.common_sum_band is None:
            return 50.0
        distance = abs(sum(combo[0]) // SUM_BAND_WIDTH - self.common_sum_band)
        return max(0.0, 100.0 - distance * 20)

    @staticmethod
    def odd_even_score(combo: Combination) -> float:
        odd = sum(1 for n in combo[0] if n % 2)
        if odd in (2, 3):
            return 100.0
        if odd in (1, 4):
            return 60.0
        return 20.0

    def distribution_score(self, combo: Combination) -> float:
        return self.bands.covered_bands(combo[0]) * 20.0

    def correlation_score(self, combo: Combination) -> float:
        if not self.recent:
            return 50.0
        latest = self.recent[0]
        front_overlap = len(set(combo[0]) & set(latest.front))
        back_overlap = len(set(combo[1]) & set(latest.back))
        if 1 <= front_overlap <= 2:
            score = 60.0
        elif front_overlap == 0:
            score = 40.0
        else:
            score = 20.0
        score += 40.0 if back_overlap == 1 else 20.0
        return score

    def breakdown(self, combo: Combination) -> dict[str, float]:
        return {
            "hot": self.hot_score(combo),
            "sum": self.sum_score(combo),
            "odd_even": self.odd_even_score(combo),
            "distribution": self.distribution_score(combo),
            "correlation": self.correlation_score(combo),
        }

    def score(self, combo: Combination) -> float:
        parts = self.breakdown(combo)
        return sum(SCORE_WEIGHTS[name] * value for name, value in parts.items())

    def best(self, candidates: list[Combination]) -> tuple[Combination, float]:
        if not candidates:
            raise ValueError("No candidates to score.")
        scored = [(combo, self.score(combo)) for combo in candidates]
        return max(scored, key=lambda item: item[1])
