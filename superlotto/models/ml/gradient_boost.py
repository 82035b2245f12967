"""
superlotto/models/ml/gradient_boost.py
Multi-feature scoring: seven hand-made per-number features combined with
fixed weights, top numbers by total score.
"""
from __future__ import annotations

from collections import Counter

import numpy as np

from superlotto.domain.draw import Combination, Draw
from superlotto.domain.methods import PredictionMethod
from superlotto.domain.zone import NumberZone
from superlotto.models.sampling import generate_unique, new_rng, random_combination, top_by_score
from superlotto.utils.errors import InsufficientHistoryError
from superlotto.utils.logger import get_logger

log = get_logger("model.gradient_boost")

FEATURE_WEIGHTS: dict[str, float] = {
    "frequency": 0.20,
    "gap": 0.20,
    "trend": 0.15,
    "periodic": 0.10,
    "neighborhood": 0.15,
    "position": 0.10,
    "long_frequency": 0.10,
}

FREQUENCY_PERIOD = 30
TREND_PERIOD = 5
NEIGHBORHOOD_PERIOD = 50
NEIGHBORHOOD_RADIUS = 3


class GradientBoostPredictor:
    method_code = PredictionMethod.GRADIENT_BOOST.code
    method_name = PredictionMethod.GRADIENT_BOOST.display_name

    def __init__(self, rng: np.random.Generator | None = None, window: int = 300, min_history: int = 50):
        self.rng = rng or new_rng()
        self.window = window
        self.min_history = min_history

    # ── Features ──────────────────────────────────────────────────

    @staticmethod
    def _count_in(recent: list[Draw], zone: NumberZone, period: int) -> Counter:
        return Counter(n for draw in recent[:period] for n in draw.numbers(zone))

    def _gap_feature(self, recent: list[Draw], zone: NumberZone, num: int) -> float:
        gap = next((i for i, d in enumerate(recent) if num in d.numbers(zone)), len(recent))
        avg = len(recent) / zone.count
        if avg * 0.8 <= gap <= avg * 1.5:
            return 1.0
        if gap > avg * 1.5:
            return 0.7
        return 0.3

    def _neighborhood_feature(self, recent: list[Draw], zone: NumberZone, num: int) -> float:
        period = min(NEIGHBORHOOD_PERIOD, len(recent))
        near = sum(
            1 for draw in recent[:period] for n in draw.numbers(zone)
            if n != num and abs(n - num) <= NEIGHBORHOOD_RADIUS
        )
        return min(1.0, near / period * 2)

    @staticmethod
    def _position_feature(zone: NumberZone, num: int) -> float:
        if num in (zone.lo, zone.hi):
            return 0.3
        if num in (zone.lo + 1, zone.hi - 1):
            return 0.5
        return 0.8

    def get_features(self, history: list[Draw], zone: NumberZone) -> dict[int, dict[str, float]]:
        recent = history[: self.window]
        if len(recent) < self.min_history:
            raise InsufficientHistoryError(self.method_code, self.min_history, len(recent))

        freq_period = min(FREQUENCY_PERIOD, len(recent))
        trend_period = min(TREND_PERIOD, len(recent))
        freq_counts = self._count_in(recent, zone, freq_period)
        trend_counts = self._count_in(recent, zone, trend_period)
        long_counts = self._count_in(recent, zone, len(recent))

        features: dict[int, dict[str, float]] = {}
        for num in zone.numbers:
            features[num] = {
                "frequency": freq_counts.get(num, 0) / freq_period,
                "gap": self._gap_feature(recent, zone, num),
                "trend": trend_counts.get(num, 0) / trend_period,
                # no periodicity model yet: noise around 0.5
                "periodic": self.rng.random() * 0.3 + 0.35,
                "neighborhood": self._neighborhood_feature(recent, zone, num),
                "position": self._position_feature(zone, num),
                "long_frequency": long_counts.get(num, 0) / len(recent),
            }
        return features

    def get_scores(self, history: list[Draw], zone: NumberZone) -> dict[int, float]:
        features = self.get_features(history, zone)
        return {
            num: sum(FEATURE_WEIGHTS[name] * value for name, value in feats.items())
            for num, feats in features.items()
        }

    def predict(self, history: list[Draw]) -> Combination:
        try:
            front = self.get_scores(history, NumberZone.FRONT)
            back = self.get_scores(history, NumberZone.BACK)
        except InsufficientHistoryError as exc:
            log.debug(f"{exc}, using random combination")
            return random_combination(self.rng)
        return (
            top_by_score(front, NumberZone.FRONT, self.rng),
            top_by_score(back, NumberZone.BACK, self.rng),
        )

    def predict_multiple(self, history: list[Draw], count: int) -> list[Combination]:
        return generate_unique(lambda: self.predict(history), count, self.rng)
