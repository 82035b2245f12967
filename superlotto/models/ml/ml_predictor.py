"""
superlotto/models/ml/ml_predictor.py
Additive multi-factor score per number followed by weighted sampling.
"""
from __future__ import annotations

from collections import Counter

import numpy as np

from superlotto.domain.draw import Combination, Draw
from superlotto.domain.methods import PredictionMethod
from superlotto.domain.zone import NumberZone
from superlotto.models.sampling import generate_unique, new_rng, weighted_sample

BASE_SCORE = 50.0
FREQUENCY_PERIOD = 30
TREND_PERIOD = 5
NEIGHBOR_RADIUS = 3


class MLScoringPredictor:
    method_code = PredictionMethod.ML.code
    method_name = PredictionMethod.ML.display_name

    def __init__(self, rng: np.random.Generator | None = None, window: int = 100):
        self.rng = rng or new_rng()
        self.window = window

    def get_scores(self, history: list[Draw], zone: NumberZone) -> dict[int, float]:
        recent = history[: self.window]
        freq = Counter(n for d in recent[:FREQUENCY_PERIOD] for n in d.numbers(zone))
        trend = Counter(n for d in recent[:TREND_PERIOD] for n in d.numbers(zone))
        latest = recent[0].numbers(zone) if recent else ()
        avg_gap = FREQUENCY_PERIOD / zone.count

        scores: dict[int, float] = {}
        for num in zone.numbers:
            score = BASE_SCORE + freq.get(num, 0) * 3

            gap = next((i for i, d in enumerate(recent) if num in d.numbers(zone)), len(recent))
            if avg_gap * 0.8 <= gap <= avg_gap * 1.5:
                score += 20
            elif gap > avg_gap * 1.5:
                score += 15

            score += trend.get(num, 0) * 15
            if any(abs(num - n) <= NEIGHBOR_RADIUS for n in latest):
                score += 10
            score += self.rng.random() * 10

            scores[num] = max(score, 1.0)
        return scores

    def predict(self, history: list[Draw]) -> Combination:
        return (
            weighted_sample(self.get_scores(history, NumberZone.FRONT), NumberZone.FRONT, self.rng),
            weighted_sample(self.get_scores(history, NumberZone.BACK), NumberZone.BACK, self.rng),
        )

    def predict_multiple(self, history: list[Draw], count: int) -> list[Combination]:
        return generate_unique(lambda: self.predict(history), count, self.rng)
