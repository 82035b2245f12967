"""
superlotto/models/adaptive_predictor.py
Fuse hot, high-gap, due and composite scores using the learned method
weights, then sample numbers in proportion to the fused score.
"""
from __future__ import annotations

from collections.abc import Mapping

import numpy as np

from superlotto.domain.draw import Combination, Draw
from superlotto.domain.methods import PredictionMethod
from superlotto.domain.zone import NumberZone
from superlotto.models.sampling import generate_unique, new_rng, random_fill
from superlotto.models.statistical.frequency_analyzer import FrequencyAnalyzer
from superlotto.models.statistical.gap_analyzer import GapAnalyzer
from superlotto.utils.logger import get_logger

log = get_logger("model.adaptive")

MISSING_WEIGHT_DEFAULT = 0.2
RANK_STEP = 10
RANDOM_SCALE = 5
SAMPLING_ATTEMPT_FACTOR = 50


def rank_scores(ranked: list[int]) -> dict[int, float]:
    """(L - i) * 10 for position i in a list of length L."""
    size = len(ranked)
    return {num: float((size - i) * RANK_STEP) for i, num in enumerate(ranked)}


class AdaptivePredictor:
    method_code = PredictionMethod.ADAPTIVE.code
    method_name = PredictionMethod.ADAPTIVE.display_name

    def __init__(
        self,
        weights: Mapping[str, float] | None = None,
        frequency: FrequencyAnalyzer | None = None,
        gaps: GapAnalyzer | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.weights = dict(weights or {})
        self.frequency = frequency or FrequencyAnalyzer()
        self.gaps = gaps or GapAnalyzer()
        self.rng = rng or new_rng()

    def _weight(self, method: PredictionMethod) -> float:
        return self.weights.get(method.code, MISSING_WEIGHT_DEFAULT)

    def get_scores(self, history: list[Draw], zone: NumberZone) -> dict[int, float]:
        size = zone.count * 2
        scores = {n: 0.0 for n in zone.numbers}

        parts = [
            (self.frequency.rank_hot(history, zone)[:size], self._weight(PredictionMethod.HOT)),
            (self.gaps.rank_high_gap(history, zone)[:size], self._weight(PredictionMethod.MISSING)),
            (self.gaps.rank_due(history, zone)[:size], self._weight(PredictionMethod.BALANCED)),
        ]
        for ranked, weight in parts:
            for num, rank_score in rank_scores(ranked).items():
                scores[num] += rank_score * weight

        composite = self.frequency.get_number_scores(history, zone, self.gaps.get_gaps(history, zone))
        adaptive_w = self._weight(PredictionMethod.ADAPTIVE)
        ml_w = self._weight(PredictionMethod.ML)
        for num in zone.numbers:
            scores[num] += composite[num] * adaptive_w / 10
            scores[num] += self.rng.random() * RANDOM_SCALE * ml_w
        return scores

    def _select(self, scores: dict[int, float], zone: NumberZone) -> tuple[int, ...]:
        """Sample without replacement proportional to score - min + 1."""
        floor = min(scores.values())
        nums = list(scores)
        shifted = np.array([scores[n] - floor + 1 for n in nums])

        selected: list[int] = []
        for _ in range(zone.count * SAMPLING_ATTEMPT_FACTOR):
            if len(selected) >= zone.count:
                break
            mask = np.array([n not in selected for n in nums])
            probs = shifted * mask
            total = probs.sum()
            if total <= 0:
                break
            selected.append(int(self.rng.choice(nums, p=probs / total)))

        if len(selected) < zone.count:
            log.debug(f"Weighted sampling stalled for {zone.label}, random fill")
        return tuple(sorted(random_fill(selected, zone, self.rng)))

    def predict(self, history: list[Draw]) -> Combination:
        return (
            self._select(self.get_scores(history, NumberZone.FRONT), NumberZone.FRONT),
            self._select(self.get_scores(history, NumberZone.BACK), NumberZone.BACK),
        )

    def predict_multiple(self, history: list[Draw], count: int) -> list[Combination]:
        return generate_unique(lambda: self.predict(history), count, self.rng)
