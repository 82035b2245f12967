"""
superlotto/models/statistical/hot_predictor.py
Sample combinations from the hottest recent numbers.
"""
from __future__ import annotations

import numpy as np

from superlotto.domain.draw import Combination, Draw
from superlotto.domain.methods import PredictionMethod
from superlotto.domain.zone import NumberZone
from superlotto.models.sampling import generate_unique, new_rng, sample_from_pool
from superlotto.models.statistical.frequency_analyzer import FrequencyAnalyzer


class HotNumberPredictor:
    method_code = PredictionMethod.HOT.code
    method_name = PredictionMethod.HOT.display_name

    def __init__(
        self,
        frequency: FrequencyAnalyzer | None = None,
        rng: np.random.Generator | None = None,
        front_pool: int = 15,
        back_pool: int = 6,
    ):
        self.frequency = frequency or FrequencyAnalyzer()
        self.rng = rng or new_rng()
        self.front_pool = front_pool
        self.back_pool = back_pool

    def predict(self, history: list[Draw]) -> Combination:
        hot_front = self.frequency.get_hot_numbers(history, NumberZone.FRONT, self.front_pool)
        hot_back = self.frequency.get_hot_numbers(history, NumberZone.BACK, self.back_pool)
        return (
            sample_from_pool(hot_front, NumberZone.FRONT, self.rng),
            sample_from_pool(hot_back, NumberZone.BACK, self.rng),
        )

    def predict_multiple(self, history: list[Draw], count: int) -> list[Combination]:
        return generate_unique(lambda: self.predict(history), count, self.rng)
