"""
superlotto/models/statistical/missing_predictor.py
Sample combinations from numbers that are due to return.
"""
from __future__ import annotations

import numpy as np

from superlotto.domain.draw import Combination, Draw
from superlotto.domain.methods import PredictionMethod
from superlotto.domain.zone import NumberZone
from superlotto.models.sampling import generate_unique, new_rng, sample_from_pool
from superlotto.models.statistical.gap_analyzer import GapAnalyzer


class MissingReboundPredictor:
    method_code = PredictionMethod.MISSING.code
    method_name = PredictionMethod.MISSING.display_name

    def __init__(
        self,
        gaps: GapAnalyzer | None = None,
        rng: np.random.Generator | None = None,
        front_pool: int = 15,
        back_pool: int = 6,
    ):
        self.gaps = gaps or GapAnalyzer()
        self.rng = rng or new_rng()
        self.front_pool = front_pool
        self.back_pool = back_pool

    def predict(self, history: list[Draw]) -> Combination:
        due_front = self.gaps.get_due_numbers(history, NumberZone.FRONT, self.front_pool)
        due_back = self.gaps.get_due_numbers(history, NumberZone.BACK, self.back_pool)
        return (
            sample_from_pool(due_front, NumberZone.FRONT, self.rng),
            sample_from_pool(due_back, NumberZone.BACK, self.rng),
        )

    def predict_multiple(self, history: list[Draw], count: int) -> list[Combination]:
        return generate_unique(lambda: self.predict(history), count, self.rng)
