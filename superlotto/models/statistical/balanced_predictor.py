"""
superlotto/models/statistical/balanced_predictor.py
Mix hot, warm and cold numbers: front 3 hot + 1 warm + 1 cold,
back 1 hot + 1 cold.
"""
from __future__ import annotations

import numpy as np

from superlotto.domain.draw import Combination, Draw
from superlotto.domain.methods import PredictionMethod
from superlotto.domain.zone import NumberZone
from superlotto.models.sampling import generate_unique, new_rng, random_fill
from superlotto.models.statistical.frequency_analyzer import FrequencyAnalyzer


class BalancedPredictor:
    method_code = PredictionMethod.BALANCED.code
    method_name = PredictionMethod.BALANCED.display_name

    def __init__(
        self,
        frequency: FrequencyAnalyzer | None = None,
        rng: np.random.Generator | None = None,
        front_pool: int = 12,
        back_pool: int = 4,
    ):
        self.frequency = frequency or FrequencyAnalyzer()
        self.rng = rng or new_rng()
        self.front_pool = front_pool
        self.back_pool = back_pool

    def _take(self, pool: list[int], selected: list[int], n: int) -> None:
        """Append up to n shuffled pool numbers not yet selected."""
        candidates = [x for x in pool if x not in selected]
        self.rng.shuffle(candidates)
        selected.extend(candidates[:n])

    def _pick(self, history: list[Draw], zone: NumberZone, pool_size: int, plan: list[tuple[str, int]]) -> tuple[int, ...]:
        hot = self.frequency.get_hot_numbers(history, zone, pool_size)
        cold = self.frequency.get_cold_numbers(history, zone, pool_size)
        warm = [n for n in zone.numbers if n not in hot and n not in cold]
        pools = {"hot": hot, "warm": warm, "cold": cold}

        selected: list[int] = []
        for kind, n in plan:
            before = len(selected)
            self._take(pools[kind], selected, n)
            # each step falls back to uniform random on its own
            selected = random_fill(selected, zone, self.rng, before + n)
        return tuple(sorted(random_fill(selected, zone, self.rng)))

    def predict(self, history: list[Draw]) -> Combination:
        front = self._pick(history, NumberZone.FRONT, self.front_pool, [("hot", 3), ("warm", 1), ("cold", 1)])
        back = self._pick(history, NumberZone.BACK, self.back_pool, [("hot", 1), ("cold", 1)])
        return front, back

    def predict_multiple(self, history: list[Draw], count: int) -> list[Combination]:
        return generate_unique(lambda: self.predict(history), count, self.rng)
