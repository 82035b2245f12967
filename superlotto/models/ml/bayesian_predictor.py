"""
superlotto/models/ml/bayesian_predictor.py
Beta-posterior mode per number, blended with a frequency prior.
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

log = get_logger("model.bayesian")

PRIOR_FREQUENCY_WEIGHT = 0.7
PRIOR_UNIFORM_WEIGHT = 0.3


def beta_mode(alpha: float, beta: float) -> float:
    """Mode of Beta(alpha, beta), with the degenerate shapes mapped to 1.0 / 0.5."""
    if alpha > 1 and beta > 1:
        return min(1.0, max(0.0, (alpha - 1) / (alpha + beta - 2)))
    if alpha > 1:
        return 1.0
    return 0.5


class BayesianPredictor:
    method_code = PredictionMethod.BAYESIAN.code
    method_name = PredictionMethod.BAYESIAN.display_name

    def __init__(self, rng: np.random.Generator | None = None, window: int = 200):
        self.rng = rng or new_rng()
        self.window = window

    def get_scores(self, history: list[Draw], zone: NumberZone) -> dict[int, float]:
        """Normalized posterior probability per number."""
        recent = history[: self.window]
        periods = len(recent)
        if periods == 0:
            raise InsufficientHistoryError(self.method_code, 1, 0)

        counts = Counter(n for draw in recent for n in draw.numbers(zone))
        trials = zone.count * periods
        uniform = 1.0 / zone.pool_size

        posterior: dict[int, float] = {}
        for num in zone.numbers:
            c = counts.get(num, 0)
            likelihood = beta_mode(c + 1, trials - c + (zone.count - 1))
            prior = PRIOR_FREQUENCY_WEIGHT * c / periods + PRIOR_UNIFORM_WEIGHT * uniform
            posterior[num] = likelihood * prior

        total = sum(posterior.values())
        if total > 0:
            posterior = {n: p / total for n, p in posterior.items()}
        return posterior

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
