"""
superlotto/models/ml/markov_chain.py
First-order Markov chain over numbers: transitions from every number of a
draw to every number of the following draw, ranked by the stationary
distribution.
"""
from __future__ import annotations

import numpy as np

from superlotto.domain.draw import Combination, Draw
from superlotto.domain.methods import PredictionMethod
from superlotto.domain.zone import NumberZone
from superlotto.models.sampling import generate_unique, new_rng, top_by_score
from superlotto.utils.errors import InsufficientHistoryError
from superlotto.utils.logger import get_logger

log = get_logger("model.markov")

DEFAULT_COMBINATION: Combination = ((1, 2, 3, 4, 5), (1, 2))


class MarkovChainPredictor:
    """
    Row x of the transition matrix is the distribution of numbers drawn
    right after a draw containing x. Index i stands for number zone.lo + i.
    """

    method_code = PredictionMethod.MARKOV.code
    method_name = PredictionMethod.MARKOV.display_name

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        window: int = 500,
        min_history: int = 10,
        max_iterations: int = 1000,
        tolerance: float = 1e-10,
    ):
        self.rng = rng or new_rng()
        self.window = window
        self.min_history = min_history
        self.max_iterations = max_iterations
        self.tolerance = tolerance

    def transition_matrix(self, history: list[Draw], zone: NumberZone) -> np.ndarray:
        """Row-stochastic pool_size x pool_size matrix."""
        recent = history[: self.window]
        size = zone.pool_size
        counts = np.zeros((size, size), dtype=float)

        # history is newest first: recent[i + 1] is the older draw
        for i in range(len(recent) - 1):
            newer = [n - zone.lo for n in recent[i].numbers(zone)]
            older = [n - zone.lo for n in recent[i + 1].numbers(zone)]
            for x in older:
                counts[x, newer] += 1

        row_sums = counts.sum(axis=1, keepdims=True)
        matrix = np.divide(counts, row_sums, out=np.full_like(counts, 1.0 / size), where=row_sums > 0)
        return matrix

    def stationary_distribution(self, matrix: np.ndarray) -> np.ndarray:
        size = matrix.shape[0]
        pi = np.full(size, 1.0 / size)
        for iteration in range(self.max_iterations):
            nxt = pi @ matrix
            total = nxt.sum()
            if total > 0:
                nxt = nxt / total
            diff = np.abs(nxt - pi).sum()
            pi = nxt
            if diff < self.tolerance:
                log.debug(f"Power iteration converged after {iteration + 1} steps")
                break
        return pi

    def get_scores(self, history: list[Draw], zone: NumberZone) -> dict[int, float]:
        """Stationary probability per number."""
        if len(history) < self.min_history:
            raise InsufficientHistoryError(self.method_code, self.min_history, len(history))
        pi = self.stationary_distribution(self.transition_matrix(history, zone))
        return {zone.lo + i: float(p) for i, p in enumerate(pi)}

    def predict(self, history: list[Draw]) -> Combination:
        try:
            front = self.get_scores(history, NumberZone.FRONT)
            back = self.get_scores(history, NumberZone.BACK)
        except InsufficientHistoryError as exc:
            log.debug(f"{exc}, using default combination")
            return DEFAULT_COMBINATION
        return (
            top_by_score(front, NumberZone.FRONT, self.rng),
            top_by_score(back, NumberZone.BACK, self.rng),
        )

    def predict_multiple(self, history: list[Draw], count: int) -> list[Combination]:
        return generate_unique(lambda: self.predict(history), count, self.rng)
