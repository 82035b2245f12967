"""
superlotto/models/ml/monte_carlo.py
Monte Carlo tallies: direct resampling of past draws, a Metropolis-Hastings
walk over combinations, and importance sampling from a uniform proposal.
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

log = get_logger("model.montecarlo")

UNSEEN_TARGET_PROB = 0.01
IMPORTANCE_SCALE = 1000


class MonteCarloPredictor:
    method_code = PredictionMethod.MONTECARLO.code
    method_name = PredictionMethod.MONTECARLO.display_name

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        window: int = 300,
        min_history: int = 10,
        direct_samples: int = 50000,
        mcmc_steps: int = 10000,
        importance_samples: int = 20000,
    ):
        self.rng = rng or new_rng()
        self.window = window
        self.min_history = min_history
        self.direct_samples = direct_samples
        self.mcmc_steps = mcmc_steps
        self.importance_samples = importance_samples

    # ── Estimators ────────────────────────────────────────────────

    def _frequencies(self, recent: list[Draw], zone: NumberZone) -> dict[int, float]:
        """Share of all zone picks taken by each seen number."""
        counts = Counter(n for draw in recent for n in draw.numbers(zone))
        total = sum(counts.values())
        return {n: c / total for n, c in counts.items()}

    def direct_sampling(self, recent: list[Draw], zone: NumberZone) -> np.ndarray:
        """Tally the numbers of uniformly resampled past draws."""
        balls = np.array([draw.numbers(zone) for draw in recent])
        picks = self.rng.integers(0, len(recent), size=self.direct_samples)
        return np.bincount(balls[picks].ravel(), minlength=zone.hi + 1).astype(float)

    def mcmc_sampling(self, freq: dict[int, float], zone: NumberZone) -> np.ndarray:
        """
        Metropolis-Hastings over zone.count-number combinations. The target
        probability is the product of each number's historical frequency.
        """
        def target(combo: list[int]) -> float:
            p = 1.0
            for n in combo:
                p *= freq.get(n, UNSEEN_TARGET_PROB)
            return p

        tallies = np.zeros(zone.hi + 1, dtype=float)
        current = [int(n) for n in self.rng.choice(list(zone.numbers), size=zone.count, replace=False)]
        current_p = target(current)

        for _ in range(self.mcmc_steps):
            proposal = list(current)
            for _ in range(int(self.rng.integers(0, 3))):
                idx = int(self.rng.integers(0, zone.count))
                others = set(proposal[:idx] + proposal[idx + 1:])
                choices = [n for n in zone.numbers if n not in others]
                proposal[idx] = int(self.rng.choice(choices))
            proposal_p = target(proposal)
            if self.rng.random() < proposal_p / current_p:
                current, current_p = proposal, proposal_p
            tallies[current] += 1
        return tallies

    def importance_sampling(self, freq: dict[int, float], zone: NumberZone) -> np.ndarray:
        """
        Uniform proposal, each sample weighted by prod(freq / uniform) ** (1 / count)
        and tallied as int(weight * 1000) per number. Kept in this exact shape;
        it is a heuristic score, not an unbiased importance-sampling estimate.
        """
        uniform = 1.0 / zone.pool_size
        ratio = np.full(zone.hi + 1, 1.0)
        for n in zone.numbers:
            ratio[n] = freq.get(n, uniform) / uniform

        keys = self.rng.random((self.importance_samples, zone.pool_size))
        samples = np.argsort(keys, axis=1)[:, : zone.count] + zone.lo
        weights = np.prod(ratio[samples], axis=1) ** (1.0 / zone.count)
        scaled = np.floor(weights * IMPORTANCE_SCALE)
        return np.bincount(
            samples.ravel(),
            weights=np.repeat(scaled, zone.count),
            minlength=zone.hi + 1,
        )

    # ── Prediction ────────────────────────────────────────────────

    def get_scores(self, history: list[Draw], zone: NumberZone) -> dict[int, float]:
        """Summed tallies of the three estimators per number."""
        recent = history[: self.window]
        if len(recent) < self.min_history:
            raise InsufficientHistoryError(self.method_code, self.min_history, len(recent))

        freq = self._frequencies(recent, zone)
        total = (
            self.direct_sampling(recent, zone)
            + self.mcmc_sampling(freq, zone)
            + self.importance_sampling(freq, zone)
        )
        return {n: float(total[n]) for n in zone.numbers}

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
