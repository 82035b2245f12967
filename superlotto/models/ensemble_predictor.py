"""
superlotto/models/ensemble_predictor.py
Weighted voting ensemble: each member picks a combination, picked numbers
become pseudo-probabilities, the weighted sum decides the final numbers.
"""
from __future__ import annotations

from collections.abc import Mapping

import numpy as np

from superlotto.domain.draw import Combination, Draw
from superlotto.domain.methods import PredictionMethod
from superlotto.domain.zone import NumberZone
from superlotto.models.sampling import Predictor, generate_unique, new_rng, top_by_score
from superlotto.utils.logger import get_logger

log = get_logger("ensemble")

DEFAULT_WEIGHTS: dict[str, float] = {
    PredictionMethod.HOT.code: 0.15,
    PredictionMethod.MISSING.code: 0.15,
    PredictionMethod.BALANCED.code: 0.15,
    PredictionMethod.GRADIENT_BOOST.code: 0.20,
    PredictionMethod.BAYESIAN.code: 0.10,
    PredictionMethod.MARKOV.code: 0.125,
    PredictionMethod.MONTECARLO.code: 0.125,
}


def _normalized(weights: Mapping[str, float]) -> dict[str, float]:
    total = sum(weights.values())
    if total <= 0:
        raise ValueError("Ensemble weights must have a positive sum.")
    return {code: w / total for code, w in weights.items()}


class EnsemblePredictor:
    """
    Combines base predictors by weighted voting. Members are keyed by
    method code; every member needs a weight.
    """

    method_code = PredictionMethod.ENSEMBLE.code
    method_name = PredictionMethod.ENSEMBLE.display_name

    def __init__(
        self,
        members: Mapping[str, Predictor],
        weights: Mapping[str, float] | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.members = dict(members)
        self.rng = rng or new_rng()

        base = dict(weights or DEFAULT_WEIGHTS)
        missing = set(self.members) - set(base)
        if missing:
            raise ValueError(f"No ensemble weight for members: {sorted(missing)}")
        base = {code: base[code] for code in self.members}

        # Validate weights sum ~1.0
        total = sum(base.values())
        if abs(total - 1.0) > 0.01:
            log.warning(f"Ensemble weights sum to {total:.3f}, normalizing.")
        self.default_weights = _normalized(base)
        self.weights = dict(self.default_weights)

    # ── Weights ───────────────────────────────────────────────────

    def adjust_weights_by_accuracy(self, accuracies: Mapping[str, float]) -> dict[str, float]:
        """
        Scale each default weight by the member's observed accuracy and
        renormalize. Falls back to the defaults when nothing scored.
        """
        scaled = {
            code: max(accuracies.get(code, 0.0), 0.0) * w
            for code, w in self.default_weights.items()
        }
        if sum(scaled.values()) > 0:
            self.weights = _normalized(scaled)
        else:
            self.weights = dict(self.default_weights)
        log.info("Ensemble weights: " + " ".join(f"{c}={w:.3f}" for c, w in self.weights.items()))
        return dict(self.weights)

    # ── Prediction ────────────────────────────────────────────────

    def get_scores(self, history: list[Draw]) -> tuple[dict[int, float], dict[int, float]]:
        """Fused per-number vote for the front and back zones."""
        front = {n: 0.0 for n in NumberZone.FRONT.numbers}
        back = {n: 0.0 for n in NumberZone.BACK.numbers}

        for code, member in self.members.items():
            weight = self.weights[code]
            member_front, member_back = member.predict(history)
            for fused, picked in ((front, member_front), (back, member_back)):
                mass = 1.0 / len(picked)
                for num in picked:
                    fused[num] += weight * mass
        return front, back

    def predict(self, history: list[Draw]) -> Combination:
        front, back = self.get_scores(history)
        combo = (
            top_by_score(front, NumberZone.FRONT, self.rng),
            top_by_score(back, NumberZone.BACK, self.rng),
        )
        log.debug(f"Ensemble prediction: {combo}")
        return combo

    def predict_multiple(self, history: list[Draw], count: int) -> list[Combination]:
        return generate_unique(lambda: self.predict(history), count, self.rng)
