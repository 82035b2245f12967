"""
superlotto/models/model_loader.py
Instantiate predictors by method code from the engine config.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np

from superlotto.domain.methods import PredictionMethod, all_codes
from superlotto.models.adaptive_predictor import AdaptivePredictor
from superlotto.models.ensemble_predictor import DEFAULT_WEIGHTS, EnsemblePredictor
from superlotto.models.ml.bayesian_predictor import BayesianPredictor
from superlotto.models.ml.gradient_boost import GradientBoostPredictor
from superlotto.models.ml.markov_chain import MarkovChainPredictor
from superlotto.models.ml.ml_predictor import MLScoringPredictor
from superlotto.models.ml.monte_carlo import MonteCarloPredictor
from superlotto.models.sampling import Predictor, new_rng
from superlotto.models.statistical.balanced_predictor import BalancedPredictor
from superlotto.models.statistical.frequency_analyzer import FrequencyAnalyzer
from superlotto.models.statistical.gap_analyzer import GapAnalyzer
from superlotto.models.statistical.hot_predictor import HotNumberPredictor
from superlotto.models.statistical.missing_predictor import MissingReboundPredictor
from superlotto.utils.config import get_engine_config
from superlotto.utils.logger import get_logger

log = get_logger("model_loader")


class ModelLoader:
    """
    Builds predictors sharing one config snapshot. Each predictor gets its
    own generator spawned from ``seed`` so runs are reproducible.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        weights: Mapping[str, float] | None = None,
        seed: int | None = None,
    ):
        self.config = config if config is not None else get_engine_config()
        self.weights = dict(weights or {})
        self._seeds = np.random.SeedSequence(seed)

        analysis = self.config.get("analysis", {})
        self.frequency = FrequencyAnalyzer(hot_cold_window=analysis.get("hot_cold_window", 30))
        self.gaps = GapAnalyzer(window=analysis.get("missing_window", 500))

    def _params(self, name: str) -> dict[str, Any]:
        return dict(self.config.get("predictors", {}).get(name, {}))

    def _rng(self) -> np.random.Generator:
        return new_rng(self._seeds.spawn(1)[0])

    def load(self, method_code: str) -> Predictor:
        method = PredictionMethod.from_code(method_code)
        rng = self._rng()

        if method is PredictionMethod.HOT:
            return HotNumberPredictor(self.frequency, rng, **self._params("hot"))
        if method is PredictionMethod.MISSING:
            return MissingReboundPredictor(self.gaps, rng, **self._params("missing"))
        if method is PredictionMethod.BALANCED:
            return BalancedPredictor(self.frequency, rng, **self._params("balanced"))
        if method is PredictionMethod.ML:
            return MLScoringPredictor(rng, **self._params("ml"))
        if method is PredictionMethod.ADAPTIVE:
            return AdaptivePredictor(self.weights, self.frequency, self.gaps, rng)
        if method is PredictionMethod.BAYESIAN:
            return BayesianPredictor(rng, **self._params("bayesian"))
        if method is PredictionMethod.MARKOV:
            return MarkovChainPredictor(rng, **self._params("markov"))
        if method is PredictionMethod.MONTECARLO:
            return MonteCarloPredictor(rng, **self._params("monte_carlo"))
        if method is PredictionMethod.GRADIENT_BOOST:
            return GradientBoostPredictor(rng, **self._params("gradient_boost"))
        return self._load_ensemble(rng)

    def _load_ensemble(self, rng: np.random.Generator) -> EnsemblePredictor:
        weights = self._params("ensemble").get("weights") or DEFAULT_WEIGHTS
        members = {code: self.load(code) for code in weights}
        return EnsemblePredictor(members, weights, rng)

    def load_all(self, method_codes: Iterable[str] | None = None) -> dict[str, Predictor]:
        codes = list(method_codes) if method_codes else all_codes()
        predictors = {PredictionMethod.from_code(c).code: self.load(c) for c in codes}
        log.info(f"Loaded {len(predictors)} predictors: {', '.join(predictors)}")
        return predictors


def load_predictor(method_code: str, **kwargs) -> Predictor:
    return ModelLoader(**kwargs).load(method_code)
