"""
superlotto/pipeline/prediction_generator.py
Generate and store prediction candidates for the next issue.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

from superlotto.domain.draw import Draw
from superlotto.domain.methods import PredictionMethod, all_codes
from superlotto.domain.records import PredictionCandidate
from superlotto.models.model_loader import ModelLoader
from superlotto.models.sampling import Predictor
from superlotto.pipeline.prediction_scorer import PredictionScorer
from superlotto.pipeline.weight_learner import WeightLearner
from superlotto.utils.config import DEFAULT_FIRST_ISSUE, get_engine_config
from superlotto.utils.logger import get_logger
from superlotto.utils.repository import DrawRepository, PredictionStore

log = get_logger("pipeline.generator")

HISTORY_LIMIT = 1000


def next_issue(latest: Draw | None) -> str:
    """Latest issue + 1, keeping its zero padding; DEFAULT_FIRST_ISSUE with no draws."""
    if latest is None:
        return DEFAULT_FIRST_ISSUE
    try:
        return str(int(latest.issue) + 1).zfill(len(latest.issue))
    except ValueError:
        raise ValueError(f"Cannot derive next issue from non-numeric issue {latest.issue!r}") from None


class PredictionGenerator:
    def __init__(
        self,
        draws: DrawRepository,
        predictions: PredictionStore,
        learner: WeightLearner,
        config: dict[str, Any] | None = None,
        seed: int | None = None,
        history_limit: int = HISTORY_LIMIT,
    ):
        self.draws = draws
        self.predictions = predictions
        self.learner = learner
        self.config = config if config is not None else get_engine_config()
        self.seed = seed
        self.history_limit = history_limit

    def _loader(self) -> ModelLoader:
        # weights are read once per call and frozen into the adaptive predictor
        return ModelLoader(config=self.config, weights=self.learner.get_weights(), seed=self.seed)

    def _resolve_methods(self, method: str | None) -> list[str]:
        if method:
            return [PredictionMethod.from_code(method).code]
        return all_codes()

    def _store(self, issue: str, code: str, combos, score: Callable | None = None) -> list[PredictionCandidate]:
        stored = []
        for front, back in combos:
            candidate = PredictionCandidate(
                target_issue=issue,
                method=code,
                front=front,
                back=back,
                score=score((front, back)) if score else None,
            )
            stored.append(self.predictions.save_prediction(candidate))
        return stored

    def generate(
        self,
        count: int = 5,
        method: str | None = None,
        target_issue: str | None = None,
    ) -> list[PredictionCandidate]:
        """
        1. Resolve methods (UnknownMethodError on a bad code)
        2. Fetch one history snapshot
        3. Predict ``count`` combinations per method
        4. Store candidates for the target issue
        """
        if count <= 0:
            raise ValueError(f"count must be positive, got {count}")
        codes = self._resolve_methods(method)
        history = self.draws.fetch_recent_draws(self.history_limit)
        issue = target_issue or next_issue(history[0] if history else None)
        log.info(f"[GENERATE] issue={issue} methods={','.join(codes)} count={count}")

        loader = self._loader()
        results: list[PredictionCandidate] = []
        for code in codes:
            predictor: Predictor = loader.load(code)
            results.extend(self._store(issue, code, predictor.predict_multiple(history, count)))
        log.info(f"Stored {len(results)} predictions for issue {issue}")
        return results

    def generate_best(
        self,
        candidates_per_method: int = 5,
        method: str | None = None,
        target_issue: str | None = None,
    ) -> list[PredictionCandidate]:
        """One prediction per method: the highest-scoring of N candidates."""
        if candidates_per_method <= 0:
            raise ValueError(f"candidates_per_method must be positive, got {candidates_per_method}")
        codes = self._resolve_methods(method)
        history = self.draws.fetch_recent_draws(self.history_limit)
        issue = target_issue or next_issue(history[0] if history else None)
        scorer = PredictionScorer(history, window=self.config.get("scorer", {}).get("window", 100))
        loader = self._loader()

        results: list[PredictionCandidate] = []
        for code in codes:
            combos = loader.load(code).predict_multiple(history, candidates_per_method)
            best, score = scorer.best(combos)
            log.info(f"{code}: best of {len(combos)} scored {score:.2f}")
            results.extend(self._store(issue, code, [best], scorer.score))

        results.sort(key=lambda c: c.score or 0.0, reverse=True)
        return results
