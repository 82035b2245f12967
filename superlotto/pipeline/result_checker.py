"""
superlotto/pipeline/result_checker.py
Verify predictions for an issue against its drawn numbers, then refresh
accuracy stats and feed the outcome to the weight learner.
"""
from __future__ import annotations

from superlotto.domain.draw import Combination
from superlotto.domain.prizes import PrizeTable
from superlotto.domain.records import MethodWeight, PredictionCandidate
from superlotto.pipeline.accuracy_tracker import AccuracyTracker
from superlotto.pipeline.weight_learner import WeightLearner
from superlotto.utils.errors import DrawNotResolvedError
from superlotto.utils.logger import get_logger
from superlotto.utils.repository import DrawRepository, PredictionStore

log = get_logger("pipeline.checker")


def count_hits(predicted: Combination, actual: Combination) -> tuple[int, int]:
    front, back = predicted
    actual_front, actual_back = actual
    return len(set(front) & set(actual_front)), len(set(back) & set(actual_back))


class Verifier:
    def __init__(
        self,
        draws: DrawRepository,
        predictions: PredictionStore,
        learner: WeightLearner,
        prize_table: PrizeTable,
    ):
        self.draws = draws
        self.predictions = predictions
        self.learner = learner
        self.prize_table = prize_table
        self.accuracy = AccuracyTracker(predictions, prize_table)

    def verify(self, issue: str) -> list[PredictionCandidate]:
        """
        Full verification flow:
        1. Load the draw for the issue (DrawNotResolvedError if absent)
        2. Load unverified predictions (none → empty result)
        3. Count hits and assign prize tiers in memory
        4. Adjust method weights with the scored batch
        5. Mark predictions verified, then refresh per-method accuracy stats

        Nothing is marked verified until the weights are saved. If step 5
        fails, the marks and the weights are rolled back so the issue can
        be verified again.
        """
        log.info(f"[VERIFY] issue={issue}")

        # Step 1: Draw
        draw = self.draws.fetch_draw_by_issue(issue)
        if draw is None:
            raise DrawNotResolvedError(issue)

        # Step 2: Predictions
        pending = self.predictions.load_unverified_predictions(issue)
        if not pending:
            log.info(f"No unverified predictions for issue {issue}")
            return []

        # Step 3: Score
        for candidate in pending:
            front_hits, back_hits = count_hits(candidate.key, draw.combination)
            tier = self.prize_table.tier_for(front_hits, back_hits)
            candidate.mark_verified(front_hits, back_hits, tier)
            if self.prize_table.is_winning(tier):
                log.info(
                    f"{candidate.method}: {candidate.front}+{candidate.back} "
                    f"hit {front_hits}+{back_hits} → {tier}"
                )

        # Step 4: Weights
        before = self.learner.snapshot()
        self.learner.adjust_batch(pending)

        # Step 5: Persist marks and accuracy stats
        marked: list[PredictionCandidate] = []
        try:
            for candidate in pending:
                self.predictions.mark_verified(candidate)
                marked.append(candidate)
            self.accuracy.refresh()
        except Exception:
            log.error(f"Verification of issue {issue} failed, rolling back {len(marked)} predictions")
            self._rollback(marked, before)
            raise

        winners = sum(1 for c in pending if self.prize_table.is_winning(c.prize_tier))
        log.info(f"Verified {len(pending)} predictions for issue {issue}, {winners} winning")
        return pending

    def _rollback(self, marked: list[PredictionCandidate], weights: list[MethodWeight]) -> None:
        for candidate in marked:
            candidate.clear_verification()
            self.predictions.mark_verified(candidate)
        self.learner.restore(weights)
