"""
superlotto/pipeline/weight_learner.py
Online per-method weights: EMA of the hit rate of verified predictions,
renormalized across methods after every batch.
"""
from __future__ import annotations

import threading
from collections.abc import Iterable

from superlotto.domain.methods import PredictionMethod
from superlotto.domain.records import MethodWeight, PredictionCandidate
from superlotto.utils.logger import get_logger
from superlotto.utils.repository import WeightStore

log = get_logger("pipeline.weights")


class WeightLearner:
    """
    Owns the read-modify-write cycle over the weight store. Every public
    mutation runs under one lock, so concurrent verifications never write
    weights computed from a stale read.
    """

    def __init__(
        self,
        store: WeightStore,
        alpha: float = 0.1,
        front_hit_threshold: int = 3,
        back_hit_threshold: int = 1,
        methods: Iterable[PredictionMethod] | None = None,
    ):
        if not 0 < alpha <= 1:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.store = store
        self.alpha = alpha
        self.front_hit_threshold = front_hit_threshold
        self.back_hit_threshold = back_hit_threshold
        self.methods = list(methods or PredictionMethod)
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, store: WeightStore, params: dict) -> WeightLearner:
        return cls(
            store,
            alpha=params.get("ema_alpha", 0.1),
            front_hit_threshold=params.get("front_hit_threshold", 3),
            back_hit_threshold=params.get("back_hit_threshold", 1),
        )

    @property
    def uniform_weight(self) -> float:
        return 1.0 / len(self.methods)

    # ── Bootstrap ─────────────────────────────────────────────────

    def bootstrap(self) -> list[MethodWeight]:
        """Create a row with the uniform weight for every method that has none."""
        with self._lock:
            rows = {r.method_code: r for r in self.store.load_method_weights()}
            created = [
                MethodWeight(m.code, m.display_name, self.uniform_weight)
                for m in self.methods
                if m.code not in rows
            ]
            if created:
                self.store.save_method_weights(created)
                log.info(f"Initialized weights for {len(created)} methods")
            return list(rows.values()) + created

    def reset_weights(self) -> list[MethodWeight]:
        """Zero all counters and restore uniform weights."""
        with self._lock:
            rows = [
                MethodWeight(m.code, m.display_name, self.uniform_weight)
                for m in self.methods
            ]
            self.store.save_method_weights(rows)
            log.info("Method weights reset to uniform")
            return rows

    # ── Learning ──────────────────────────────────────────────────

    def is_hit(self, prediction: PredictionCandidate) -> bool:
        return (
            (prediction.front_hits or 0) >= self.front_hit_threshold
            or (prediction.back_hits or 0) >= self.back_hit_threshold
        )

    def adjust_batch(self, predictions: Iterable[PredictionCandidate]) -> list[MethodWeight]:
        """
        Fold a batch of verified predictions into the EMA hit rates, then
        renormalize all weights. Unverified predictions and methods without
        a weight row are skipped.
        """
        with self._lock:
            rows = {r.method_code: r for r in self.store.load_method_weights()}
            for prediction in predictions:
                if not prediction.verified:
                    log.debug(f"Skipping unverified prediction {prediction.id}")
                    continue
                row = rows.get(prediction.method)
                if row is None:
                    log.warning(f"No weight row for method {prediction.method}, skipped this cycle")
                    continue
                hit = self.is_hit(prediction)
                row.total_predictions += 1
                if hit:
                    row.total_hits += 1
                row.hit_rate = self.alpha * (1.0 if hit else 0.0) + (1 - self.alpha) * row.hit_rate

            updated = self._recalculate(list(rows.values()))
            self.store.save_method_weights(updated)
            return updated

    def recalculate_all(self) -> list[MethodWeight]:
        with self._lock:
            updated = self._recalculate(self.store.load_method_weights())
            self.store.save_method_weights(updated)
            return updated

    def snapshot(self) -> list[MethodWeight]:
        with self._lock:
            return self.store.load_method_weights()

    def restore(self, rows: list[MethodWeight]) -> None:
        """Write back rows taken with snapshot(), undoing a batch whose verification failed."""
        with self._lock:
            self.store.save_method_weights(rows)
            log.warning(f"Restored {len(rows)} method weight rows")

    def _recalculate(self, rows: list[MethodWeight]) -> list[MethodWeight]:
        total = sum(r.hit_rate for r in rows)
        for row in rows:
            row.weight = row.hit_rate / total if total > 0 else 1.0 / len(rows)
        log.info("Weights: " + " ".join(f"{r.method_code}={r.weight:.3f}" for r in rows))
        return rows

    # ── Queries ───────────────────────────────────────────────────

    def get_weights(self) -> dict[str, float]:
        return {r.method_code: r.weight for r in self.store.load_method_weights()}

    def get_method_weights(self) -> list[MethodWeight]:
        return sorted(self.store.load_method_weights(), key=lambda r: r.weight, reverse=True)
