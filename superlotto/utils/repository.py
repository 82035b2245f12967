"""
superlotto/utils/repository.py
Storage contracts used by the engine, plus in-memory implementations
for tests and offline backtests.
"""
from __future__ import annotations

import copy
import itertools
from collections.abc import Iterable
from typing import Protocol

from superlotto.domain.draw import Draw, sort_newest_first
from superlotto.domain.records import AccuracyStats, MethodWeight, PredictionCandidate


# ── Contracts ─────────────────────────────────────────────────────

class DrawRepository(Protocol):
    def fetch_recent_draws(self, limit: int) -> list[Draw]:
        """Most recent ``limit`` draws, newest first."""
        ...

    def fetch_draw_by_issue(self, issue: str) -> Draw | None: ...

    def fetch_all_draws(self) -> list[Draw]: ...


class WeightStore(Protocol):
    def load_method_weights(self) -> list[MethodWeight]: ...

    def save_method_weights(self, rows: list[MethodWeight]) -> None: ...


class PredictionStore(Protocol):
    def load_unverified_predictions(self, issue: str) -> list[PredictionCandidate]: ...

    def save_prediction(self, candidate: PredictionCandidate) -> PredictionCandidate: ...

    # writes the candidate's verification fields as they are, cleared ones included
    def mark_verified(self, candidate: PredictionCandidate) -> None: ...

    def load_verified_predictions(self, method: str | None = None) -> list[PredictionCandidate]: ...

    def save_accuracy_stats(self, rows: list[AccuracyStats]) -> None: ...

    def load_accuracy_stats(self) -> list[AccuracyStats]: ...


# ── In-memory implementations ─────────────────────────────────────

class InMemoryDrawRepository:
    def __init__(self, draws: Iterable[Draw] = ()):
        self._draws: dict[str, Draw] = {d.issue: d for d in draws}

    def add(self, draw: Draw) -> None:
        self._draws[draw.issue] = draw

    def fetch_recent_draws(self, limit: int) -> list[Draw]:
        return sort_newest_first(self._draws.values())[:limit]

    def fetch_draw_by_issue(self, issue: str) -> Draw | None:
        return self._draws.get(str(issue))

    def fetch_all_draws(self) -> list[Draw]:
        return list(self._draws.values())


class InMemoryWeightStore:
    """Rows are copied on load and save so callers never share state with the store."""

    def __init__(self, rows: Iterable[MethodWeight] = ()):
        self._rows: dict[str, MethodWeight] = {r.method_code: copy.copy(r) for r in rows}

    def load_method_weights(self) -> list[MethodWeight]:
        return [copy.copy(r) for r in self._rows.values()]

    def save_method_weights(self, rows: list[MethodWeight]) -> None:
        for row in rows:
            self._rows[row.method_code] = copy.copy(row)

    def delete(self, method_code: str) -> None:
        self._rows.pop(method_code, None)


class InMemoryPredictionStore:
    def __init__(self):
        self._predictions: dict[str, PredictionCandidate] = {}
        self._accuracy: dict[str, AccuracyStats] = {}
        self._ids = itertools.count(1)

    def save_prediction(self, candidate: PredictionCandidate) -> PredictionCandidate:
        if candidate.id is None:
            candidate.id = str(next(self._ids))
        self._predictions[candidate.id] = copy.copy(candidate)
        return candidate

    def load_unverified_predictions(self, issue: str) -> list[PredictionCandidate]:
        return [
            copy.copy(p) for p in self._predictions.values()
            if p.target_issue == str(issue) and not p.verified
        ]

    def mark_verified(self, candidate: PredictionCandidate) -> None:
        if candidate.id is None or candidate.id not in self._predictions:
            raise KeyError(f"Unknown prediction id: {candidate.id}")
        self._predictions[candidate.id] = copy.copy(candidate)

    def load_verified_predictions(self, method: str | None = None) -> list[PredictionCandidate]:
        return [
            copy.copy(p) for p in self._predictions.values()
            if p.verified and (method is None or p.method == method)
        ]

    def save_accuracy_stats(self, rows: list[AccuracyStats]) -> None:
        for row in rows:
            self._accuracy[row.method] = copy.copy(row)

    def load_accuracy_stats(self) -> list[AccuracyStats]:
        return [copy.copy(r) for r in self._accuracy.values()]

    def all_predictions(self) -> list[PredictionCandidate]:
        return [copy.copy(p) for p in self._predictions.values()]
