"""
superlotto/models/sampling.py
Predictor protocol and the selection / deduplication helpers shared by
every strategy.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Protocol

import numpy as np

from superlotto.domain.draw import Combination, Draw
from superlotto.domain.zone import NumberZone

DEDUP_ATTEMPT_FACTOR = 10
WEIGHTED_ATTEMPT_FACTOR = 50


class Predictor(Protocol):
    """Anything that turns a history snapshot (newest first) into combinations."""

    method_code: str
    method_name: str

    def predict(self, history: list[Draw]) -> Combination: ...

    def predict_multiple(self, history: list[Draw], count: int) -> list[Combination]: ...


def new_rng(seed: int | np.random.SeedSequence | None = None) -> np.random.Generator:
    return np.random.default_rng(seed)


# ── Zone-level selection ──────────────────────────────────────────

def random_fill(
    selected: list[int],
    zone: NumberZone,
    rng: np.random.Generator,
    count: int | None = None,
) -> list[int]:
    """Pad ``selected`` with uniform-random unused numbers up to ``count``."""
    count = zone.count if count is None else count
    missing = count - len(selected)
    if missing > 0:
        remaining = [n for n in zone.numbers if n not in selected]
        extra = rng.choice(remaining, size=missing, replace=False)
        selected = selected + [int(n) for n in extra]
    return selected


def random_numbers(zone: NumberZone, rng: np.random.Generator) -> tuple[int, ...]:
    return tuple(sorted(random_fill([], zone, rng)))


def random_combination(rng: np.random.Generator) -> Combination:
    return random_numbers(NumberZone.FRONT, rng), random_numbers(NumberZone.BACK, rng)


def sample_from_pool(
    pool: Iterable[int],
    zone: NumberZone,
    rng: np.random.Generator,
    count: int | None = None,
) -> tuple[int, ...]:
    """Shuffle the candidate pool, take up to ``count``, pad randomly, sort."""
    count = zone.count if count is None else count
    candidates = list(dict.fromkeys(int(n) for n in pool if zone.contains(n)))
    rng.shuffle(candidates)
    selected = random_fill(candidates[:count], zone, rng, count)
    return tuple(sorted(selected))


def weighted_sample(
    scores: Mapping[int, float],
    zone: NumberZone,
    rng: np.random.Generator,
    count: int | None = None,
) -> tuple[int, ...]:
    """
    Roulette-wheel selection without replacement. A spin landing on an
    already chosen number moves on to the next unchosen one. Gives up after
    count * 50 spins and pads randomly.
    """
    count = zone.count if count is None else count
    nums = list(scores)
    weights = [max(float(scores[n]), 0.0) for n in nums]
    total = sum(weights)

    selected: list[int] = []
    attempts = 0
    while len(selected) < count and attempts < count * WEIGHTED_ATTEMPT_FACTOR and total > 0:
        attempts += 1
        spin = rng.random() * total
        cumulative = 0.0
        for num, weight in zip(nums, weights):
            cumulative += weight
            if spin <= cumulative and num not in selected:
                selected.append(num)
                break

    return tuple(sorted(random_fill(selected, zone, rng, count)))


def top_by_score(
    scores: Mapping[int, float],
    zone: NumberZone,
    rng: np.random.Generator,
    count: int | None = None,
) -> tuple[int, ...]:
    """Highest scores first, ties in pool order; random padding if too few scores."""
    count = zone.count if count is None else count
    ranked = sorted((n for n in scores if zone.contains(n)), key=lambda n: (-scores[n], n))
    return tuple(sorted(random_fill(ranked[:count], zone, rng, count)))


# ── Combination-level helpers ─────────────────────────────────────

def generate_unique(
    make_one: Callable[[], Combination],
    count: int,
    rng: np.random.Generator,
) -> list[Combination]:
    """
    Call ``make_one`` up to count * 10 times keeping distinct combinations,
    then top up with distinct uniform-random combinations.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    results: list[Combination] = []
    seen: set[Combination] = set()

    for _ in range(count * DEDUP_ATTEMPT_FACTOR):
        if len(results) >= count:
            break
        combo = make_one()
        if combo not in seen:
            seen.add(combo)
            results.append(combo)

    while len(results) < count:
        combo = random_combination(rng)
        if combo not in seen:
            seen.add(combo)
            results.append(combo)

    return results
