"""
superlotto/domain/methods.py
Registered prediction method codes with display metadata.
"""
from __future__ import annotations

from enum import Enum

from superlotto.utils.errors import UnknownMethodError


class PredictionMethod(Enum):
    HOT = ("HOT", "Hot Numbers", "Samples from the most frequent recent numbers")
    MISSING = ("MISSING", "Missing Rebound", "Samples numbers whose gap is close to its average")
    BALANCED = ("BALANCED", "Hot/Cold Balanced", "Mixes hot, warm and cold numbers")
    ML = ("ML", "Machine Learning", "Multi-factor scoring with weighted sampling")
    ADAPTIVE = ("ADAPTIVE", "Adaptive Learning", "Fuses heuristics with learned method weights")
    BAYESIAN = ("BAYESIAN", "Bayesian", "Beta posterior mode blended with a frequency prior")
    MARKOV = ("MARKOV", "Markov Chain", "Stationary distribution of draw-to-draw transitions")
    MONTECARLO = ("MONTECARLO", "Monte Carlo", "Direct, MCMC and importance sampling tallies")
    GRADIENT_BOOST = ("GRADIENT_BOOST", "Gradient Boost", "Seven weighted per-number features")
    ENSEMBLE = ("ENSEMBLE", "Ensemble", "Weighted vote of several base predictors")

    def __init__(self, code: str, display_name: str, description: str):
        self.code = code
        self.display_name = display_name
        self.description = description

    @classmethod
    def from_code(cls, code: str) -> PredictionMethod:
        key = (code or "").strip().upper()
        for method in cls:
            if method.code == key:
                return method
        raise UnknownMethodError(code, all_codes())


def all_codes() -> list[str]:
    return [m.code for m in PredictionMethod]
