"""
superlotto/domain/prizes.py
Prize tier lookup and nominal payouts for (front hits, back hits).
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

NO_PRIZE = "NO_PRIZE"

# Tiers that count as a "high" prize in accuracy rankings and backtest reports
HIGH_PRIZE_COUNT = 3


@dataclass(frozen=True)
class PrizeTable:
    """
    Immutable prize configuration shared by the verifier and the backtester.

    tiers: tier names ordered from best to worst, NO_PRIZE excluded.
    matches: (front_hits, back_hits) → tier.
    payouts: tier → nominal prize money.
    """

    tiers: tuple[str, ...]
    matches: Mapping[tuple[int, int], str]
    payouts: Mapping[str, int]
    cost_per_combination: int = 2
    _rank: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "matches", MappingProxyType(dict(self.matches)))
        payouts = dict(self.payouts)
        payouts.setdefault(NO_PRIZE, 0)
        object.__setattr__(self, "payouts", MappingProxyType(payouts))
        unknown = set(self.matches.values()) - set(self.tiers)
        if unknown:
            raise ValueError(f"Prize matches reference unknown tiers: {sorted(unknown)}")
        rank = {tier: len(self.tiers) - i for i, tier in enumerate(self.tiers)}
        rank[NO_PRIZE] = 0
        object.__setattr__(self, "_rank", MappingProxyType(rank))

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> PrizeTable:
        """Build from the ``prize_table`` section of the engine config."""
        tiers: list[str] = []
        matches: dict[tuple[int, int], str] = {}
        payouts: dict[str, int] = {}
        for entry in cfg["tiers"]:
            tier = entry["tier"]
            tiers.append(tier)
            payouts[tier] = int(entry["payout"])
            for front_hits, back_hits in entry["matches"]:
                matches[(int(front_hits), int(back_hits))] = tier
        return cls(
            tiers=tuple(tiers),
            matches=matches,
            payouts=payouts,
            cost_per_combination=int(cfg.get("cost_per_combination", 2)),
        )

    def tier_for(self, front_hits: int, back_hits: int) -> str:
        return self.matches.get((front_hits, back_hits), NO_PRIZE)

    def payout(self, tier: str) -> int:
        return self.payouts.get(tier, 0)

    def rank(self, tier: str | None) -> int:
        """Higher is better; NO_PRIZE (and unknown tiers) rank 0."""
        if tier is None:
            return 0
        return self._rank.get(tier, 0)

    def is_winning(self, tier: str | None) -> bool:
        return self.rank(tier) > 0

    def is_high_prize(self, tier: str | None) -> bool:
        return tier in self.tiers[:HIGH_PRIZE_COUNT]
