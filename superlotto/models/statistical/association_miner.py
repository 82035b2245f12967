"""
superlotto/models/statistical/association_miner.py
Pairwise association rules (support / confidence / lift) between numbers,
within the same draw and from one draw to the next.
"""
from __future__ import annotations

from collections import Counter
from itertools import combinations
from typing import Any

from superlotto.domain.draw import Draw
from superlotto.domain.records import AssociationRule
from superlotto.domain.zone import NumberZone
from superlotto.utils.logger import get_logger

log = get_logger("model.association")


class AssociationMiner:
    def __init__(self, window: int = 200, min_support: float = 0.02, min_confidence: float = 0.3):
        self.window = window
        self.min_support = min_support
        self.min_confidence = min_confidence

    def _emit(
        self,
        antecedent: int,
        consequent: int,
        pair_count: int,
        antecedent_count: int,
        total: int,
        expected_confidence: float,
        zone_tag: str,
    ) -> AssociationRule | None:
        support = pair_count / total
        if support < self.min_support or antecedent_count == 0:
            return None
        confidence = pair_count / antecedent_count
        if confidence < self.min_confidence:
            return None
        lift = confidence / expected_confidence if expected_confidence > 0 else 0.0
        if lift <= 1:
            return None
        return AssociationRule(
            antecedent=frozenset({antecedent}),
            consequent=frozenset({consequent}),
            support=support,
            confidence=confidence,
            lift=lift,
            zone_tag=zone_tag,
        )

    def mine_rules(self, history: list[Draw], zone: NumberZone) -> list[AssociationRule]:
        """Same-draw pair rules in both directions, strongest lift first."""
        recent = history[: self.window]
        total = len(recent)
        if total == 0:
            return []

        counts: Counter = Counter()
        pairs: Counter = Counter()
        for draw in recent:
            nums = draw.numbers(zone)
            counts.update(nums)
            pairs.update(combinations(nums, 2))

        tag = zone.name
        rules: list[AssociationRule] = []
        for (a, b), c in pairs.items():
            for ante, cons in ((a, b), (b, a)):
                rule = self._emit(ante, cons, c, counts[ante], total, counts[cons] / total, tag)
                if rule:
                    rules.append(rule)

        rules.sort(key=lambda r: r.lift, reverse=True)
        log.debug(f"{tag}: {len(rules)} rules from {total} draws")
        return rules

    def mine_sequential_rules(self, history: list[Draw], zone: NumberZone) -> list[AssociationRule]:
        """
        Rules linking a number in draw t+1 (older) to a number in draw t.
        Lift is measured against the per-draw chance zone.count / pool_size.
        """
        recent = history[: self.window]
        total = len(recent) - 1
        if total <= 0:
            return []

        prev_counts: Counter = Counter()
        pairs: Counter = Counter()
        for i in range(total):
            curr = recent[i].numbers(zone)
            prev = recent[i + 1].numbers(zone)
            prev_counts.update(prev)
            pairs.update((p, c) for p in prev for c in curr)

        expected = zone.count / zone.pool_size
        tag = f"{zone.name}_SEQ"
        rules: list[AssociationRule] = []
        for (p, c), n in pairs.items():
            rule = self._emit(p, c, n, prev_counts[p], total, expected, tag)
            if rule:
                rules.append(rule)
        rules.sort(key=lambda r: r.lift, reverse=True)
        return rules

    def get_related_numbers(self, history: list[Draw], number: int, zone: NumberZone, top_n: int = 5) -> list[int]:
        rules = [r for r in self.mine_rules(history, zone) if number in r.antecedent]
        related: list[int] = []
        for rule in rules:
            for num in sorted(rule.consequent):
                if num not in related:
                    related.append(num)
        return related[:top_n]

    def get_network(self, history: list[Draw], zone: NumberZone, top_n: int = 20) -> dict[str, Any]:
        """Graph view of the top rules: nodes, links and readable rule lines."""
        rules = self.mine_rules(history, zone)[:top_n]
        recent = history[: self.window]
        counts = Counter(n for draw in recent for n in draw.numbers(zone))

        members = sorted({n for r in rules for n in (*r.antecedent, *r.consequent)})
        nodes = [{"number": n, "name": f"{n:02d}", "frequency": counts.get(n, 0)} for n in members]
        links = [
            {
                "source": next(iter(r.antecedent)),
                "target": next(iter(r.consequent)),
                "lift": r.lift,
                "confidence": r.confidence,
                "support": r.support,
            }
            for r in rules
        ]
        return {
            "zone": zone.name,
            "nodes": nodes,
            "links": links,
            "rules": [r.describe() for r in rules],
        }
