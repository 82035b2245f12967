"""
superlotto/pipeline/analysis_report.py
Read-only analysis over the stored draw history: frequency and gap tables,
hot/cold/due lists, association rules and draw statistics.
"""
from __future__ import annotations

from typing import Any

from superlotto.domain.records import AssociationRule
from superlotto.domain.zone import NumberZone
from superlotto.models.statistical.association_miner import AssociationMiner
from superlotto.models.statistical.draw_statistics import DrawStatistics
from superlotto.models.statistical.frequency_analyzer import FrequencyAnalyzer
from superlotto.models.statistical.gap_analyzer import GapAnalyzer
from superlotto.utils.repository import DrawRepository


class AnalysisReport:
    def __init__(
        self,
        draws: DrawRepository,
        params: dict[str, Any] | None = None,
        history_limit: int = 1000,
    ):
        params = params or {}
        self.draws = draws
        self.history_limit = history_limit
        self.frequency = FrequencyAnalyzer(hot_cold_window=params.get("hot_cold_window", 30))
        self.gaps = GapAnalyzer(window=params.get("missing_window", 500))
        self.miner = AssociationMiner(
            window=params.get("association_window", 200),
            min_support=params.get("min_support", 0.02),
            min_confidence=params.get("min_confidence", 0.3),
        )
        self.statistics = DrawStatistics()

    def _history(self):
        return self.draws.fetch_recent_draws(self.history_limit)

    # ── Tables ────────────────────────────────────────────────────

    def frequency_table(self, zone: NumberZone, window: int | None = None) -> list[dict[str, Any]]:
        table = self.frequency.frequency(self._history(), zone, window)
        return [
            {"number": f.number, "count": f.count, "percentage": round(f.percentage, 2)}
            for f in table.values()
        ]

    def gap_table(self, zone: NumberZone) -> list[dict[str, Any]]:
        gaps = self.gaps.get_gaps(self._history(), zone)
        return [
            {"number": g.number, "current": g.current_gap, "average": round(g.avg_gap, 2), "max": g.max_gap}
            for g in gaps.values()
        ]

    def hot_numbers(self, zone: NumberZone, n: int = 10) -> list[int]:
        return self.frequency.get_hot_numbers(self._history(), zone, n)

    def cold_numbers(self, zone: NumberZone, n: int = 10) -> list[int]:
        return self.frequency.get_cold_numbers(self._history(), zone, n)

    def due_numbers(self, zone: NumberZone, n: int = 10) -> list[int]:
        return self.gaps.get_due_numbers(self._history(), zone, n)

    def high_gap_numbers(self, zone: NumberZone, n: int = 10) -> list[int]:
        return self.gaps.get_high_gap_numbers(self._history(), zone, n)

    # ── Associations ──────────────────────────────────────────────

    def association_rules(self, zone: NumberZone, sequential: bool = False, limit: int | None = None) -> list[AssociationRule]:
        history = self._history()
        if sequential:
            rules = self.miner.mine_sequential_rules(history, zone)
        else:
            rules = self.miner.mine_rules(history, zone)
        return rules[:limit] if limit else rules

    def related_numbers(self, number: int, zone: NumberZone, top_n: int = 5) -> list[int]:
        return self.miner.get_related_numbers(self._history(), number, zone, top_n)

    def association_network(self, zone: NumberZone, top_n: int = 20) -> dict[str, Any]:
        return self.miner.get_network(self._history(), zone, top_n)

    # ── Draw shape ────────────────────────────────────────────────

    def draw_statistics(self) -> dict[str, Any]:
        return self.statistics.summary(self._history())
