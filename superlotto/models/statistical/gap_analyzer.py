"""
superlotto/models/statistical/gap_analyzer.py
Per-number gap statistics (draws since last appearance).
Numbers whose current gap has caught up with their average gap are "due".
"""
from __future__ import annotations

from dataclasses import dataclass

from superlotto.domain.draw import Draw
from superlotto.domain.zone import NumberZone


@dataclass(frozen=True)
class NumberGap:
    number: int
    current_gap: int
    avg_gap: float
    max_gap: int


class GapAnalyzer:
    """Gap statistics over a fixed window of the most recent draws."""

    def __init__(self, window: int = 500):
        self.window = window

    def get_gaps(self, history: list[Draw], zone: NumberZone) -> dict[int, NumberGap]:
        """
        Returns {number: NumberGap}.
        current_gap is the index of the newest occurrence (window length if never seen).
        Each older occurrence closes an interval counting the draws in between.
        """
        recent = history[: self.window]
        positions: dict[int, list[int]] = {n: [] for n in zone.numbers}
        for idx, draw in enumerate(recent):
            for num in draw.numbers(zone):
                positions[num].append(idx)

        gaps: dict[int, NumberGap] = {}
        for num, idxs in positions.items():
            if not idxs:
                gaps[num] = NumberGap(num, len(recent), 0.0, len(recent))
                continue
            current = idxs[0]
            intervals = [b - a - 1 for a, b in zip(idxs, idxs[1:])]
            avg = sum(intervals) / len(intervals) if intervals else 0.0
            longest = max([current, *intervals])
            gaps[num] = NumberGap(num, current, avg, longest)
        return gaps

    # ── Rankings ──────────────────────────────────────────────────

    def rank_due(self, history: list[Draw], zone: NumberZone) -> list[int]:
        """
        Numbers not drawn in the newest draw whose current gap is at least
        80% of their average gap, closest to the average first.
        """
        gaps = self.get_gaps(history, zone)
        due = [
            g for g in gaps.values()
            # a number drawn in the newest draw (gap 0) is never due, even when its average gap is 0
            if g.current_gap > 0 and g.current_gap >= g.avg_gap * 0.8
        ]
        due.sort(key=lambda g: (abs(g.current_gap - g.avg_gap), g.number))
        return [g.number for g in due]

    def rank_high_gap(self, history: list[Draw], zone: NumberZone) -> list[int]:
        gaps = self.get_gaps(history, zone)
        return sorted(gaps, key=lambda n: (-gaps[n].current_gap, n))

    def get_due_numbers(self, history: list[Draw], zone: NumberZone, top_n: int) -> list[int]:
        return sorted(self.rank_due(history, zone)[:top_n])

    def get_high_gap_numbers(self, history: list[Draw], zone: NumberZone, top_n: int) -> list[int]:
        return sorted(self.rank_high_gap(history, zone)[:top_n])
