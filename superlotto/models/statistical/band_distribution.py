"""
superlotto/models/statistical/band_distribution.py
Split the front pool into equal-width bands and measure band coverage.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from superlotto.domain.draw import Draw
from superlotto.domain.zone import NumberZone

# 1-7, 8-14, 15-21, 22-28, 29-35
DEFAULT_BANDS: dict[str, tuple[int, int]] = {
    "1-7": (1, 7),
    "8-14": (8, 14),
    "15-21": (15, 21),
    "22-28": (22, 28),
    "29-35": (29, 35),
}


class BandAnalyzer:
    """Analyze how front numbers spread across low-to-high bands."""

    def __init__(self, bands: dict[str, tuple[int, int]] | None = None):
        self.bands = dict(bands or DEFAULT_BANDS)

    def get_band(self, num: int) -> str | None:
        for band, (lo, hi) in self.bands.items():
            if lo <= num <= hi:
                return band
        return None

    def band_counts(self, numbers: Iterable[int]) -> dict[str, int]:
        counter = Counter(self.get_band(n) for n in numbers)
        return {band: counter.get(band, 0) for band in self.bands}

    def covered_bands(self, numbers: Iterable[int]) -> int:
        return sum(1 for c in self.band_counts(numbers).values() if c > 0)

    def get_band_distribution(self, history: list[Draw]) -> dict[str, dict[int, int]]:
        """
        For each band, how many draws had 0, 1, 2, ... front numbers in it.
        Returns {band: {numbers_in_band: draw_count}}.
        """
        dist: dict[str, Counter] = {band: Counter() for band in self.bands}
        for draw in history:
            for band, count in self.band_counts(draw.numbers(NumberZone.FRONT)).items():
                dist[band][count] += 1
        return {band: dict(sorted(c.items())) for band, c in dist.items()}

    def get_band_share(self, history: list[Draw]) -> dict[str, float]:
        """Fraction of all front picks falling in each band."""
        counter: Counter = Counter()
        total = 0
        for draw in history:
            for num in draw.numbers(NumberZone.FRONT):
                band = self.get_band(num)
                if band:
                    counter[band] += 1
                    total += 1
        if total == 0:
            even = 1.0 / len(self.bands)
            return {b: even for b in self.bands}
        return {b: counter.get(b, 0) / total for b in self.bands}
