"""
superlotto/domain/zone.py
The two independently drawn number pools.
"""
from __future__ import annotations

from enum import Enum


class NumberZone(Enum):
    """FRONT draws 5 of 1..35, BACK draws 2 of 1..12."""

    FRONT = ("front", 1, 35, 5)
    BACK = ("back", 1, 12, 2)

    def __init__(self, label: str, lo: int, hi: int, count: int):
        self.label = label
        self.lo = lo
        self.hi = hi
        self.count = count

    @property
    def pool_size(self) -> int:
        return self.hi - self.lo + 1

    @property
    def numbers(self) -> range:
        return range(self.lo, self.hi + 1)

    def contains(self, num: int) -> bool:
        return self.lo <= num <= self.hi
