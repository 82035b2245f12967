"""
superlotto/domain/draw.py
Draw record with derived shape statistics, and combination helpers.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from superlotto.domain.zone import NumberZone
from superlotto.utils.errors import InvalidDrawError

# (front, back), both sorted ascending
Combination = tuple[tuple[int, ...], tuple[int, ...]]


def normalize_numbers(numbers: Iterable[int], zone: NumberZone) -> tuple[int, ...]:
    """Validate one zone's numbers and return them sorted."""
    nums = tuple(sorted(int(n) for n in numbers))
    if len(nums) != zone.count or len(set(nums)) != zone.count:
        raise InvalidDrawError(
            f"{zone.label} zone needs {zone.count} distinct numbers, got {list(nums)}"
        )
    if not all(zone.contains(n) for n in nums):
        raise InvalidDrawError(
            f"{zone.label} numbers must be in [{zone.lo}, {zone.hi}], got {list(nums)}"
        )
    return nums


def make_combination(front: Iterable[int], back: Iterable[int]) -> Combination:
    return normalize_numbers(front, NumberZone.FRONT), normalize_numbers(back, NumberZone.BACK)


def count_consecutive(numbers: Sequence[int]) -> int:
    """Adjacent pairs differing by exactly 1 (numbers sorted)."""
    return sum(1 for a, b in zip(numbers, numbers[1:]) if b - a == 1)


def ac_value(numbers: Sequence[int]) -> int:
    """Distinct positive pairwise differences minus (size - 1)."""
    diffs = {abs(a - b) for i, a in enumerate(numbers) for b in numbers[i + 1:]}
    return len(diffs) - (len(numbers) - 1)


def issue_key(issue: str) -> tuple[int, str]:
    """Sort key for issue ids: numeric when possible."""
    try:
        return int(issue), issue
    except (TypeError, ValueError):
        return 0, str(issue)


def sort_newest_first(draws: Iterable[Draw]) -> list[Draw]:
    return sorted(draws, key=lambda d: issue_key(d.issue), reverse=True)


@dataclass(frozen=True)
class Draw:
    issue: str
    front: tuple[int, ...]
    back: tuple[int, ...]
    draw_date: date | None = None

    front_sum: int = field(init=False)
    back_sum: int = field(init=False)
    front_odd_count: int = field(init=False)
    back_odd_count: int = field(init=False)
    front_consecutive: int = field(init=False)
    back_consecutive: int = field(init=False)
    ac_value: int = field(init=False)

    def __post_init__(self):
        front = normalize_numbers(self.front, NumberZone.FRONT)
        back = normalize_numbers(self.back, NumberZone.BACK)
        object.__setattr__(self, "issue", str(self.issue))
        object.__setattr__(self, "front", front)
        object.__setattr__(self, "back", back)
        object.__setattr__(self, "front_sum", sum(front))
        object.__setattr__(self, "back_sum", sum(back))
        object.__setattr__(self, "front_odd_count", sum(1 for n in front if n % 2))
        object.__setattr__(self, "back_odd_count", sum(1 for n in back if n % 2))
        object.__setattr__(self, "front_consecutive", count_consecutive(front))
        object.__setattr__(self, "back_consecutive", count_consecutive(back))
        object.__setattr__(self, "ac_value", ac_value(front))

    def numbers(self, zone: NumberZone) -> tuple[int, ...]:
        return self.front if zone is NumberZone.FRONT else self.back

    @property
    def combination(self) -> Combination:
        return self.front, self.back

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> Draw:
        """Build from a ``lottery_results`` row or an imported JSON line."""
        raw_date = row.get("draw_date")
        if isinstance(raw_date, str) and raw_date:
            raw_date = date.fromisoformat(raw_date[:10])
        return cls(
            issue=str(row["issue"]),
            front=tuple(row["front_numbers"]),
            back=tuple(row["back_numbers"]),
            draw_date=raw_date or None,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "issue": self.issue,
            "draw_date": self.draw_date.isoformat() if self.draw_date else None,
            "front_numbers": list(self.front),
            "back_numbers": list(self.back),
            "front_sum": self.front_sum,
            "back_sum": self.back_sum,
            "front_odd_count": self.front_odd_count,
            "back_odd_count": self.back_odd_count,
            "front_consecutive": self.front_consecutive,
            "back_consecutive": self.back_consecutive,
            "ac_value": self.ac_value,
        }
