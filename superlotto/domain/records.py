"""
superlotto/domain/records.py
Prediction, weight, rule and accuracy records.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from superlotto.domain.draw import normalize_numbers
from superlotto.domain.zone import NumberZone


@dataclass
class PredictionCandidate:
    target_issue: str
    method: str
    front: tuple[int, ...]
    back: tuple[int, ...]
    score: float | None = None
    id: str | None = None
    verified: bool = False
    front_hits: int | None = None
    back_hits: int | None = None
    prize_tier: str | None = None
    verified_at: datetime | None = None

    def __post_init__(self):
        self.front = normalize_numbers(self.front, NumberZone.FRONT)
        self.back = normalize_numbers(self.back, NumberZone.BACK)

    @property
    def key(self) -> tuple[tuple[int, ...], tuple[int, ...]]:
        return self.front, self.back

    def mark_verified(self, front_hits: int, back_hits: int, prize_tier: str) -> None:
        self.front_hits = front_hits
        self.back_hits = back_hits
        self.prize_tier = prize_tier
        self.verified = True
        self.verified_at = datetime.now(timezone.utc)

    def clear_verification(self) -> None:
        self.front_hits = None
        self.back_hits = None
        self.prize_tier = None
        self.verified = False
        self.verified_at = None

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> PredictionCandidate:
        verified_at = row.get("verified_at")
        if isinstance(verified_at, str):
            verified_at = datetime.fromisoformat(verified_at.replace("Z", "+00:00"))
        return cls(
            id=row.get("id"),
            target_issue=str(row["target_issue"]),
            method=row["method"],
            front=tuple(row["front_numbers"]),
            back=tuple(row["back_numbers"]),
            score=row.get("score"),
            verified=bool(row.get("verified", False)),
            front_hits=row.get("front_hits"),
            back_hits=row.get("back_hits"),
            prize_tier=row.get("prize_tier"),
            verified_at=verified_at,
        )

    def to_record(self) -> dict[str, Any]:
        record = {
            "target_issue": self.target_issue,
            "method": self.method,
            "front_numbers": list(self.front),
            "back_numbers": list(self.back),
            "score": self.score,
            "verified": self.verified,
            "front_hits": self.front_hits,
            "back_hits": self.back_hits,
            "prize_tier": self.prize_tier,
            "verified_at": self.verified_at.isoformat() if self.verified_at else None,
        }
        if self.id is not None:
            record["id"] = self.id
        return record


@dataclass
class MethodWeight:
    method_code: str
    method_name: str
    weight: float
    hit_rate: float = 0.0
    total_predictions: int = 0
    total_hits: int = 0

    @property
    def actual_hit_rate(self) -> float:
        if self.total_predictions == 0:
            return 0.0
        return self.total_hits / self.total_predictions

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> MethodWeight:
        return cls(
            method_code=row["method_code"],
            method_name=row.get("method_name") or row["method_code"],
            weight=float(row.get("weight") or 0.0),
            hit_rate=float(row.get("hit_rate") or 0.0),
            total_predictions=int(row.get("total_predictions") or 0),
            total_hits=int(row.get("total_hits") or 0),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "method_code": self.method_code,
            "method_name": self.method_name,
            "weight": self.weight,
            "hit_rate": self.hit_rate,
            "total_predictions": self.total_predictions,
            "total_hits": self.total_hits,
        }


@dataclass(frozen=True)
class AssociationRule:
    antecedent: frozenset[int]
    consequent: frozenset[int]
    support: float
    confidence: float
    lift: float
    zone_tag: str

    def is_strong(self, min_support: float, min_confidence: float) -> bool:
        return self.support >= min_support and self.confidence >= min_confidence and self.lift > 1

    def describe(self) -> str:
        ante = ",".join(f"{n:02d}" for n in sorted(self.antecedent))
        cons = ",".join(f"{n:02d}" for n in sorted(self.consequent))
        return (
            f"[{ante}] -> [{cons}] (support:{self.support * 100:.2f}%, "
            f"confidence:{self.confidence * 100:.2f}%, lift:{self.lift:.2f})"
        )


@dataclass
class AccuracyStats:
    method: str
    method_name: str
    total_predictions: int = 0
    avg_front_hits: float = 0.0
    avg_back_hits: float = 0.0
    prize_counts: dict[str, int] = field(default_factory=dict)
    total_prize_count: int = 0
    prize_rate: float = 0.0
    high_prize_count: int = 0
    composite_score: float = 0.0
    rank: int | None = None

    def to_record(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "method_name": self.method_name,
            "total_predictions": self.total_predictions,
            "avg_front_hits": round(self.avg_front_hits, 4),
            "avg_back_hits": round(self.avg_back_hits, 4),
            "prize_counts": dict(self.prize_counts),
            "total_prize_count": self.total_prize_count,
            "prize_rate": round(self.prize_rate, 4),
            "high_prize_count": self.high_prize_count,
            "composite_score": round(self.composite_score, 4),
            "rank": self.rank,
        }

    @classmethod
    def from_record(cls, row: dict[str, Any]) -> AccuracyStats:
        return cls(
            method=row["method"],
            method_name=row.get("method_name") or row["method"],
            total_predictions=int(row.get("total_predictions") or 0),
            avg_front_hits=float(row.get("avg_front_hits") or 0.0),
            avg_back_hits=float(row.get("avg_back_hits") or 0.0),
            prize_counts=dict(row.get("prize_counts") or {}),
            total_prize_count=int(row.get("total_prize_count") or 0),
            prize_rate=float(row.get("prize_rate") or 0.0),
            high_prize_count=int(row.get("high_prize_count") or 0),
            composite_score=float(row.get("composite_score") or 0.0),
            rank=row.get("rank"),
        )
