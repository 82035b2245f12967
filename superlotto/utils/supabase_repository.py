"""
superlotto/utils/supabase_repository.py
Supabase-backed implementations of the storage contracts.
"""
from __future__ import annotations

from superlotto.domain.draw import Draw, sort_newest_first
from superlotto.domain.records import AccuracyStats, MethodWeight, PredictionCandidate
from superlotto.utils import supabase_client as db
from superlotto.utils.logger import get_logger

log = get_logger("supabase.repository")


class SupabaseDrawRepository:
    def fetch_recent_draws(self, limit: int) -> list[Draw]:
        rows = db.get_recent_results(limit=limit)
        log.debug(f"Loaded {len(rows)} draws (limit={limit})")
        return sort_newest_first(Draw.from_record(r) for r in rows)

    def fetch_draw_by_issue(self, issue: str) -> Draw | None:
        row = db.get_result_by_issue(str(issue))
        return Draw.from_record(row) if row else None

    def fetch_all_draws(self) -> list[Draw]:
        return [Draw.from_record(r) for r in db.get_all_results()]

    def save_draw(self, draw: Draw) -> None:
        db.upsert_lottery_result(draw.to_record())


class SupabaseWeightStore:
    def load_method_weights(self) -> list[MethodWeight]:
        return [MethodWeight.from_record(r) for r in db.get_method_weights()]

    def save_method_weights(self, rows: list[MethodWeight]) -> None:
        db.upsert_method_weights([r.to_record() for r in rows])


class SupabasePredictionStore:
    def load_unverified_predictions(self, issue: str) -> list[PredictionCandidate]:
        return [PredictionCandidate.from_record(r) for r in db.get_unverified_predictions(str(issue))]

    def save_prediction(self, candidate: PredictionCandidate) -> PredictionCandidate:
        row = db.insert_prediction(candidate.to_record())
        if row.get("id") is not None:
            candidate.id = str(row["id"])
        return candidate

    def mark_verified(self, candidate: PredictionCandidate) -> None:
        if candidate.id is None:
            raise ValueError("Cannot mark an unsaved prediction as verified.")
        db.update_prediction_verification(candidate.id, {
            "verified": candidate.verified,
            "front_hits": candidate.front_hits,
            "back_hits": candidate.back_hits,
            "prize_tier": candidate.prize_tier,
            "verified_at": candidate.verified_at.isoformat() if candidate.verified_at else None,
        })

    def load_verified_predictions(self, method: str | None = None) -> list[PredictionCandidate]:
        return [PredictionCandidate.from_record(r) for r in db.get_verified_predictions(method)]

    def save_accuracy_stats(self, rows: list[AccuracyStats]) -> None:
        db.upsert_accuracy_stats([r.to_record() for r in rows])

    def load_accuracy_stats(self) -> list[AccuracyStats]:
        return [AccuracyStats.from_record(r) for r in db.get_accuracy_stats()]
