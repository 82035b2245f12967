"""
superlotto/utils/supabase_client.py
Supabase client wrapper for draw, prediction, weight and accuracy tables.
"""
from __future__ import annotations

from typing import Any

from supabase import Client, create_client

from superlotto.utils.config import SUPABASE_KEY, SUPABASE_URL
from superlotto.utils.logger import get_logger

log = get_logger("supabase")

DRAWS_TABLE = "lottery_results"
PREDICTIONS_TABLE = "predictions"
WEIGHTS_TABLE = "method_weights"
ACCURACY_TABLE = "prediction_accuracy"

_client: Client | None = None


def get_client() -> Client:
    global _client
    if _client is None:
        if not SUPABASE_URL or not SUPABASE_KEY:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set to use the Supabase store.")
        _client = create_client(SUPABASE_URL, SUPABASE_KEY)
    return _client


def _rows(query) -> list[dict]:
    return query.execute().data or []


def _first(query) -> dict[str, Any]:
    rows = _rows(query)
    return rows[0] if rows else {}


def _table(name: str):
    return get_client().table(name)


# ── lottery_results ───────────────────────────────────────────────

def upsert_lottery_result(record: dict[str, Any]) -> dict[str, Any]:
    return _first(_table(DRAWS_TABLE).upsert(record, on_conflict="issue"))


def get_recent_results(limit: int = 100) -> list[dict]:
    # text order on issue, see DEFAULT_FIRST_ISSUE; draw_date may be null for imported rows
    return _rows(_table(DRAWS_TABLE).select("*").order("issue", desc=True).limit(limit))


def get_all_results() -> list[dict]:
    return _rows(_table(DRAWS_TABLE).select("*"))


def get_result_by_issue(issue: str) -> dict | None:
    # maybe_single() yields None instead of a response when nothing matches
    resp = _table(DRAWS_TABLE).select("*").eq("issue", issue).maybe_single().execute()
    return getattr(resp, "data", None) if resp else None


# ── predictions ───────────────────────────────────────────────────

def insert_prediction(record: dict[str, Any]) -> dict[str, Any]:
    return _first(_table(PREDICTIONS_TABLE).insert(record))


def get_unverified_predictions(issue: str) -> list[dict]:
    query = _table(PREDICTIONS_TABLE).select("*").eq("target_issue", issue)
    return _rows(query.eq("verified", False))


def get_verified_predictions(method: str | None = None) -> list[dict]:
    query = _table(PREDICTIONS_TABLE).select("*").eq("verified", True)
    if method:
        query = query.eq("method", method)
    return _rows(query)


def update_prediction_verification(prediction_id: str, fields: dict[str, Any]) -> dict:
    return _first(_table(PREDICTIONS_TABLE).update(fields).eq("id", prediction_id))


# ── method_weights ────────────────────────────────────────────────

def get_method_weights() -> list[dict]:
    return _rows(_table(WEIGHTS_TABLE).select("*").order("method_code"))


def upsert_method_weights(records: list[dict[str, Any]]) -> list[dict]:
    if not records:
        return []
    saved = _rows(_table(WEIGHTS_TABLE).upsert(records, on_conflict="method_code"))
    log.info(f"Saved {len(records)} method weight rows")
    return saved


# ── prediction_accuracy ───────────────────────────────────────────

def upsert_accuracy_stats(records: list[dict[str, Any]]) -> list[dict]:
    if not records:
        return []
    return _rows(_table(ACCURACY_TABLE).upsert(records, on_conflict="method"))


def get_accuracy_stats() -> list[dict]:
    return _rows(_table(ACCURACY_TABLE).select("*"))
