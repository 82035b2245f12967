"""
superlotto/utils/config.py
Load env vars and the engine parameter JSON file.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from superlotto.domain.prizes import PrizeTable

load_dotenv()

ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = ROOT / "config"
DEFAULT_CONFIG_FILE = "engine_params.json"

# ── Supabase ──────────────────────────────────────────────────────
SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

# ── Issue numbering ───────────────────────────────────────────────
# First issue of a fresh database (year 26, draw 001). Issues are fixed-width
# YYNNN strings, so text order in the database matches numeric order.
DEFAULT_FIRST_ISSUE: str = os.getenv("DEFAULT_FIRST_ISSUE", "26001")

_engine_config_cache: dict[str, Any] = {}


def get_config_path() -> Path:
    override = os.getenv("ENGINE_CONFIG_PATH")
    if override:
        return Path(override)
    return CONFIG_DIR / DEFAULT_CONFIG_FILE


def get_engine_config() -> dict[str, Any]:
    """Load and cache the engine parameter JSON."""
    path = get_config_path()
    key = str(path)
    if key in _engine_config_cache:
        return _engine_config_cache[key]
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        config = json.load(f)
    _engine_config_cache[key] = config
    return config


def get_analysis_params() -> dict[str, Any]:
    return get_engine_config()["analysis"]


def get_learning_params() -> dict[str, Any]:
    return get_engine_config()["learning"]


def get_predictor_params(name: str) -> dict[str, Any]:
    """Return the parameter block for one predictor (``{}`` if not configured)."""
    return dict(get_engine_config().get("predictors", {}).get(name, {}))


def get_prize_table() -> PrizeTable:
    return PrizeTable.from_config(get_engine_config()["prize_table"])
