"""
superlotto/pipeline/draw_importer.py
Load historical draws from a JSONL file or URL and upsert them.

Accepted line shapes:
  {"issue": "25001", "date": "2025-01-01", "front": [..5..], "back": [..2..]}
  {"id": 25001, "date": "2025-01-01", "result": [..5 front.., ..2 back..]}
"""
from __future__ import annotations

import json
import random
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import requests

from superlotto.domain.draw import Draw, issue_key
from superlotto.utils.errors import InvalidDrawError
from superlotto.utils.logger import get_logger

log = get_logger("pipeline.importer")


def fetch_text(url: str, max_retries: int = 3, timeout: int = 15) -> str | None:
    """GET with retry + exponential backoff."""
    for attempt in range(1, max_retries + 1):
        try:
            log.debug(f"GET {url} (attempt {attempt})")
            resp = requests.get(url, timeout=timeout)
            resp.raise_for_status()
            return resp.text
        except requests.RequestException as exc:
            log.warning(f"Request failed (attempt {attempt}/{max_retries}): {exc}")
            if attempt < max_retries:
                time.sleep(2 ** attempt + random.uniform(0, 1))
    log.error(f"All {max_retries} attempts failed for {url}")
    return None


def read_source(source: str) -> str:
    if source.startswith(("http://", "https://")):
        text = fetch_text(source)
        if text is None:
            raise RuntimeError(f"Could not download draws from {source}")
        return text
    return Path(source).read_text(encoding="utf-8")


def parse_line(data: dict[str, Any]) -> Draw:
    issue = data.get("issue", data.get("id"))
    if issue is None:
        raise InvalidDrawError(f"Draw line has no issue: {data}")
    if "front" in data:
        front, back = data["front"], data.get("back", [])
    else:
        numbers = data.get("result", [])
        front, back = numbers[:5], numbers[5:7]
    return Draw.from_record({
        "issue": str(issue),
        "draw_date": data.get("date") or data.get("draw_date"),
        "front_numbers": front,
        "back_numbers": back,
    })


def parse_jsonl(lines: Iterable[str], min_issue: int = 0) -> tuple[list[Draw], list[str]]:
    """Returns (draws, rejected lines). Blank lines are ignored."""
    draws: list[Draw] = []
    rejected: list[str] = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            draw = parse_line(json.loads(line))
        except (json.JSONDecodeError, InvalidDrawError, KeyError, ValueError) as exc:
            log.warning(f"Skipping malformed line: {exc}")
            rejected.append(line)
            continue
        if min_issue and issue_key(draw.issue)[0] < min_issue:
            continue
        draws.append(draw)
    return draws, rejected


def import_draws(
    source: str,
    save: Callable[[Draw], None],
    min_issue: int = 0,
    dry_run: bool = False,
) -> dict[str, int]:
    draws, rejected = parse_jsonl(read_source(source).splitlines(), min_issue)
    log.info(f"[IMPORT] {source}: parsed={len(draws)} rejected={len(rejected)} dry_run={dry_run}")

    inserted = 0
    for draw in draws:
        if dry_run:
            log.info(f"[DRY RUN] Would insert: {draw.issue} {draw.front}+{draw.back}")
        else:
            save(draw)
        inserted += 1

    log.info(f"[DONE] inserted={inserted}")
    return {"parsed": len(draws), "inserted": inserted, "rejected": len(rejected)}
