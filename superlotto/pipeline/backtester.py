"""
superlotto/pipeline/backtester.py
Replay recent draws through prediction methods and report hit rates,
prize distribution and theoretical ROI.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from superlotto.domain.draw import Draw
from superlotto.domain.methods import PredictionMethod, all_codes
from superlotto.domain.prizes import PrizeTable
from superlotto.models.sampling import Predictor
from superlotto.pipeline.result_checker import count_hits
from superlotto.utils.logger import get_logger
from superlotto.utils.repository import DrawRepository

log = get_logger("pipeline.backtest")

MAX_WIN_DETAILS = 50

BACKTEST_METHODS = all_codes()


@dataclass
class BacktestResult:
    method: str
    method_name: str
    total_issues: int = 0
    total_predictions: int = 0
    total_front_hits: int = 0
    total_back_hits: int = 0
    prize_counts: dict[str, int] = field(default_factory=dict)
    total_cost: int = 0
    total_payout: int = 0
    best_issue: str | None = None
    best_prize: str | None = None
    details: list[dict[str, Any]] = field(default_factory=list)
    evaluation: str = ""

    @property
    def avg_front_hits(self) -> float:
        return self.total_front_hits / self.total_predictions if self.total_predictions else 0.0

    @property
    def avg_back_hits(self) -> float:
        return self.total_back_hits / self.total_predictions if self.total_predictions else 0.0

    @property
    def front_hit_rate(self) -> float:
        return self.avg_front_hits / 5 * 100

    @property
    def back_hit_rate(self) -> float:
        return self.avg_back_hits / 2 * 100

    @property
    def total_prize_count(self) -> int:
        return sum(self.prize_counts.values())

    @property
    def prize_rate(self) -> float:
        return self.total_prize_count * 100 / self.total_predictions if self.total_predictions else 0.0

    @property
    def profit_loss(self) -> int:
        return self.total_payout - self.total_cost

    @property
    def roi(self) -> float:
        return self.profit_loss * 100 / self.total_cost if self.total_cost else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "method_name": self.method_name,
            "total_issues": self.total_issues,
            "total_predictions": self.total_predictions,
            "avg_front_hits": round(self.avg_front_hits, 4),
            "avg_back_hits": round(self.avg_back_hits, 4),
            "front_hit_rate": round(self.front_hit_rate, 2),
            "back_hit_rate": round(self.back_hit_rate, 2),
            "prize_counts": dict(self.prize_counts),
            "total_prize_count": self.total_prize_count,
            "prize_rate": round(self.prize_rate, 2),
            "total_cost": self.total_cost,
            "total_payout": self.total_payout,
            "profit_loss": self.profit_loss,
            "roi": round(self.roi, 2),
            "best_issue": self.best_issue,
            "best_prize": self.best_prize,
            "details": list(self.details),
            "evaluation": self.evaluation,
        }


def evaluate(result: BacktestResult, high_prize_count: int) -> str:
    """One-line verdict from ROI, prize rate and high-tier wins."""
    if result.roi > 0:
        verdict = f"Excellent: ROI {result.roi:.2f}%, profitable over the test window."
    elif result.roi > -30:
        verdict = f"Acceptable: ROI {result.roi:.2f}%, limited losses."
    else:
        verdict = f"Poor: ROI {result.roi:.2f}%, heavy losses."

    if result.prize_rate > 10:
        verdict += f" High prize rate ({result.prize_rate:.2f}%)."
    elif result.prize_rate > 5:
        verdict += f" Moderate prize rate ({result.prize_rate:.2f}%)."
    else:
        verdict += f" Low prize rate ({result.prize_rate:.2f}%)."

    if high_prize_count > 0:
        verdict += f" Hit {high_prize_count} high-tier prize(s)."
    return verdict


class Backtester:
    """
    By default every issue is predicted from the same latest snapshot,
    i.e. the methods' current state. With ``walk_forward`` each issue is
    predicted only from the draws older than it.
    """

    def __init__(
        self,
        draws: DrawRepository,
        load_predictor: Callable[[str], Predictor],
        prize_table: PrizeTable,
        history_limit: int = 1000,
        walk_forward: bool = False,
        max_workers: int | None = None,
    ):
        self.draws = draws
        self.load_predictor = load_predictor
        self.prize_table = prize_table
        self.history_limit = history_limit
        self.walk_forward = walk_forward
        self.max_workers = max_workers

    def run(
        self,
        method: str | None = None,
        issue_count: int = 50,
        predictions_per_issue: int = 5,
    ) -> list[BacktestResult]:
        if issue_count <= 0 or predictions_per_issue <= 0:
            raise ValueError("issue_count and predictions_per_issue must be positive")
        codes = [PredictionMethod.from_code(method).code] if method else list(BACKTEST_METHODS)

        history = self.draws.fetch_recent_draws(max(self.history_limit, issue_count))
        if not history:
            log.warning("No draws available for backtesting")
            return []
        log.info(
            f"[BACKTEST] methods={','.join(codes)} issues={min(issue_count, len(history))} "
            f"per_issue={predictions_per_issue} walk_forward={self.walk_forward}"
        )

        predictors = {code: self.load_predictor(code) for code in codes}
        if self.max_workers and self.max_workers > 1 and len(codes) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = list(pool.map(
                    lambda code: self._run_method(predictors[code], history, issue_count, predictions_per_issue),
                    codes,
                ))
        else:
            results = [
                self._run_method(predictors[code], history, issue_count, predictions_per_issue)
                for code in codes
            ]

        results.sort(key=lambda r: r.roi, reverse=True)
        return results

    def _run_method(
        self,
        predictor: Predictor,
        history: list[Draw],
        issue_count: int,
        predictions_per_issue: int,
    ) -> BacktestResult:
        result = BacktestResult(method=predictor.method_code, method_name=predictor.method_name)
        tiers: dict[str, int] = {tier: 0 for tier in self.prize_table.tiers}
        best_rank = 0

        test_count = min(issue_count, len(history))
        # oldest to newest
        for idx in range(test_count - 1, -1, -1):
            actual = history[idx]
            snapshot = history[idx + 1:] if self.walk_forward else history
            combos = predictor.predict_multiple(snapshot, predictions_per_issue)
            result.total_issues += 1

            for combo in combos:
                front_hits, back_hits = count_hits(combo, actual.combination)
                tier = self.prize_table.tier_for(front_hits, back_hits)
                result.total_predictions += 1
                result.total_front_hits += front_hits
                result.total_back_hits += back_hits
                result.total_cost += self.prize_table.cost_per_combination
                if not self.prize_table.is_winning(tier):
                    continue

                tiers[tier] += 1
                result.total_payout += self.prize_table.payout(tier)
                rank = self.prize_table.rank(tier)
                if rank > best_rank:
                    best_rank = rank
                    result.best_issue = actual.issue
                    result.best_prize = tier
                result.details.append({
                    "issue": actual.issue,
                    "front": list(combo[0]),
                    "back": list(combo[1]),
                    "actual_front": list(actual.front),
                    "actual_back": list(actual.back),
                    "front_hits": front_hits,
                    "back_hits": back_hits,
                    "prize_tier": tier,
                    "payout": self.prize_table.payout(tier),
                })

        result.details.sort(key=lambda d: self.prize_table.rank(d["prize_tier"]), reverse=True)
        result.details = result.details[:MAX_WIN_DETAILS]
        result.prize_counts = tiers
        high = sum(c for t, c in tiers.items() if self.prize_table.is_high_prize(t))
        result.evaluation = evaluate(result, high)
        log.info(
            f"{result.method}: {result.total_predictions} predictions, "
            f"prize rate {result.prize_rate:.2f}%, ROI {result.roi:.2f}%"
        )
        return result


def summarize(results: Iterable[BacktestResult]) -> list[dict[str, Any]]:
    return [r.to_dict() for r in results]
