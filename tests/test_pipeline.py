"""tests/test_pipeline.py"""
import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from superlotto.domain.draw import Draw
from superlotto.domain.methods import all_codes
from superlotto.domain.prizes import NO_PRIZE
from superlotto.domain.records import AccuracyStats, PredictionCandidate
from superlotto.domain.zone import NumberZone
from superlotto.models.model_loader import ModelLoader
from superlotto.pipeline.accuracy_tracker import composite_score, compute_accuracy, rank_accuracy
from superlotto.pipeline.analysis_report import AnalysisReport
from superlotto.pipeline.backtester import Backtester, summarize
from superlotto.pipeline.prediction_generator import PredictionGenerator, next_issue
from superlotto.pipeline.prediction_scorer import PredictionScorer
from superlotto.pipeline.result_checker import Verifier, count_hits
from superlotto.pipeline.weight_learner import WeightLearner
from superlotto.utils.config import DEFAULT_FIRST_ISSUE, get_analysis_params, get_prize_table
from superlotto.utils.errors import DrawNotResolvedError, UnknownMethodError
from superlotto.utils.repository import (
    InMemoryDrawRepository,
    InMemoryPredictionStore,
    InMemoryWeightStore,
)

WINNING_DRAW = Draw("25001", (1, 2, 3, 4, 5), (1, 2))

# newest first, no two draws share a number in the same zone slot
DISTINCT_HISTORY = [
    Draw("25003", (21, 22, 23, 24, 25), (5, 6)),
    Draw("25002", (11, 12, 13, 14, 15), (3, 4)),
    Draw("25001", (1, 2, 3, 4, 5), (1, 2)),
]


def verified(method, front_hits, back_hits, tier=NO_PRIZE):
    c = PredictionCandidate("25001", method, (1, 2, 3, 4, 5), (1, 2))
    c.mark_verified(front_hits, back_hits, tier)
    return c


class EchoPredictor:
    """Predicts the newest draw of whatever snapshot it is given."""

    def __init__(self, code):
        self.method_code = code
        self.method_name = code

    def predict(self, history):
        return history[0].combination

    def predict_multiple(self, history, count):
        return [self.predict(history)] * count


class FlakyWeightStore(InMemoryWeightStore):
    def __init__(self):
        super().__init__()
        self.fail_next_save = False

    def save_method_weights(self, rows):
        if self.fail_next_save:
            self.fail_next_save = False
            raise RuntimeError("weight store unavailable")
        super().save_method_weights(rows)


class TestCountHits:
    def test_front_and_back_counted_separately(self):
        assert count_hits(((1, 2, 3, 4, 5), (1, 2)), ((1, 2, 30, 31, 32), (2, 3))) == (2, 1)
        assert count_hits(((1, 2, 3, 4, 5), (1, 2)), WINNING_DRAW.combination) == (5, 2)


class TestVerifier:
    def setup_method(self):
        self.draws = InMemoryDrawRepository([WINNING_DRAW])
        self.predictions = InMemoryPredictionStore()
        self.store = InMemoryWeightStore()
        self.learner = WeightLearner(self.store)
        self.learner.bootstrap()
        self.verifier = Verifier(self.draws, self.predictions, self.learner, get_prize_table())

    def test_exact_match_is_first_prize(self):
        self.predictions.save_prediction(PredictionCandidate("25001", "HOT", (1, 2, 3, 4, 5), (1, 2)))

        result = self.verifier.verify("25001")

        assert len(result) == 1
        assert result[0].prize_tier == "PRIZE_1"
        assert (result[0].front_hits, result[0].back_hits) == (5, 2)
        hot = next(r for r in self.store.load_method_weights() if r.method_code == "HOT")
        assert hot.total_hits == 1
        assert hot.total_predictions == 1

    def test_verified_predictions_are_persisted(self):
        self.predictions.save_prediction(PredictionCandidate("25001", "HOT", (1, 2, 3, 4, 5), (1, 2)))
        self.predictions.save_prediction(PredictionCandidate("25001", "MARKOV", (6, 7, 8, 9, 10), (11, 12)))

        self.verifier.verify("25001")

        assert self.predictions.load_unverified_predictions("25001") == []
        tiers = {p.method: p.prize_tier for p in self.predictions.load_verified_predictions()}
        assert tiers == {"HOT": "PRIZE_1", "MARKOV": NO_PRIZE}
        stats = {s.method: s for s in self.predictions.load_accuracy_stats()}
        assert stats["HOT"].prize_counts["PRIZE_1"] == 1
        assert stats["HOT"].rank == 1
        assert stats["MARKOV"].total_prize_count == 0

    def test_weights_sum_to_one_after_verification(self):
        self.predictions.save_prediction(PredictionCandidate("25001", "BAYESIAN", (1, 2, 3, 10, 11), (1, 9)))
        self.verifier.verify("25001")
        weights = self.learner.get_weights()
        assert sum(weights.values()) == pytest.approx(1.0)
        assert weights["BAYESIAN"] == pytest.approx(1.0)

    def test_missing_draw(self):
        with pytest.raises(DrawNotResolvedError) as exc:
            self.verifier.verify("25999")
        assert "25999" in str(exc.value)

    def test_nothing_to_verify(self):
        before = self.learner.get_weights()
        assert self.verifier.verify("25001") == []
        assert self.learner.get_weights() == before

    def test_second_verification_is_empty(self):
        self.predictions.save_prediction(PredictionCandidate("25001", "HOT", (1, 2, 3, 4, 5), (1, 2)))
        self.verifier.verify("25001")
        assert self.verifier.verify("25001") == []
        hot = next(r for r in self.store.load_method_weights() if r.method_code == "HOT")
        assert hot.total_predictions == 1

    def test_failed_weight_save_leaves_predictions_pending(self):
        store = FlakyWeightStore()
        learner = WeightLearner(store)
        learner.bootstrap()
        verifier = Verifier(self.draws, self.predictions, learner, get_prize_table())
        self.predictions.save_prediction(PredictionCandidate("25001", "HOT", (1, 2, 3, 4, 5), (1, 2)))

        store.fail_next_save = True
        with pytest.raises(RuntimeError):
            verifier.verify("25001")
        assert len(self.predictions.load_unverified_predictions("25001")) == 1

        assert len(verifier.verify("25001")) == 1
        hot = next(r for r in store.load_method_weights() if r.method_code == "HOT")
        assert hot.total_hits == 1
        assert self.predictions.load_unverified_predictions("25001") == []

    def test_failed_accuracy_refresh_rolls_back(self):
        self.predictions.save_prediction(PredictionCandidate("25001", "HOT", (1, 2, 3, 4, 5), (1, 2)))
        self.predictions.save_prediction(PredictionCandidate("25001", "MARKOV", (6, 7, 8, 9, 10), (11, 12)))
        before = self.learner.get_weights()

        with patch.object(self.verifier.accuracy, "refresh", side_effect=RuntimeError("db down")):
            with pytest.raises(RuntimeError):
                self.verifier.verify("25001")

        pending = self.predictions.load_unverified_predictions("25001")
        assert len(pending) == 2
        assert all(p.prize_tier is None and p.verified_at is None for p in pending)
        assert self.learner.get_weights() == before
        hot = next(r for r in self.store.load_method_weights() if r.method_code == "HOT")
        assert hot.total_predictions == 0

        assert len(self.verifier.verify("25001")) == 2


class TestWeightLearner:
    def setup_method(self):
        self.store = InMemoryWeightStore()
        self.learner = WeightLearner(self.store, alpha=0.1)
        self.learner.bootstrap()

    def rows(self):
        return {r.method_code: r for r in self.store.load_method_weights()}

    def test_bootstrap_uniform(self):
        weights = self.learner.get_weights()
        assert set(weights) == set(all_codes())
        assert all(w == pytest.approx(0.1) for w in weights.values())

    def test_bootstrap_keeps_existing_rows(self):
        self.learner.adjust_batch([verified("HOT", 5, 2)])
        self.learner.bootstrap()
        assert self.rows()["HOT"].total_hits == 1

    def test_ema_update(self):
        self.learner.adjust_batch([verified("HOT", 3, 0), verified("HOT", 0, 1)])
        assert self.rows()["HOT"].hit_rate == pytest.approx(0.19)
        self.learner.adjust_batch([verified("HOT", 2, 0)])
        row = self.rows()["HOT"]
        assert row.hit_rate == pytest.approx(0.171)
        assert (row.total_predictions, row.total_hits) == (3, 2)

    def test_hit_thresholds(self):
        assert self.learner.is_hit(verified("HOT", 3, 0))
        assert self.learner.is_hit(verified("HOT", 0, 1))
        assert not self.learner.is_hit(verified("HOT", 2, 0))

    def test_weights_proportional_to_hit_rate(self):
        self.learner.adjust_batch([verified("HOT", 5, 0), verified("MARKOV", 5, 0), verified("MARKOV", 5, 0)])
        weights = self.learner.get_weights()
        assert sum(weights.values()) == pytest.approx(1.0)
        assert weights["MARKOV"] > weights["HOT"] > 0
        assert weights["ENSEMBLE"] == 0.0

    def test_unverified_predictions_skipped(self):
        pending = PredictionCandidate("25001", "HOT", (1, 2, 3, 4, 5), (1, 2))
        self.learner.adjust_batch([pending])
        assert self.rows()["HOT"].total_predictions == 0

    def test_missing_row_is_skipped(self):
        self.store.delete("MARKOV")
        updated = self.learner.adjust_batch([verified("MARKOV", 5, 2), verified("HOT", 5, 2)])
        assert "MARKOV" not in {r.method_code for r in updated}
        assert self.rows()["HOT"].total_hits == 1
        assert sum(r.weight for r in updated) == pytest.approx(1.0)

    def test_recalculate_all_with_zero_hit_rates(self):
        rows = self.learner.recalculate_all()
        assert sum(r.weight for r in rows) == pytest.approx(1.0)
        assert all(r.weight == pytest.approx(0.1) for r in rows)

    def test_reset_weights(self):
        self.learner.adjust_batch([verified("HOT", 5, 2)])
        self.learner.reset_weights()
        assert self.rows()["HOT"].total_hits == 0
        assert self.rows()["HOT"].weight == pytest.approx(0.1)

    def test_get_method_weights_sorted(self):
        self.learner.adjust_batch([verified("ML", 5, 2)])
        assert self.learner.get_method_weights()[0].method_code == "ML"

    @pytest.mark.parametrize("alpha", [0, -0.1, 1.5])
    def test_invalid_alpha(self, alpha):
        with pytest.raises(ValueError):
            WeightLearner(self.store, alpha=alpha)

    def test_concurrent_batches_do_not_lose_updates(self):
        batches = [[verified("HOT", 5, 2) for _ in range(10)] for _ in range(8)]
        barrier = threading.Barrier(4)

        def run(batch):
            barrier.wait(timeout=5)
            return self.learner.adjust_batch(batch)

        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(run, batches[:4]))
        for batch in batches[4:]:
            self.learner.adjust_batch(batch)
        assert self.rows()["HOT"].total_predictions == 80

    def test_from_config(self):
        learner = WeightLearner.from_config(self.store, {"ema_alpha": 0.5, "front_hit_threshold": 4})
        assert learner.alpha == 0.5
        assert learner.front_hit_threshold == 4
        assert learner.back_hit_threshold == 1


class TestAccuracy:
    def test_composite_score(self):
        stats = AccuracyStats("HOT", "Hot Numbers", total_predictions=100, avg_front_hits=1.0,
                              avg_back_hits=0.5, prize_rate=10.0, high_prize_count=1)
        assert composite_score(stats) == pytest.approx(23.75)

    def test_compute_accuracy(self):
        table = get_prize_table()
        preds = [verified("HOT", 5, 2, "PRIZE_1"), verified("HOT", 2, 1, "PRIZE_7"),
                 verified("HOT", 0, 0), PredictionCandidate("25002", "HOT", (1, 2, 3, 4, 5), (1, 2))]
        stats = compute_accuracy("HOT", preds, table)
        assert stats.method_name == "Hot Numbers"
        assert stats.total_predictions == 3
        assert stats.avg_front_hits == pytest.approx(7 / 3)
        assert stats.total_prize_count == 2
        assert stats.prize_rate == pytest.approx(200 / 3)
        assert stats.high_prize_count == 1
        assert stats.prize_counts["PRIZE_7"] == 1

    def test_empty_method(self):
        stats = compute_accuracy("ML", [], get_prize_table())
        assert stats.total_predictions == 0
        assert stats.composite_score == 0.0

    def test_rank_accuracy(self):
        stats = [
            AccuracyStats("A", "A", prize_rate=5.0, composite_score=3.0),
            AccuracyStats("B", "B", prize_rate=9.0, composite_score=1.0),
        ]
        assert [s.method for s in rank_accuracy(stats)] == ["A", "B"]
        by_prize = rank_accuracy(stats, "prize")
        assert [(s.method, s.rank) for s in by_prize] == [("B", 1), ("A", 2)]
        assert [s.method for s in rank_accuracy(stats, "prize", ascending=True)] == ["A", "B"]
        with pytest.raises(ValueError):
            rank_accuracy(stats, "luck")


class TestBacktester:
    def setup_method(self):
        self.table = get_prize_table()

    def test_single_method(self, history, fast_config):
        loader = ModelLoader(config=fast_config, seed=5)
        results = Backtester(InMemoryDrawRepository(history), loader.load, self.table).run("HOT", 10, 3)
        assert len(results) == 1
        r = results[0]
        assert r.method == "HOT"
        assert (r.total_issues, r.total_predictions, r.total_cost) == (10, 30, 60)
        assert r.profit_loss == r.total_payout - 60
        assert r.evaluation.split(":")[0] in ("Excellent", "Acceptable", "Poor")
        assert sum(r.prize_counts.values()) == r.total_prize_count

    def test_all_methods_sorted_by_roi(self, history, fast_config):
        loader = ModelLoader(config=fast_config, seed=5)
        results = Backtester(InMemoryDrawRepository(history), loader.load, self.table).run(None, 3, 2)
        assert {r.method for r in results} == set(all_codes())
        rois = [r.roi for r in results]
        assert rois == sorted(rois, reverse=True)
        rows = summarize(results)
        assert rows[0]["method"] == results[0].method
        assert "roi" in rows[0]

    def test_snapshot_mode_uses_latest_history(self):
        bt = Backtester(InMemoryDrawRepository(DISTINCT_HISTORY), EchoPredictor, self.table)
        r = bt.run("HOT", issue_count=1, predictions_per_issue=1)[0]
        assert r.prize_counts["PRIZE_1"] == 1
        assert r.best_prize == "PRIZE_1"
        assert r.best_issue == "25003"
        assert r.roi > 0
        assert r.evaluation.startswith("Excellent")
        assert r.details[0]["payout"] == 10_000_000

    def test_walk_forward_only_sees_older_draws(self):
        bt = Backtester(InMemoryDrawRepository(DISTINCT_HISTORY), EchoPredictor, self.table, walk_forward=True)
        r = bt.run("HOT", issue_count=2, predictions_per_issue=1)[0]
        assert r.total_prize_count == 0
        assert r.roi == pytest.approx(-100.0)
        assert r.evaluation.startswith("Poor")

    def test_thread_pool(self):
        bt = Backtester(InMemoryDrawRepository(DISTINCT_HISTORY), EchoPredictor, self.table, max_workers=4)
        results = bt.run(None, 2, 1)
        assert len(results) == len(all_codes())

    def test_unknown_method(self, history):
        bt = Backtester(InMemoryDrawRepository(history), EchoPredictor, self.table)
        with pytest.raises(UnknownMethodError):
            bt.run("CRYSTAL_BALL")

    @pytest.mark.parametrize("issues,per_issue", [(0, 5), (5, 0), (-1, 1)])
    def test_invalid_counts(self, history, issues, per_issue):
        bt = Backtester(InMemoryDrawRepository(history), EchoPredictor, self.table)
        with pytest.raises(ValueError):
            bt.run("HOT", issues, per_issue)

    def test_no_draws(self):
        assert Backtester(InMemoryDrawRepository(), EchoPredictor, self.table).run("HOT") == []


class TestPredictionScorer:
    def test_odd_even(self):
        assert PredictionScorer.odd_even_score(((1, 2, 3, 4, 5), (1, 2))) == 100.0
        assert PredictionScorer.odd_even_score(((1, 3, 5, 7, 8), (1, 2))) == 60.0
        assert PredictionScorer.odd_even_score(((1, 3, 5, 7, 9), (1, 2))) == 20.0

    def test_distribution(self, history):
        scorer = PredictionScorer(history)
        assert scorer.distribution_score(((1, 8, 15, 22, 29), (1, 2))) == 100.0
        assert scorer.distribution_score(((1, 2, 3, 4, 5), (1, 2))) == 20.0

    def test_empty_history_defaults(self):
        scorer = PredictionScorer([])
        combo = ((1, 8, 15, 22, 29), (1, 2))
        assert scorer.sum_score(combo) == 50.0
        assert scorer.correlation_score(combo) == 50.0
        assert scorer.hot_score(combo) == 0.0

    def test_scores_in_range_and_best(self, history):
        scorer = PredictionScorer(history)
        combos = [((1, 8, 15, 22, 29), (1, 2)), ((1, 3, 5, 7, 9), (11, 12))]
        for combo in combos:
            assert 0.0 <= scorer.score(combo) <= 100.0
        best, score = scorer.best(combos)
        assert score == max(scorer.score(c) for c in combos)
        assert best in combos
        with pytest.raises(ValueError):
            scorer.best([])


class TestPredictionGenerator:
    def setup_method(self):
        self.predictions = InMemoryPredictionStore()
        self.learner = WeightLearner(InMemoryWeightStore())
        self.learner.bootstrap()

    def generator(self, history, config):
        return PredictionGenerator(InMemoryDrawRepository(history), self.predictions, self.learner,
                                   config=config, seed=9)

    def test_next_issue(self):
        assert next_issue(None) == DEFAULT_FIRST_ISSUE
        assert next_issue(Draw("25099", (1, 2, 3, 4, 5), (1, 2))) == "25100"
        assert next_issue(Draw("0099", (1, 2, 3, 4, 5), (1, 2))) == "0100"
        with pytest.raises(ValueError):
            next_issue(Draw("25-A", (1, 2, 3, 4, 5), (1, 2)))

    def test_generate_all_methods(self, history, fast_config):
        stored = self.generator(history, fast_config).generate(count=2)
        assert len(stored) == 2 * len(all_codes())
        assert {c.target_issue for c in stored} == {"25201"}
        assert all(c.id is not None for c in stored)
        assert len(self.predictions.load_unverified_predictions("25201")) == len(stored)

    def test_generate_one_method(self, history, fast_config):
        stored = self.generator(history, fast_config).generate(count=3, method="markov", target_issue="30001")
        assert {c.method for c in stored} == {"MARKOV"}
        assert {c.target_issue for c in stored} == {"30001"}
        assert len({c.key for c in stored}) == 3

    def test_generate_on_empty_history(self, fast_config):
        stored = self.generator([], fast_config).generate(count=1, method="HOT")
        assert stored[0].target_issue == DEFAULT_FIRST_ISSUE

    def test_generate_rejects_bad_input(self, history, fast_config):
        gen = self.generator(history, fast_config)
        with pytest.raises(UnknownMethodError):
            gen.generate(method="NOPE")
        with pytest.raises(ValueError):
            gen.generate(count=0)

    def test_generate_best(self, history, fast_config):
        stored = self.generator(history, fast_config).generate_best(candidates_per_method=3)
        assert len(stored) == len(all_codes())
        scores = [c.score for c in stored]
        assert all(s is not None for s in scores)
        assert scores == sorted(scores, reverse=True)


class TestAnalysisReport:
    @pytest.fixture(autouse=True)
    def _report(self, seven_history):
        self.report = AnalysisReport(InMemoryDrawRepository(seven_history), get_analysis_params())

    def test_always_drawn_number(self):
        assert self.report.hot_numbers(NumberZone.FRONT, 1) == [7]
        assert 7 not in self.report.due_numbers(NumberZone.FRONT, 35)
        assert 7 not in self.report.high_gap_numbers(NumberZone.FRONT, 5)
        assert 7 in self.report.cold_numbers(NumberZone.FRONT, 35)
        assert 7 not in self.report.cold_numbers(NumberZone.FRONT, 17)

    def test_tables(self):
        freq = self.report.frequency_table(NumberZone.FRONT)
        assert len(freq) == 35
        assert freq[6]["number"] == 7
        assert freq[6]["percentage"] == 100.0
        gaps = {g["number"]: g for g in self.report.gap_table(NumberZone.BACK)}
        assert set(gaps) == set(range(1, 13))

    def test_rules_and_statistics(self):
        rules = self.report.association_rules(NumberZone.FRONT, limit=3)
        assert len(rules) <= 3
        stats = self.report.draw_statistics()
        assert stats["draws"] == 200
        assert self.report.association_network(NumberZone.BACK)["zone"] == "BACK"
