"""tests/test_domain.py"""
from datetime import date

import pytest

from superlotto.domain.draw import Draw, ac_value, count_consecutive, make_combination, sort_newest_first
from superlotto.domain.methods import PredictionMethod, all_codes
from superlotto.domain.prizes import NO_PRIZE
from superlotto.domain.records import AssociationRule, MethodWeight, PredictionCandidate
from superlotto.domain.zone import NumberZone
from superlotto.utils.config import get_prize_table
from superlotto.utils.errors import InvalidDrawError, UnknownMethodError


class TestNumberZone:
    def test_front_and_back_shapes(self):
        assert (NumberZone.FRONT.lo, NumberZone.FRONT.hi, NumberZone.FRONT.count) == (1, 35, 5)
        assert (NumberZone.BACK.lo, NumberZone.BACK.hi, NumberZone.BACK.count) == (1, 12, 2)
        assert NumberZone.FRONT.pool_size == 35
        assert list(NumberZone.BACK.numbers) == list(range(1, 13))

    def test_contains(self):
        assert NumberZone.BACK.contains(12)
        assert not NumberZone.BACK.contains(13)
        assert not NumberZone.FRONT.contains(0)


class TestDraw:
    def test_numbers_are_sorted(self):
        d = Draw("25001", (33, 1, 14, 2, 20), (9, 3))
        assert d.front == (1, 2, 14, 20, 33)
        assert d.back == (3, 9)

    def test_derived_fields(self):
        d = Draw("25001", (1, 2, 3, 10, 35), (5, 6))
        assert d.front_sum == 51
        assert d.back_sum == 11
        assert d.front_odd_count == 3  # 1, 3, 35
        assert d.back_odd_count == 1
        assert d.front_consecutive == 2  # 1-2, 2-3
        assert d.back_consecutive == 1

    def test_ac_value(self):
        # diffs of 1,2,3,10,35: {1,2,9,34,8,33,7,32,25} → 9 - 4
        assert ac_value((1, 2, 3, 10, 35)) == 5
        assert count_consecutive((4, 5, 6, 7, 8)) == 4

    @pytest.mark.parametrize("front,back", [
        ((1, 2, 3, 4), (1, 2)),          # too few
        ((1, 1, 2, 3, 4), (1, 2)),       # duplicate
        ((1, 2, 3, 4, 36), (1, 2)),      # out of range
        ((1, 2, 3, 4, 5), (1, 13)),      # back out of range
        ((1, 2, 3, 4, 5), (4, 4)),       # back duplicate
    ])
    def test_invalid_draw_rejected(self, front, back):
        with pytest.raises(InvalidDrawError):
            Draw("25001", front, back)

    def test_record_round_trip_keeps_date(self):
        d = Draw("25010", (5, 9, 17, 22, 31), (2, 11), draw_date=date(2025, 1, 27))
        row = d.to_record()
        assert row["front_numbers"] == [5, 9, 17, 22, 31]
        assert row["draw_date"] == "2025-01-27"
        assert Draw.from_record(row) == d

    def test_from_record_accepts_timestamp_string(self):
        row = {"issue": 25010, "front_numbers": [5, 9, 17, 22, 31], "back_numbers": [2, 11],
               "draw_date": "2025-01-27T20:30:00+00:00"}
        d = Draw.from_record(row)
        assert d.issue == "25010"
        assert d.draw_date == date(2025, 1, 27)

    def test_sort_newest_first(self):
        draws = [
            Draw("25002", (1, 2, 3, 4, 5), (1, 2)),
            Draw("25010", (1, 2, 3, 4, 5), (1, 2)),
            Draw("25009", (1, 2, 3, 4, 5), (1, 2)),
        ]
        assert [d.issue for d in sort_newest_first(draws)] == ["25010", "25009", "25002"]

    def test_make_combination(self):
        assert make_combination([5, 4, 3, 2, 1], [12, 1]) == ((1, 2, 3, 4, 5), (1, 12))


class TestPredictionMethod:
    def test_from_code_is_case_insensitive(self):
        assert PredictionMethod.from_code("markov") is PredictionMethod.MARKOV
        assert PredictionMethod.from_code(" Hot ") is PredictionMethod.HOT

    def test_unknown_code_lists_valid_codes(self):
        with pytest.raises(UnknownMethodError) as exc:
            PredictionMethod.from_code("ORACLE")
        assert "ORACLE" in str(exc.value)
        assert exc.value.valid_codes == all_codes()
        assert "GRADIENT_BOOST" in str(exc.value)

    def test_unknown_method_is_value_error(self):
        with pytest.raises(ValueError):
            PredictionMethod.from_code("")

    def test_ten_registered_methods(self):
        assert len(all_codes()) == 10
        assert len(set(all_codes())) == 10


class TestPrizeTable:
    def setup_method(self):
        self.table = get_prize_table()

    @pytest.mark.parametrize("front_hits,back_hits,tier", [
        (5, 2, "PRIZE_1"),
        (5, 1, "PRIZE_2"),
        (5, 0, "PRIZE_3"),
        (4, 2, "PRIZE_3"),
        (4, 1, "PRIZE_4"),
        (4, 0, "PRIZE_5"),
        (3, 2, "PRIZE_5"),
        (3, 1, "PRIZE_6"),
        (2, 2, "PRIZE_6"),
        (3, 0, "PRIZE_7"),
        (2, 1, "PRIZE_7"),
        (1, 2, "PRIZE_7"),
        (0, 2, "PRIZE_7"),
        (1, 0, NO_PRIZE),
        (2, 0, NO_PRIZE),
        (0, 1, NO_PRIZE),
        (0, 0, NO_PRIZE),
    ])
    def test_tier_lookup(self, front_hits, back_hits, tier):
        assert self.table.tier_for(front_hits, back_hits) == tier

    def test_payouts(self):
        assert self.table.payout("PRIZE_1") == 10_000_000
        assert self.table.payout("PRIZE_7") == 5
        assert self.table.payout(NO_PRIZE) == 0
        assert self.table.cost_per_combination == 2

    def test_rank_and_high_prize(self):
        assert self.table.rank("PRIZE_1") > self.table.rank("PRIZE_2") > self.table.rank("PRIZE_7") > 0
        assert self.table.rank(NO_PRIZE) == 0
        assert self.table.rank(None) == 0
        assert self.table.is_high_prize("PRIZE_3")
        assert not self.table.is_high_prize("PRIZE_4")
        assert not self.table.is_winning(NO_PRIZE)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            self.table.matches[(0, 0)] = "PRIZE_1"


class TestRecords:
    def test_candidate_validates_numbers(self):
        with pytest.raises(InvalidDrawError):
            PredictionCandidate("25001", "HOT", (1, 2, 3, 4), (1, 2))

    def test_candidate_mark_verified(self):
        c = PredictionCandidate("25001", "HOT", (5, 4, 3, 2, 1), (2, 1))
        c.mark_verified(5, 2, "PRIZE_1")
        assert c.verified
        assert c.key == ((1, 2, 3, 4, 5), (1, 2))
        assert c.verified_at is not None
        restored = PredictionCandidate.from_record({**c.to_record(), "id": "7"})
        assert restored.id == "7"
        assert restored.prize_tier == "PRIZE_1"
        assert restored.verified_at == c.verified_at

    def test_candidate_clear_verification(self):
        c = PredictionCandidate("25001", "HOT", (1, 2, 3, 4, 5), (1, 2))
        c.mark_verified(3, 0, "PRIZE_7")
        c.clear_verification()
        assert not c.verified
        assert (c.front_hits, c.back_hits, c.prize_tier, c.verified_at) == (None, None, None, None)

    def test_method_weight_actual_hit_rate(self):
        assert MethodWeight("HOT", "Hot Numbers", 0.1).actual_hit_rate == 0.0
        assert MethodWeight("HOT", "Hot Numbers", 0.1, total_predictions=4, total_hits=1).actual_hit_rate == 0.25

    def test_rule_describe(self):
        rule = AssociationRule(frozenset({7}), frozenset({12}), 0.05, 0.5, 1.25, "FRONT")
        assert rule.describe() == "[07] -> [12] (support:5.00%, confidence:50.00%, lift:1.25)"
        assert rule.is_strong(0.02, 0.3)
        assert not rule.is_strong(0.1, 0.3)
