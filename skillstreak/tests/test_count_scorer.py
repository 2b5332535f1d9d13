from skillstreak.features.scoring.count import CountScorer, score_count


class TestCountScorer:
    def test_exact_answer(self):
        for time_spent in (0, 3000, 9999, 60000):
            result = score_count(5, 5, time_spent)
            assert result.accuracy == 100
            assert result.details["isExact"] is True
            assert result.details["feedback"] == "Perfect! You counted correctly!"

    def test_off_by_one_without_bonus(self):
        result = score_count(4, 5, 3000)
        assert result.accuracy == 85
        assert result.details["difference"] == 1
        assert result.details["speedBonus"] == 0
        assert result.details["feedback"] == "Very close! The correct answer is 5"

    def test_off_by_two(self):
        result = score_count(3, 5, 20000)
        assert result.accuracy == 70
        assert result.details["feedback"] == "Good try! The correct answer is 5"

    def test_linear_falloff_uses_floor_of_ten(self):
        assert score_count(0, 5, 20000).accuracy == 50

    def test_linear_falloff_relative_to_large_counts(self):
        assert score_count(16, 20, 20000).accuracy == 80

    def test_wild_guess_floors_at_zero(self):
        result = score_count(40, 5, 20000)
        assert result.accuracy == 0
        assert result.details["feedback"] == "Keep practicing! The correct answer is 5"

    def test_fast_exact_answer_records_speed_bonus(self):
        result = score_count(5, 5, 3000)
        assert result.details["speedBonus"] == 12
        assert result.accuracy == 100

    def test_bonus_threshold_is_configurable(self):
        scorer = CountScorer(speed_bonus_max_difference=1)
        assert scorer.score(4, 5, 3000).accuracy == 97
        assert scorer.score(4, 5, 12000).accuracy == 85

    def test_whole_floats_are_accepted(self):
        result = score_count(4.0, 5, 20000)
        assert result.details["userCount"] == 4
        assert result.accuracy == 85

    def test_non_integer_input_scores_zero(self):
        for bad in ("4", 4.5, None, True):
            result = score_count(bad, 5, 1000)
            assert result.accuracy == 0
            assert "error" in result.details

    def test_answer_key_lookup(self):
        scorer = CountScorer({"apples": 5})
        assert scorer.score_image("apples", 5, 20000).accuracy == 100
        missing = scorer.score_image("pears", 5, 20000)
        assert missing.accuracy == 0
        assert "pears" in missing.details["error"]

    def test_idempotent(self):
        assert score_count(7, 9, 4200) == score_count(7, 9, 4200)


class TestOversizedNumbers:
    def test_guess_beyond_float_range_scores_zero(self):
        result = score_count(10**400, 5, 2000)
        assert result.accuracy == 0
        assert "error" in result.details

    def test_time_beyond_float_range_scores_zero(self):
        assert score_count(5, 5, 10**400).accuracy == 0

    def test_huge_but_representable_guess_floors_at_zero(self):
        assert score_count(10**300, 5, 20000).accuracy == 0


def test_module_shortcut_accepts_bonus_threshold():
    assert score_count(4, 5, 3000, speed_bonus_max_difference=1).accuracy == 97
    assert score_count(4, 5, 3000).accuracy == 85
