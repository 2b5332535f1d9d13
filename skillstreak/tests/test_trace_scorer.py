import math

from skillstreak.features.scoring.trace import TraceScorer, score_trace
from skillstreak.models.scoring import Point

SEGMENT = [{"x": 0, "y": 0}, {"x": 10, "y": 0}]


class TestTraceScorer:
    def test_empty_trace_scores_zero(self):
        result = score_trace([], SEGMENT, 2000)
        assert result.accuracy == 0
        assert result.details["pathSimilarity"] == 0
        assert result.details["coverage"] == 0
        assert result.details["speedPenalty"] == 0
        assert result.details["feedback"] == "No drawing detected"

    def test_exact_match_at_ideal_speed_is_perfect(self):
        result = score_trace(SEGMENT, SEGMENT, 2000)
        assert result.accuracy == 100
        assert result.details["pathSimilarity"] == 100
        assert result.details["coverage"] == 100
        assert result.details["speedPenalty"] == 0
        assert result.details["idealTimeMs"] == 2000
        assert result.details["feedback"] == "Excellent! Perfect letter formation!"

    def test_too_fast_is_penalized(self):
        result = score_trace(SEGMENT, SEGMENT, 500)
        assert result.details["speedPenalty"] > 0
        assert result.accuracy == 95

    def test_too_slow_is_penalized(self):
        result = score_trace(SEGMENT, SEGMENT, 8000)
        assert result.details["speedPenalty"] == 5
        assert result.accuracy == 95

    def test_position_and_scale_do_not_matter(self):
        shifted = [{"x": 100, "y": 50}, {"x": 400, "y": 50}]
        assert score_trace(shifted, SEGMENT, 2000).accuracy == 100

    def test_partial_coverage_lowers_accuracy(self):
        template = [{"x": float(x), "y": 0.0} for x in range(0, 11)]
        trace = [{"x": 0, "y": 0}, {"x": 1, "y": 0}, {"x": 2, "y": 1}]
        result = score_trace(trace, template, 2000)
        assert result.details["coverage"] < 100
        assert 0 <= result.accuracy < 100

    def test_malformed_points_score_zero_with_error(self):
        result = score_trace([{"x": "a", "y": 1}], SEGMENT, 2000)
        assert result.accuracy == 0
        assert "error" in result.details

    def test_nan_coordinates_are_rejected(self):
        result = score_trace([{"x": math.nan, "y": 1}], SEGMENT, 2000)
        assert result.accuracy == 0
        assert "error" in result.details

    def test_non_finite_time_scores_zero(self):
        result = score_trace(SEGMENT, SEGMENT, math.inf)
        assert result.accuracy == 0
        assert result.details["timeSpentMs"] == 0

    def test_accuracy_stays_in_range_for_wild_input(self):
        trace = [{"x": 0, "y": 0}, {"x": 1e9, "y": -1e9}, {"x": 5, "y": 3}]
        result = score_trace(trace, SEGMENT, 10_000_000)
        assert 0 <= result.accuracy <= 100

    def test_idempotent(self):
        trace = [{"x": 0, "y": 1}, {"x": 4, "y": 2}, {"x": 9, "y": 0}]
        assert score_trace(trace, SEGMENT, 1200) == score_trace(trace, SEGMENT, 1200)


class TestTemplateCatalog:
    def test_scores_against_injected_template(self):
        scorer = TraceScorer({"i": [Point(0, 0), Point(0, 10)]})
        result = scorer.score_letter("I", [{"x": 5, "y": 0}, {"x": 5, "y": 100}], 2000)
        assert result.accuracy == 100
        assert scorer.letters == ["I"]

    def test_unknown_letter_scores_zero(self):
        result = TraceScorer().score_letter("Z", SEGMENT, 2000)
        assert result.accuracy == 0
        assert "Z" in result.details["error"]


class TestOversizedNumbers:
    def test_integer_coordinates_beyond_float_range_score_zero(self):
        trace = [{"x": 10**400, "y": 0}, {"x": 10, "y": 0}]
        result = score_trace(trace, SEGMENT, 2000)
        assert result.accuracy == 0
        assert "error" in result.details

    def test_time_beyond_float_range_scores_zero(self):
        result = score_trace(SEGMENT, SEGMENT, 10**400)
        assert result.accuracy == 0
        assert result.details["timeSpentMs"] == 0
