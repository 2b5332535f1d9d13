import math

from skillstreak.features.integrity.checker import check_integrity, evaluate_integrity

NOW_MS = 1_700_000_000_000


def _evaluate(kind, sample, accuracy=50):
    return evaluate_integrity(kind, sample, accuracy, now_ms=NOW_MS)


class TestCommonRules:
    def test_unknown_type_fails(self):
        result = _evaluate("dance", {})
        assert not result.passed
        assert "dance" in result.reason

    def test_accuracy_out_of_range_fails(self):
        sample = {"guessedCount": 5, "imageId": "apples"}
        for accuracy in (-1, 100.5, math.nan, "90"):
            assert not _evaluate("count", sample, accuracy).passed

    def test_sample_must_be_an_object(self):
        assert not _evaluate("trace", [{"x": 1, "y": 1}]).passed

    def test_check_integrity_returns_bool(self):
        assert check_integrity("count", {"guessedCount": 5, "imageId": "apples"}, 100, now_ms=NOW_MS) is True
        assert check_integrity("count", {"guessedCount": -5, "imageId": "apples"}, 100, now_ms=NOW_MS) is False


class TestTraceIntegrity:
    def test_valid_trace(self):
        result = _evaluate("trace", {"letter": "A", "points": [{"x": 1, "y": 2}, {"x": 3.5, "y": 4}]})
        assert result.passed
        assert result.reason is None

    def test_trace_points_alias(self):
        assert _evaluate("trace", {"letter": "A", "tracePoints": [{"x": 1, "y": 2}]}).passed

    def test_empty_points_fail(self):
        assert not _evaluate("trace", {"letter": "A", "points": []}).passed

    def test_non_finite_coordinates_fail(self):
        for bad in (math.nan, math.inf, "1", None, True):
            assert not _evaluate("trace", {"letter": "A", "points": [{"x": bad, "y": 2}]}).passed

    def test_letter_must_be_single_character(self):
        points = [{"x": 1, "y": 2}]
        for letter in ("", "AB", None, 7):
            assert not _evaluate("trace", {"letter": letter, "points": points}).passed


class TestCountIntegrity:
    def test_valid_count(self):
        assert _evaluate("count", {"guessedCount": 5, "imageId": "apples"}).passed

    def test_range_bounds(self):
        assert _evaluate("count", {"guessedCount": 0, "imageId": "apples"}).passed
        assert _evaluate("count", {"guessedCount": 1000, "imageId": "apples"}).passed
        assert not _evaluate("count", {"guessedCount": -1, "imageId": "apples"}).passed
        assert not _evaluate("count", {"guessedCount": 1001, "imageId": "apples"}).passed

    def test_non_integer_guess_fails(self):
        for bad in (4.5, "5", None, True):
            assert not _evaluate("count", {"guessedCount": bad, "imageId": "apples"}).passed

    def test_image_id_required(self):
        assert not _evaluate("count", {"guessedCount": 5}).passed
        assert not _evaluate("count", {"guessedCount": 5, "imageId": ""}).passed


class TestRhythmIntegrity:
    def test_valid_rhythm(self):
        assert _evaluate("rhythm", {"bpm": 120, "taps": [0, 500, {"timestamp": 1000}]}).passed

    def test_bpm_range(self):
        assert _evaluate("rhythm", {"bpm": 60, "taps": []}).passed
        assert _evaluate("rhythm", {"bpm": 300, "taps": []}).passed
        assert not _evaluate("rhythm", {"bpm": 59, "taps": []}).passed
        assert not _evaluate("rhythm", {"bpm": 301, "taps": []}).passed
        assert not _evaluate("rhythm", {"taps": []}).passed

    def test_future_timestamps_fail(self):
        assert _evaluate("rhythm", {"bpm": 120, "taps": [NOW_MS + 60_000]}).passed
        assert not _evaluate("rhythm", {"bpm": 120, "taps": [NOW_MS + 60_001]}).passed

    def test_negative_or_fractional_timestamps_fail(self):
        assert not _evaluate("rhythm", {"bpm": 120, "taps": [-1]}).passed
        assert not _evaluate("rhythm", {"bpm": 120, "taps": [10.5]}).passed

    def test_taps_must_be_a_list(self):
        assert not _evaluate("rhythm", {"bpm": 120, "taps": "0,500"}).passed


class TestOversizedNumbers:
    def test_trace_coordinate_beyond_float_range_fails(self):
        sample = {"letter": "A", "points": [{"x": 10**400, "y": 0}]}
        assert check_integrity("trace", sample, 0, now_ms=NOW_MS) is False

    def test_count_guess_beyond_float_range_fails(self):
        assert not _evaluate("count", {"guessedCount": 10**400, "imageId": "apples"}).passed

    def test_tap_timestamp_beyond_float_range_fails(self):
        assert not _evaluate("rhythm", {"bpm": 120, "taps": [10**400]}).passed
