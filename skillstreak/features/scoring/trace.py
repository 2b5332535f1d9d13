"""
Trace Scorer

Pure, deterministic comparison of a drawn stroke path against a letter template.
No external calls, no randomness, no clock.

Scoring:
- Path similarity (60%): how close every drawn point lies to the template
- Coverage (40%): how much of the template the drawing actually visits
- Speed penalty: subtracted for bot-fast or stalled completion
- Final accuracy clamped to 0..100
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from skillstreak.features.scoring.feedback import feedback_for
from skillstreak.features.scoring.geometry import nearest_distance, normalize
from skillstreak.models.scoring import Point, ScoreResult, is_finite_number


def _round2(value: float) -> float:
    return round(value, 2)


class TraceScorer:
    """Trace scoring with an injected letter -> template catalog."""

    # Scoring weights
    PATH_WEIGHT = 0.6
    COVERAGE_WEIGHT = 0.4
    SIMILARITY_SCALE = 200.0  # avg distance of 0.5 in unit space floors similarity at 0
    COVERAGE_RADIUS = 0.1

    # Speed thresholds
    MIN_IDEAL_TIME_MS = 2000
    MS_PER_TEMPLATE_POINT = 50
    TOO_FAST_RATIO = 0.5
    TOO_FAST_WEIGHT = 20.0
    TOO_SLOW_RATIO = 3.0
    TOO_SLOW_WEIGHT = 5.0

    def __init__(self, templates: Optional[Mapping[str, Iterable[Any]]] = None):
        self._templates: Dict[str, Tuple[Point, ...]] = {
            letter.upper(): tuple(Point.from_raw(p) for p in points)
            for letter, points in (templates or {}).items()
        }

    @property
    def letters(self) -> List[str]:
        return sorted(self._templates)

    def template_for(self, letter: str) -> Optional[Tuple[Point, ...]]:
        return self._templates.get(letter.upper()) if isinstance(letter, str) else None

    def score_letter(self, letter: str, trace_points: Sequence[Any], time_spent_ms: float) -> ScoreResult:
        """Score a trace against the catalog template for letter."""
        template = self.template_for(letter)
        if template is None:
            return self._empty_result(time_spent_ms, 0, error=f"No template for letter {letter!r}")
        return self.score(trace_points, template, time_spent_ms)

    def score(self, trace_points: Sequence[Any], template_points: Sequence[Any], time_spent_ms: float) -> ScoreResult:
        """
        Score a trace path against a template path.

        Args:
            trace_points: Drawn points (Point or {"x", "y"} mappings), in drawing order
            template_points: Reference points for the letter
            time_spent_ms: Time the user spent drawing

        Returns:
            ScoreResult with pathSimilarity, coverage, speedPenalty, timeSpentMs, idealTimeMs
        """
        try:
            trace = [Point.from_raw(p) for p in (trace_points or [])]
            template = [Point.from_raw(p) for p in (template_points or [])]
        except (TypeError, ValueError, OverflowError) as exc:
            return self._empty_result(time_spent_ms, 0, error=f"Malformed trace sample: {exc}")

        if not is_finite_number(time_spent_ms):
            return self._empty_result(0, len(template), error="timeSpentMs must be a finite number")

        if not trace or not template:
            return self._empty_result(time_spent_ms, len(template))

        normalized_trace = normalize(trace)
        normalized_template = normalize(template)

        path_similarity = self._path_similarity(normalized_trace, normalized_template)
        coverage = self._coverage(normalized_trace, normalized_template)
        ideal_time_ms = self._ideal_time_ms(len(template))
        speed_penalty = self._speed_penalty(time_spent_ms, ideal_time_ms)

        base_accuracy = path_similarity * self.PATH_WEIGHT + coverage * self.COVERAGE_WEIGHT
        accuracy = _round2(max(0.0, min(100.0, base_accuracy - speed_penalty)))

        return ScoreResult(
            accuracy=accuracy,
            details={
                "pathSimilarity": _round2(path_similarity),
                "coverage": _round2(coverage),
                "speedPenalty": _round2(speed_penalty),
                "timeSpentMs": time_spent_ms,
                "idealTimeMs": ideal_time_ms,
                "feedback": feedback_for("trace", accuracy),
            },
        )

    def _empty_result(self, time_spent_ms: Any, template_size: int, error: Optional[str] = None) -> ScoreResult:
        details: Dict[str, Any] = {
            "pathSimilarity": 0.0,
            "coverage": 0.0,
            "speedPenalty": 0.0,
            "timeSpentMs": time_spent_ms if is_finite_number(time_spent_ms) else 0,
            "idealTimeMs": self._ideal_time_ms(template_size),
            "feedback": "No drawing detected",
        }
        if error:
            details["error"] = error
        return ScoreResult(accuracy=0.0, details=details)

    @classmethod
    def _ideal_time_ms(cls, template_size: int) -> int:
        return max(cls.MIN_IDEAL_TIME_MS, template_size * cls.MS_PER_TEMPLATE_POINT)

    @classmethod
    def _path_similarity(cls, trace: Sequence[Point], template: Sequence[Point]) -> float:
        """
        Path similarity, 0..100.

        Averages each drawn point's distance to the nearest template point, so
        drawing order does not matter but wandering away from the letter does.
        """
        total = sum(nearest_distance(point, template) for point in trace)
        average = total / len(trace)
        return max(0.0, 100.0 - average * cls.SIMILARITY_SCALE)

    @classmethod
    def _coverage(cls, trace: Sequence[Point], template: Sequence[Point]) -> float:
        """
        Coverage, 0..100: percentage of template points visited by the trace.

        Catches traces that hug one part of the letter and skip the rest.
        """
        covered = sum(1 for point in template if nearest_distance(point, trace) <= cls.COVERAGE_RADIUS)
        return covered / len(template) * 100.0

    @classmethod
    def _speed_penalty(cls, time_spent_ms: float, ideal_time_ms: int) -> float:
        ratio = time_spent_ms / ideal_time_ms
        if ratio < cls.TOO_FAST_RATIO:
            return (cls.TOO_FAST_RATIO - ratio) * cls.TOO_FAST_WEIGHT
        if ratio > cls.TOO_SLOW_RATIO:
            return (ratio - cls.TOO_SLOW_RATIO) * cls.TOO_SLOW_WEIGHT
        return 0.0


def score_trace(trace_points: Sequence[Any], template_points: Sequence[Any], time_spent_ms: float) -> ScoreResult:
    return TraceScorer().score(trace_points, template_points, time_spent_ms)
