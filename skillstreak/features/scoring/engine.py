"""
Exercise Scoring Engine

Routes a run submission to the scorer for its exercise type.
Never raises on bad samples: unknown types and malformed runData score 0 with
an "error" detail, so a broken sample reads as "you scored 0", not a crash.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from skillstreak.features.scoring.count import CountScorer
from skillstreak.features.scoring.rhythm import RhythmScorer
from skillstreak.features.scoring.trace import TraceScorer
from skillstreak.models.scoring import ExerciseType, RunSubmission, ScoreResult, ScoringContext


def _first_present(sample: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in sample:
            return sample[key]
    return None


class ScoringEngine:
    """Stateless dispatcher over the three scorers."""

    def __init__(
        self,
        *,
        trace_scorer: Optional[TraceScorer] = None,
        count_scorer: Optional[CountScorer] = None,
        rhythm_scorer: Optional[RhythmScorer] = None,
    ):
        self.trace_scorer = trace_scorer or TraceScorer()
        self.count_scorer = count_scorer or CountScorer()
        self.rhythm_scorer = rhythm_scorer or RhythmScorer()

    def score(self, submission: RunSubmission, context: ScoringContext) -> ScoreResult:
        kind = ExerciseType.parse(submission.exercise_type)
        if kind is None:
            return ScoreResult.zero(f"Unknown exercise type {submission.exercise_type!r}")

        sample = submission.sample_data
        if not isinstance(sample, Mapping):
            return ScoreResult.zero("runData must be an object")

        if kind is ExerciseType.TRACE:
            return self._score_trace(sample, context, submission.time_spent_ms)
        if kind is ExerciseType.COUNT:
            return self._score_count(sample, context, submission.time_spent_ms)
        return self._score_rhythm(sample, context)

    def _score_trace(self, sample: Mapping[str, Any], context: ScoringContext, time_spent_ms: Any) -> ScoreResult:
        points = _first_present(sample, "points", "tracePoints")
        if not isinstance(points, (list, tuple)):
            return ScoreResult.zero("runData.points must be a list", pathSimilarity=0.0, coverage=0.0, speedPenalty=0.0)
        if context.template_points:
            return self.trace_scorer.score(points, context.template_points, time_spent_ms)
        return self.trace_scorer.score_letter(sample.get("letter", ""), points, time_spent_ms)

    def _score_count(self, sample: Mapping[str, Any], context: ScoringContext, time_spent_ms: Any) -> ScoreResult:
        guess = _first_present(sample, "guessedCount", "userCount")
        if context.correct_count is not None:
            return self.count_scorer.score(guess, context.correct_count, time_spent_ms)
        return self.count_scorer.score_image(sample.get("imageId", ""), guess, time_spent_ms)

    def _score_rhythm(self, sample: Mapping[str, Any], context: ScoringContext) -> ScoreResult:
        taps = _first_present(sample, "taps", "tapTimes")
        if not isinstance(taps, (list, tuple)):
            return ScoreResult.zero("runData.taps must be a list", correctTaps=0, extraTaps=0, timingAccuracy=0.0)
        return self.rhythm_scorer.score(taps, context.expected_taps, context.bpm)


_default_engine = ScoringEngine()


def score_submission(exercise_type: str, sample: Any, context: Optional[ScoringContext] = None, *, time_spent_ms: Any = 0) -> ScoreResult:
    """Score a raw sample with the default scorers (no catalog)."""
    submission = RunSubmission(exercise_type=exercise_type, exercise_id="", sample_data=sample, time_spent_ms=time_spent_ms)
    return _default_engine.score(submission, context or ScoringContext())
