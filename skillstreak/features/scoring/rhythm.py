"""
Rhythm Scorer

Greedy nearest-available matching of user taps to an expected beat grid.
User taps need not line up index-to-index with the grid and need not be sorted.
For each expected tap, in grid order, the closest unclaimed user tap within
tolerance is claimed; ties go to the first tap found. This is not a
minimum-cost bipartite assignment.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from skillstreak.features.scoring.feedback import feedback_for
from skillstreak.models.scoring import ScoreResult, Tap, is_finite_number


class RhythmScorer:
    TOLERANCE_FRACTION = 0.15  # of one beat interval
    COMPLETION_WEIGHT = 0.7
    TIMING_WEIGHT = 0.3
    EXTRA_TAP_PENALTY = 5.0

    @classmethod
    def score(cls, taps: Sequence[Any], expected_taps: Sequence[Any], bpm: float) -> ScoreResult:
        try:
            user_taps = [Tap.from_raw(t) for t in (taps or [])]
            grid = [Tap.from_raw(t) for t in (expected_taps or [])]
        except (TypeError, ValueError, OverflowError) as exc:
            return cls._empty_result(error=f"Malformed rhythm sample: {exc}")

        if not is_finite_number(bpm) or bpm <= 0:
            return cls._empty_result(error="bpm must be a positive number")

        if not user_taps or not grid:
            return cls._empty_result(total_taps=len(user_taps), expected=len(grid))

        tolerance = cls.tolerance_for(bpm)
        correct_taps, total_offset = cls._match(user_taps, grid, tolerance)

        completion_ratio = correct_taps / len(grid)
        average_offset = total_offset / correct_taps if correct_taps else tolerance
        timing_accuracy = max(0.0, 100.0 - (average_offset / tolerance) * 100.0)

        extra_taps = len(user_taps) - correct_taps
        extra_penalty = extra_taps * cls.EXTRA_TAP_PENALTY

        base = (completion_ratio * cls.COMPLETION_WEIGHT + (timing_accuracy / 100.0) * cls.TIMING_WEIGHT) * 100.0
        accuracy = round(max(0.0, min(100.0, base - extra_penalty)), 2)

        return ScoreResult(
            accuracy=accuracy,
            details={
                "correctTaps": correct_taps,
                "totalTaps": len(user_taps),
                "expectedTaps": len(grid),
                "timingAccuracy": round(timing_accuracy, 2),
                "averageOffset": round(average_offset, 2),
                "missedTaps": len(grid) - correct_taps,
                "extraTaps": extra_taps,
                "tolerance": round(tolerance, 2),
                "feedback": feedback_for("rhythm", accuracy),
            },
        )

    @classmethod
    def tolerance_for(cls, bpm: float) -> float:
        beat_interval = 60000.0 / bpm
        return beat_interval * cls.TOLERANCE_FRACTION

    @staticmethod
    def _match(user_taps: Sequence[Tap], grid: Sequence[Tap], tolerance: float):
        claimed = set()
        correct_taps = 0
        total_offset = 0.0

        for expected in grid:
            best_index: Optional[int] = None
            best_offset = float("inf")
            for index, tap in enumerate(user_taps):
                if index in claimed:
                    continue
                offset = abs(tap.timestamp - expected.timestamp)
                if offset <= tolerance and offset < best_offset:
                    best_index = index
                    best_offset = offset
            if best_index is not None:
                claimed.add(best_index)
                correct_taps += 1
                total_offset += best_offset

        return correct_taps, total_offset

    @staticmethod
    def _empty_result(total_taps: int = 0, expected: int = 0, error: Optional[str] = None) -> ScoreResult:
        return ScoreResult.zero(
            error,
            correctTaps=0,
            totalTaps=total_taps,
            expectedTaps=expected,
            timingAccuracy=0.0,
            averageOffset=0.0,
            missedTaps=expected,
            extraTaps=total_taps,
            tolerance=0.0,
            feedback="No taps detected",
        )


def build_expected_taps(bpm: float, pattern: Sequence[int], start_ms: int = 0) -> List[Tap]:
    """
    Expand a beat pattern into the expected tap grid.

    Each pattern slot is one beat; a truthy slot expects a tap on that beat.
    >>> [t.timestamp for t in build_expected_taps(120, [1, 0, 1, 1])]
    [0, 1000, 1500]
    """
    if not is_finite_number(bpm) or bpm <= 0:
        raise ValueError("bpm must be a positive number")
    beat_interval = 60000.0 / bpm
    return [
        Tap(timestamp=int(round(start_ms + slot * beat_interval)), is_correct=True)
        for slot, hit in enumerate(pattern)
        if hit
    ]


def score_rhythm(taps: Sequence[Any], expected_taps: Sequence[Any], bpm: float) -> ScoreResult:
    return RhythmScorer.score(taps, expected_taps, bpm)
