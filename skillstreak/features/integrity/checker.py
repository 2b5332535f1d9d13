"""
Integrity Checker (anti-cheat)

Structural and range validation of the raw run sample. Runs independently of
the scorers: a run that fails is still scored and shown to the player, but it
earns zero XP.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Mapping, Optional

from skillstreak.models.scoring import ExerciseType, IntegrityResult, is_finite_number, is_integral

MIN_COUNT_GUESS = 0
MAX_COUNT_GUESS = 1000
MIN_BPM = 60
MAX_BPM = 300
FUTURE_SKEW_MS = 60_000


def _now_ms() -> int:
    return int(time.time() * 1000)


def _check_trace(sample: Mapping[str, Any], now_ms: int) -> IntegrityResult:
    points = sample.get("points", sample.get("tracePoints"))
    if not isinstance(points, (list, tuple)) or len(points) == 0:
        return IntegrityResult.fail("trace sample has no points")
    for point in points:
        if not isinstance(point, Mapping):
            return IntegrityResult.fail("trace point is not an object")
        if not is_finite_number(point.get("x")) or not is_finite_number(point.get("y")):
            return IntegrityResult.fail("trace point coordinates must be finite numbers")
    letter = sample.get("letter")
    if not isinstance(letter, str) or len(letter) != 1:
        return IntegrityResult.fail("target letter must be a single character")
    return IntegrityResult.ok()


def _check_count(sample: Mapping[str, Any], now_ms: int) -> IntegrityResult:
    guess = sample.get("guessedCount", sample.get("userCount"))
    if not is_integral(guess):
        return IntegrityResult.fail("guessed count must be an integer")
    if not MIN_COUNT_GUESS <= guess <= MAX_COUNT_GUESS:
        return IntegrityResult.fail(f"guessed count must be within [{MIN_COUNT_GUESS}, {MAX_COUNT_GUESS}]")
    image_id = sample.get("imageId")
    if not isinstance(image_id, str) or not image_id:
        return IntegrityResult.fail("imageId must be a non-empty string")
    return IntegrityResult.ok()


def _check_rhythm(sample: Mapping[str, Any], now_ms: int) -> IntegrityResult:
    bpm = sample.get("bpm")
    if not is_finite_number(bpm) or not MIN_BPM <= bpm <= MAX_BPM:
        return IntegrityResult.fail(f"bpm must be within [{MIN_BPM}, {MAX_BPM}]")
    taps = sample.get("taps", sample.get("tapTimes", []))
    if not isinstance(taps, (list, tuple)):
        return IntegrityResult.fail("taps must be a list")
    latest_allowed = now_ms + FUTURE_SKEW_MS
    for tap in taps:
        timestamp = tap.get("timestamp") if isinstance(tap, Mapping) else tap
        if not is_integral(timestamp):
            return IntegrityResult.fail("tap timestamps must be integers")
        if timestamp < 0 or timestamp > latest_allowed:
            return IntegrityResult.fail("tap timestamp outside the allowed window")
    return IntegrityResult.ok()


_CHECKS: Dict[ExerciseType, Callable[[Mapping[str, Any], int], IntegrityResult]] = {
    ExerciseType.TRACE: _check_trace,
    ExerciseType.COUNT: _check_count,
    ExerciseType.RHYTHM: _check_rhythm,
}


def evaluate_integrity(
    exercise_type: Any,
    raw_sample: Any,
    computed_accuracy: Any,
    *,
    now_ms: Optional[int] = None,
) -> IntegrityResult:
    """
    Validate a raw run sample and the accuracy computed for it.

    Args:
        exercise_type: "trace" | "count" | "rhythm"
        raw_sample: Submitted runData mapping, untouched by the scorers
        computed_accuracy: Accuracy the scorer produced
        now_ms: Wall clock in epoch milliseconds (defaults to time.time())

    Returns:
        IntegrityResult naming the first rule that failed, if any
    """
    kind = ExerciseType.parse(exercise_type)
    if kind is None:
        return IntegrityResult.fail(f"unknown exercise type {exercise_type!r}")
    if not is_finite_number(computed_accuracy) or not 0 <= computed_accuracy <= 100:
        return IntegrityResult.fail("accuracy outside [0, 100]")
    if not isinstance(raw_sample, Mapping):
        return IntegrityResult.fail("run sample must be an object")
    return _CHECKS[kind](raw_sample, _now_ms() if now_ms is None else now_ms)


def check_integrity(exercise_type: Any, raw_sample: Any, computed_accuracy: Any, *, now_ms: Optional[int] = None) -> bool:
    return evaluate_integrity(exercise_type, raw_sample, computed_accuracy, now_ms=now_ms).passed
