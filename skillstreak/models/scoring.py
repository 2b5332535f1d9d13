"""
Scoring domain model.

A run submission is untrusted sample data for one exercise attempt. The engine
turns it into a ScoreResult (accuracy 0..100 plus diagnostic details), which
the reward converter then maps to XP.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class ExerciseType(str, Enum):
    TRACE = "trace"
    COUNT = "count"
    RHYTHM = "rhythm"

    @classmethod
    def parse(cls, value: Any) -> Optional["ExerciseType"]:
        """Return the matching member, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


def is_finite_number(value: Any) -> bool:
    """True for int/float values that fit a finite float. Bools are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        # ints beyond float range
        return False


def is_integral(value: Any) -> bool:
    """True for ints within float range, and for floats holding a whole finite value."""
    if not is_finite_number(value):
        return False
    return isinstance(value, int) or value.is_integer()


@dataclass(frozen=True)
class Point:
    """A sample on a drawn path."""

    x: float
    y: float
    timestamp: Optional[int] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "Point":
        """Build a Point from a Point or a mapping with numeric x/y.

        Raises ValueError when the sample is not a usable point.
        """
        if isinstance(raw, Point):
            return raw
        if not isinstance(raw, Mapping):
            raise ValueError(f"point must be an object, got {type(raw).__name__}")
        x, y = raw.get("x"), raw.get("y")
        if not is_finite_number(x) or not is_finite_number(y):
            raise ValueError("point x/y must be finite numbers")
        timestamp = raw.get("timestamp")
        return cls(x=float(x), y=float(y), timestamp=timestamp if is_integral(timestamp) else None)


@dataclass(frozen=True)
class Tap:
    """One tap event. ExpectedTap grids use the same shape."""

    timestamp: int
    is_correct: bool = False

    @classmethod
    def from_raw(cls, raw: Any) -> "Tap":
        """Build a Tap from a Tap, a mapping with a timestamp, or a bare number."""
        if isinstance(raw, Tap):
            return raw
        if isinstance(raw, Mapping):
            timestamp = raw.get("timestamp")
            is_correct = bool(raw.get("isCorrect", raw.get("is_correct", False)))
        else:
            timestamp, is_correct = raw, False
        if not is_finite_number(timestamp):
            raise ValueError("tap timestamp must be a finite number")
        return cls(timestamp=timestamp, is_correct=is_correct)


@dataclass(frozen=True)
class ScoreResult:
    """The engine's sole output: accuracy in 0..100 and explanatory details."""

    accuracy: float
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"accuracy": self.accuracy, "details": dict(self.details)}

    @classmethod
    def zero(cls, error: Optional[str] = None, **details: Any) -> "ScoreResult":
        """Zero-accuracy result; malformed samples score 0 instead of raising."""
        payload = dict(details)
        if error:
            payload["error"] = error
        return cls(accuracy=0.0, details=payload)


@dataclass(frozen=True)
class RunSubmission:
    """Untrusted input for a single attempt. Consumed once, never mutated."""

    exercise_type: str
    exercise_id: str
    sample_data: Mapping[str, Any]
    time_spent_ms: int = 0


@dataclass(frozen=True)
class StreakState:
    """Consecutive-day activity, owned by the user record."""

    current_streak_days: int = 0
    last_activity_date: Optional[date] = None


@dataclass(frozen=True)
class IntegrityResult:
    """Tagged pass/fail outcome of the anti-cheat checks."""

    passed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.passed

    @classmethod
    def ok(cls) -> "IntegrityResult":
        return cls(passed=True)

    @classmethod
    def fail(cls, reason: str) -> "IntegrityResult":
        return cls(passed=False, reason=reason)


@dataclass(frozen=True)
class RewardResult:
    xp: int
    multiplier: float

    def to_dict(self) -> dict:
        return {"xp": self.xp, "multiplier": self.multiplier}


@dataclass(frozen=True)
class ScoringContext:
    """Trusted reference data resolved from the catalog for one exercise."""

    template_points: Tuple[Point, ...] = ()
    correct_count: Optional[int] = None
    expected_taps: Tuple[Tap, ...] = ()
    bpm: Optional[float] = None
