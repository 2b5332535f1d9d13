"""Count Scorer: a guessed object count against the ground truth."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from skillstreak.features.scoring.feedback import feedback_for
from skillstreak.models.scoring import ScoreResult, is_finite_number, is_integral


class CountScorer:
    """
    Tiered count scoring.

    Small miscounts happen even to attentive kids, so near misses earn far more
    than their raw percentage error: exact 100, off by one 85, off by two 70,
    then a linear falloff relative to max(correct, 10).
    """

    EXACT_SCORE = 100.0
    OFF_BY_ONE_SCORE = 85.0
    OFF_BY_TWO_SCORE = 70.0
    FALLOFF_FLOOR = 10

    SPEED_BONUS_MAX = 15.0
    SPEED_BONUS_WINDOW_MS = 10_000

    def __init__(self, answer_key: Optional[Mapping[str, int]] = None, *, speed_bonus_max_difference: int = 0):
        self._answer_key: Dict[str, int] = dict(answer_key or {})
        self.speed_bonus_max_difference = speed_bonus_max_difference

    def correct_count_for(self, image_id: str) -> Optional[int]:
        if not isinstance(image_id, str):
            return None
        return self._answer_key.get(image_id)

    def score_image(self, image_id: str, user_count: Any, time_spent_ms: float) -> ScoreResult:
        """Score a guess against the answer key entry for image_id."""
        correct = self.correct_count_for(image_id)
        if correct is None:
            return self._invalid(f"No answer for image {image_id!r}")
        return self.score(user_count, correct, time_spent_ms)

    def score(self, user_count: Any, correct_count: Any, time_spent_ms: float) -> ScoreResult:
        if not is_integral(user_count) or not is_integral(correct_count):
            return self._invalid("Counts must be whole numbers")
        user_count, correct_count = int(user_count), int(correct_count)
        if not is_finite_number(time_spent_ms):
            return self._invalid("timeSpentMs must be a finite number")

        difference = abs(user_count - correct_count)
        base = self._base_accuracy(difference, correct_count)
        speed_bonus = self._speed_bonus(difference, time_spent_ms)
        accuracy = round(max(0.0, min(100.0, base + speed_bonus)), 2)

        return ScoreResult(
            accuracy=accuracy,
            details={
                "userCount": user_count,
                "correctCount": correct_count,
                "difference": difference,
                "isExact": difference == 0,
                "speedBonus": round(speed_bonus, 2),
                "timeSpentMs": time_spent_ms,
                "feedback": feedback_for("count", accuracy, correct_count=correct_count, exact=difference == 0),
            },
        )

    @classmethod
    def _base_accuracy(cls, difference: int, correct_count: int) -> float:
        if difference == 0:
            return cls.EXACT_SCORE
        if difference == 1:
            return cls.OFF_BY_ONE_SCORE
        if difference <= 2:
            return cls.OFF_BY_TWO_SCORE
        return max(0.0, 100.0 - (difference / max(correct_count, cls.FALLOFF_FLOOR)) * 100.0)

    def _speed_bonus(self, difference: int, time_spent_ms: float) -> float:
        if difference > self.speed_bonus_max_difference or time_spent_ms >= self.SPEED_BONUS_WINDOW_MS:
            return 0.0
        return max(0.0, self.SPEED_BONUS_MAX - time_spent_ms / 1000.0)

    @staticmethod
    def _invalid(error: str) -> ScoreResult:
        return ScoreResult.zero(error, difference=0, isExact=False, speedBonus=0.0)


def score_count(user_count: Any, correct_count: Any, time_spent_ms: float, *, speed_bonus_max_difference: int = 0) -> ScoreResult:
    return CountScorer(speed_bonus_max_difference=speed_bonus_max_difference).score(user_count, correct_count, time_spent_ms)
