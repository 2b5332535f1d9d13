"""Recorded exercise runs."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from skillstreak.models.scoring import IntegrityResult, ScoreResult


@dataclass(frozen=True)
class RunRecord:
    """
    One scored attempt as stored in run history.

    Attributes:
        user_id: Player identifier
        exercise_type: "trace" | "count" | "rhythm"
        exercise_id: Catalog exercise id
        course_id: Course the exercise was played from (optional)
        score: Accuracy and details as computed by the engine
        integrity: Anti-cheat outcome; failed runs keep their score but earn 0 XP
        xp_earned: Awarded XP after streak multiplier
        multiplier: Streak multiplier applied
        completed_at: UTC timestamp the run was recorded
    """

    user_id: str
    exercise_type: str
    exercise_id: str
    course_id: Optional[str]
    score: ScoreResult
    integrity: IntegrityResult
    xp_earned: int
    multiplier: float
    completed_at: datetime

    @property
    def validated(self) -> bool:
        return self.integrity.passed

    def to_dict(self) -> dict:
        return {
            "exerciseType": self.exercise_type,
            "exerciseId": self.exercise_id,
            "courseId": self.course_id,
            "scoreData": self.score.to_dict(),
            "validated": self.validated,
            "integrityReason": self.integrity.reason,
            "xpEarned": self.xp_earned,
            "multiplier": self.multiplier,
            "completedAt": self.completed_at.isoformat(),
        }
