"""
Run validation service.

validate_run() is the one path from a submitted attempt to awarded XP:
rate limit -> catalog lookup -> score -> integrity -> reward -> record -> stats.
A run that fails integrity is still scored and recorded, but earns 0 XP and
does not advance the streak.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from skillstreak.core.config import settings
from skillstreak.core.errors import RateLimitError, ValidationError
from skillstreak.core.logging import log_event, run_log_context
from skillstreak.core.ratelimit import FixedWindowLimiter
from skillstreak.features.catalog.service import CatalogService, catalog_service
from skillstreak.features.integrity.checker import evaluate_integrity
from skillstreak.features.rewards.converter import compute_reward
from skillstreak.features.scoring.count import CountScorer
from skillstreak.features.scoring.engine import ScoringEngine
from skillstreak.features.scoring.trace import TraceScorer
from skillstreak.features.users.service import UserStatsService, user_stats_service
from skillstreak.models.run import RunRecord
from skillstreak.models.scoring import RunSubmission


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RunService:
    def __init__(
        self,
        *,
        catalog: Optional[CatalogService] = None,
        users: Optional[UserStatsService] = None,
        engine: Optional[ScoringEngine] = None,
        limiter: Optional[FixedWindowLimiter] = None,
        base_xp_default: Optional[int] = None,
        bonus_per_day: Optional[float] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.catalog = catalog or catalog_service
        self.users = users or user_stats_service
        self.engine = engine or ScoringEngine(
            trace_scorer=TraceScorer(self.catalog.letter_templates),
            count_scorer=CountScorer(
                self.catalog.answer_key,
                speed_bonus_max_difference=settings.COUNT_SPEED_BONUS_MAX_DIFFERENCE,
            ),
        )
        self.limiter = limiter or FixedWindowLimiter(settings.RUN_RATE_LIMIT_PER_MINUTE)
        self.base_xp_default = base_xp_default or settings.BASE_XP_DEFAULT
        self.bonus_per_day = settings.STREAK_BONUS_PER_DAY if bonus_per_day is None else bonus_per_day
        self.clock = clock
        self._runs: List[RunRecord] = []
        self._runs_lock = threading.Lock()

    def validate_run(
        self,
        *,
        user_id: str,
        exercise_type: str,
        exercise_id: str,
        run_data: Mapping[str, Any],
        course_id: Optional[str] = None,
        time_spent_ms: Optional[int] = None,
    ) -> dict:
        with run_log_context(user_id, str(exercise_type), str(exercise_id)):
            return self._process_run(
                user_id=user_id,
                exercise_type=exercise_type,
                exercise_id=exercise_id,
                run_data=run_data,
                course_id=course_id,
                time_spent_ms=time_spent_ms,
            )

    def _process_run(
        self,
        *,
        user_id: str,
        exercise_type: str,
        exercise_id: str,
        run_data: Mapping[str, Any],
        course_id: Optional[str],
        time_spent_ms: Optional[int],
    ) -> dict:
        if not self.limiter.allow(user_id):
            log_event("warning", "run.rate_limited", error_code="rate_limited")
            raise RateLimitError(
                f"Rate limit exceeded. Maximum {self.limiter.limit} runs per minute."
            )

        if not isinstance(run_data, Mapping):
            raise ValidationError("runData must be an object")

        exercise = self.catalog.get_exercise(exercise_id)
        if exercise.type.value != exercise_type:
            raise ValidationError(
                f"Exercise {exercise_id} is a {exercise.type.value} exercise, not {exercise_type}"
            )

        if time_spent_ms is None:
            time_spent_ms = run_data.get("timeSpentMs", run_data.get("timeSpent", 0))
        submission = RunSubmission(
            exercise_type=exercise_type,
            exercise_id=exercise_id,
            sample_data=run_data,
            time_spent_ms=time_spent_ms,
        )

        score = self.engine.score(submission, self.catalog.scoring_context(exercise))
        now = self.clock()
        today = now.date()
        integrity = evaluate_integrity(
            exercise_type, run_data, score.accuracy, now_ms=int(now.timestamp() * 1000)
        )

        with self.users.user_lock(user_id):
            streak = self.users.streak_for(user_id)
            reward = compute_reward(
                score.accuracy,
                exercise.base_xp or self.base_xp_default,
                streak.current_streak_days,
                streak.last_activity_date,
                today,
                passed_integrity=integrity.passed,
                bonus_per_day=self.bonus_per_day,
            )
            record = RunRecord(
                user_id=user_id,
                exercise_type=exercise_type,
                exercise_id=exercise_id,
                course_id=course_id,
                score=score,
                integrity=integrity,
                xp_earned=reward.xp,
                multiplier=reward.multiplier,
                completed_at=now,
            )
            with self._runs_lock:
                self._runs.append(record)
            if integrity.passed:
                stats = self.users.apply_run(user_id, reward.xp, today=today)
            else:
                stats = self.users.get_or_create(user_id)

        log_event(
            "info" if integrity.passed else "warning",
            "run.validated" if integrity.passed else "run.integrity_failed",
            extra={
                "accuracy": score.accuracy,
                "xp": reward.xp,
                "multiplier": reward.multiplier,
                "reason": integrity.reason,
            },
        )

        return {
            "accuracy": score.accuracy,
            "details": dict(score.details),
            "xp": reward.xp,
            "multiplier": reward.multiplier,
            "baseScore": score.accuracy,
            "validated": integrity.passed,
            "feedback": score.details.get("feedback"),
            "totalXP": stats.total_xp,
            "currentStreak": stats.current_streak,
        }

    def history(self, user_id: str, *, limit: int = 50, offset: int = 0) -> List[dict]:
        with self._runs_lock:
            runs = [run for run in self._runs if run.user_id == user_id]
        runs.reverse()
        return [run.to_dict() for run in runs[offset: offset + limit]]

    def runs(self) -> List[RunRecord]:
        with self._runs_lock:
            return list(self._runs)

    def profile(self, user_id: str) -> dict:
        user = self.users.require(user_id)
        per_type: Dict[str, List[int]] = defaultdict(list)
        for run in self.runs():
            if run.user_id == user_id:
                per_type[run.exercise_type].append(run.xp_earned)
        return {
            **user.to_dict(),
            "exerciseStats": [
                {
                    "exerciseType": kind,
                    "count": len(xps),
                    "avgXP": round(sum(xps) / len(xps), 2),
                    "maxXP": max(xps),
                }
                for kind, xps in sorted(per_type.items())
            ],
            "unlockedCourses": [course.id for course in self.catalog.unlocked_courses(user.total_xp)],
        }

    def reset(self) -> None:
        with self._runs_lock:
            self._runs.clear()
        self.limiter.reset()
        self.users.reset()


run_service = RunService()
