"""
User stats service.
- get_or_create(user_id)
- apply_run(user_id, xp, today): add XP and advance the day streak
- snapshot(): immutable view for ranking

Updates for one user are serialized through that user's lock so two runs
finishing together cannot lose an XP or streak update.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterator, Optional, Tuple

from skillstreak.core.errors import NotFoundError
from skillstreak.models.scoring import StreakState
from skillstreak.models.user import UserStats


def advance_streak(state: StreakState, today: date) -> StreakState:
    """
    Streak after activity on `today`.

    Same day keeps the streak, the next calendar day extends it, and a longer
    gap (or first activity) starts over at 1. Dates earlier than the last
    activity leave the state untouched.
    """
    last = state.last_activity_date
    if last is None:
        return StreakState(current_streak_days=1, last_activity_date=today)
    if today < last:
        return state
    if today == last:
        return StreakState(current_streak_days=max(1, state.current_streak_days), last_activity_date=today)
    if today - last == timedelta(days=1):
        return StreakState(current_streak_days=state.current_streak_days + 1, last_activity_date=today)
    return StreakState(current_streak_days=1, last_activity_date=today)


class UserStatsService:
    """In-memory XP totals and streaks, keyed by user id."""

    def __init__(self):
        self._users: Dict[str, UserStats] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    @contextmanager
    def user_lock(self, user_id: str) -> Iterator[None]:
        with self._registry_lock:
            lock = self._locks.setdefault(user_id, threading.RLock())
        with lock:
            yield

    def get(self, user_id: str) -> Optional[UserStats]:
        return self._users.get(user_id)

    def require(self, user_id: str) -> UserStats:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def get_or_create(self, user_id: str, *, username: Optional[str] = None, now: Optional[datetime] = None) -> UserStats:
        with self.user_lock(user_id):
            existing = self._users.get(user_id)
            if existing is not None:
                return existing
            created = UserStats(
                user_id=user_id,
                username=UserStats.default_username(user_id, username),
                created_at=now or datetime.now(timezone.utc),
            )
            with self._registry_lock:
                self._users[user_id] = created
            return created

    def streak_for(self, user_id: str) -> StreakState:
        user = self._users.get(user_id)
        return user.streak if user else StreakState()

    def apply_run(self, user_id: str, xp_earned: int, *, today: date) -> UserStats:
        with self.user_lock(user_id):
            user = self.get_or_create(user_id)
            streak = advance_streak(user.streak, today)
            updated = user.model_copy(
                update={
                    "total_xp": user.total_xp + max(0, xp_earned),
                    "current_streak": streak.current_streak_days,
                    "last_activity": streak.last_activity_date,
                }
            )
            self._users[user_id] = updated
            return updated

    def rename(self, user_id: str, username: str) -> UserStats:
        with self.user_lock(user_id):
            user = self.require(user_id)
            updated = user.model_copy(update={"username": UserStats.default_username(user_id, username)})
            self._users[user_id] = updated
            return updated

    def snapshot(self) -> Tuple[UserStats, ...]:
        with self._registry_lock:
            return tuple(self._users.values())

    def reset(self) -> None:
        with self._registry_lock:
            self._users.clear()
            self._locks.clear()


user_stats_service = UserStatsService()
