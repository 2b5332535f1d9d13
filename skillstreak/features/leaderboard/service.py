"""
Leaderboard ranking.

Pure functions over an immutable snapshot of user records: ranking builds a
fresh ordered list and never touches the records it was given.
Ordering: total XP desc, then current streak desc, then user id for stability.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from skillstreak.core.errors import NotFoundError
from skillstreak.models.leaderboard import LeaderboardEntry
from skillstreak.models.run import RunRecord
from skillstreak.models.user import UserStats


def _sort_key(user: UserStats):
    return (-user.total_xp, -user.current_streak, user.user_id)


def rank_users(snapshot: Iterable[UserStats], limit: Optional[int] = None) -> List[LeaderboardEntry]:
    ordered = sorted(snapshot, key=_sort_key)
    if limit is not None:
        ordered = ordered[: max(0, limit)]
    return [
        LeaderboardEntry(
            rank=index + 1,
            user_id=user.user_id,
            username=user.username,
            total_xp=user.total_xp,
            current_streak=user.current_streak,
            last_activity=user.last_activity,
        )
        for index, user in enumerate(ordered)
    ]


def rank_of(user_id: str, snapshot: Sequence[UserStats]) -> dict:
    """1 + the number of users strictly ahead (more XP, or equal XP and a longer streak)."""
    target = next((user for user in snapshot if user.user_id == user_id), None)
    if target is None:
        raise NotFoundError(f"User {user_id} not found")
    ahead = sum(
        1
        for user in snapshot
        if user.total_xp > target.total_xp
        or (user.total_xp == target.total_xp and user.current_streak > target.current_streak)
    )
    return {**target.to_dict(), "rank": ahead + 1, "totalUsers": len(snapshot)}


def global_stats(snapshot: Sequence[UserStats], runs: Iterable[RunRecord], today: date) -> dict:
    total_users = len(snapshot)
    xp_values = [user.total_xp for user in snapshot]
    streaks = [user.current_streak for user in snapshot]
    active_since = today - timedelta(days=1)

    per_type: Dict[str, List[int]] = defaultdict(list)
    for run in runs:
        per_type[run.exercise_type].append(run.xp_earned)

    return {
        "totalUsers": total_users,
        "avgXP": round(sum(xp_values) / total_users) if total_users else 0,
        "maxXP": max(xp_values, default=0),
        "avgStreak": round(sum(streaks) / total_users) if total_users else 0,
        "maxStreak": max(streaks, default=0),
        "activeToday": sum(1 for user in snapshot if user.last_activity and user.last_activity >= active_since),
        "exerciseStats": [
            {"exerciseType": kind, "count": len(xps), "avgXP": round(sum(xps) / len(xps), 2)}
            for kind, xps in sorted(per_type.items())
        ],
    }
