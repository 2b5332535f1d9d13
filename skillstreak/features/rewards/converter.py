"""
Reward Converter

Maps an accuracy score and the player's streak to an XP award.
Pure: the caller passes today's date; streak bookkeeping happens elsewhere.
"""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Optional

from skillstreak.models.scoring import RewardResult, StreakState, is_finite_number

STREAK_BONUS_PER_DAY = 0.1
MIN_ACCEPTED_XP = 1


def streak_multiplier(
    streak_days: int,
    last_activity_date: Optional[date],
    today: date,
    *,
    bonus_per_day: float = STREAK_BONUS_PER_DAY,
) -> float:
    """
    1 + streak_days * bonus, but only on the first run of the next calendar day.

    Same-day repeats, gaps of more than one day and first-ever runs earn 1.0.
    """
    if last_activity_date is None or streak_days <= 0:
        return 1.0
    if today - last_activity_date != timedelta(days=1):
        return 1.0
    return round(1.0 + streak_days * bonus_per_day, 4)


def compute_reward(
    accuracy: float,
    base_xp: int,
    streak_days: int,
    last_activity_date: Optional[date],
    today: date,
    *,
    passed_integrity: bool = True,
    bonus_per_day: float = STREAK_BONUS_PER_DAY,
) -> RewardResult:
    """
    XP = floor(accuracy * base_xp * multiplier / 100).

    Accepted runs always earn at least 1 XP; runs that failed integrity earn 0
    regardless of accuracy. There is no upper cap.
    """
    multiplier = streak_multiplier(streak_days, last_activity_date, today, bonus_per_day=bonus_per_day)
    if not passed_integrity:
        return RewardResult(xp=0, multiplier=multiplier)

    clamped = max(0.0, min(100.0, float(accuracy))) if is_finite_number(accuracy) else 0.0
    # Multiply first; accuracy / 100 * base_xp can floor one point low
    xp = math.floor(clamped * base_xp * multiplier / 100.0)
    return RewardResult(xp=max(MIN_ACCEPTED_XP, int(xp)), multiplier=multiplier)


def reward_for_streak(
    accuracy: float,
    base_xp: int,
    streak: StreakState,
    today: date,
    *,
    passed_integrity: bool = True,
    bonus_per_day: float = STREAK_BONUS_PER_DAY,
) -> RewardResult:
    return compute_reward(
        accuracy,
        base_xp,
        streak.current_streak_days,
        streak.last_activity_date,
        today,
        passed_integrity=passed_integrity,
        bonus_per_day=bonus_per_day,
    )
