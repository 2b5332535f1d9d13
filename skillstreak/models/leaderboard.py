from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    user_id: str
    username: str
    total_xp: int
    current_streak: int
    last_activity: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "userId": self.user_id,
            "username": self.username,
            "totalXP": self.total_xp,
            "currentStreak": self.current_streak,
            "lastActivity": self.last_activity.isoformat() if self.last_activity else None,
        }
