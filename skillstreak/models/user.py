import hashlib
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from skillstreak.models.scoring import StreakState


class UserStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    username: str
    total_xp: int = 0
    current_streak: int = 0
    last_activity: Optional[date] = None
    created_at: datetime

    @property
    def streak(self) -> StreakState:
        return StreakState(current_streak_days=self.current_streak, last_activity_date=self.last_activity)

    @staticmethod
    def default_username(user_id: str, username: Optional[str] = None) -> str:
        if username and username.strip():
            return username.strip()
        # Deterministic fallback handle
        h = hashlib.sha1(user_id.encode("utf-8")).hexdigest()
        return f"User_{h[:8]}"

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "username": self.username,
            "totalXP": self.total_xp,
            "currentStreak": self.current_streak,
            "lastActivity": self.last_activity.isoformat() if self.last_activity else None,
            "createdAt": self.created_at.isoformat(),
        }
