from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from skillstreak.models.scoring import ExerciseType


@dataclass(frozen=True)
class Exercise:
    """
    One catalog exercise. `data` carries the trusted reference for scoring:
    trace -> {"letter"}, count -> {"imageId"}, rhythm -> {"bpm", "beats"}.
    """

    id: str
    type: ExerciseType
    title: str
    description: str
    base_xp: int
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "baseXP": self.base_xp,
            "data": dict(self.data),
        }


@dataclass(frozen=True)
class Course:
    id: str
    title: str
    description: str
    icon: str
    required_xp: int
    exercises: Tuple[Exercise, ...] = ()

    def is_unlocked_for(self, total_xp: int) -> bool:
        return total_xp >= self.required_xp

    def to_dict(self, total_xp: int = 0) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "requiredXP": self.required_xp,
            "unlocked": self.is_unlocked_for(total_xp),
            "exercises": [exercise.to_dict() for exercise in self.exercises],
        }
