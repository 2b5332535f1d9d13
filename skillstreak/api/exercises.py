"""
Exercise run API

POST /api/exercises/validateRun - score a run and award XP
GET /api/exercises/history/{user_id} - past runs, newest first
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field, field_validator

from skillstreak.core.config import settings
from skillstreak.features.runs.service import run_service

router = APIRouter(prefix="/api/exercises", tags=["exercises"])

_SAMPLE_LIST_KEYS = ("points", "tracePoints", "taps", "tapTimes")


class ValidateRunRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", min_length=1)
    exercise_type: Literal["trace", "count", "rhythm"] = Field(..., alias="exerciseType")
    course_id: Optional[str] = Field(None, alias="courseId")
    exercise_id: str = Field(..., alias="exerciseId", min_length=1)
    run_data: Dict[str, Any] = Field(..., alias="runData")
    time_spent_ms: Optional[int] = Field(None, alias="timeSpentMs", ge=0)

    @field_validator("run_data")
    @classmethod
    def _cap_sample_size(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        cap = settings.MAX_SAMPLE_POINTS
        for key in _SAMPLE_LIST_KEYS:
            items = value.get(key)
            if isinstance(items, list) and len(items) > cap:
                raise ValueError(f"{key} exceeds {cap} samples")
        return value


@router.post("/validateRun")
def validate_run(request: ValidateRunRequest):
    """
    Score a submitted run.

    Returns:
        {
            "success": true,
            "score": {
                "accuracy": 92.5,
                "details": {...},
                "xp": 11,
                "multiplier": 1.2,
                "baseScore": 92.5,
                "validated": true,
                "feedback": "Excellent! Perfect letter formation!",
                "totalXP": 140,
                "currentStreak": 3
            }
        }
    """
    score = run_service.validate_run(
        user_id=request.user_id,
        exercise_type=request.exercise_type,
        exercise_id=request.exercise_id,
        run_data=request.run_data,
        course_id=request.course_id,
        time_spent_ms=request.time_spent_ms,
    )
    return {"success": True, "score": score}


@router.get("/history/{user_id}")
def get_history(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    return {"success": True, "history": run_service.history(user_id, limit=limit, offset=offset)}
