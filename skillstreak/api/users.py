from fastapi import APIRouter
from pydantic import BaseModel, Field

from skillstreak.features.runs.service import run_service
from skillstreak.features.users.service import user_stats_service

router = APIRouter(prefix="/api/users", tags=["users"])


class UsernameUpdate(BaseModel):
    username: str = Field(..., min_length=1, max_length=40)


@router.get("/{user_id}")
def get_profile(user_id: str):
    """Profile with XP, streak and per-exercise-type run stats."""
    return {"success": True, "user": run_service.profile(user_id)}


@router.put("/{user_id}/username")
def update_username(user_id: str, body: UsernameUpdate):
    user = user_stats_service.rename(user_id, body.username)
    return {"success": True, "user": user.to_dict()}
