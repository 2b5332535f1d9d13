"""
Leaderboard API

GET /api/leaderboard - top users by XP, then streak
GET /api/leaderboard/stats/global - aggregate XP/streak/run stats
GET /api/leaderboard/{user_id} - one user's rank
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Query

from skillstreak.features.leaderboard.service import global_stats, rank_of, rank_users
from skillstreak.features.runs.service import run_service
from skillstreak.features.users.service import user_stats_service

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


@router.get("")
def get_leaderboard(limit: int = Query(50, ge=1, le=500)):
    entries = rank_users(user_stats_service.snapshot(), limit=limit)
    return {"success": True, "leaderboard": [entry.to_dict() for entry in entries]}


@router.get("/stats/global")
def get_global_stats():
    today = datetime.now(timezone.utc).date()
    stats = global_stats(user_stats_service.snapshot(), run_service.runs(), today)
    return {"success": True, "globalStats": stats}


@router.get("/{user_id}")
def get_user_rank(user_id: str):
    return {"success": True, "userStats": rank_of(user_id, user_stats_service.snapshot())}
