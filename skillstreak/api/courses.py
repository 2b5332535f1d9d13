from typing import Optional

from fastapi import APIRouter, Query

from skillstreak.features.catalog.service import catalog_service
from skillstreak.features.users.service import user_stats_service

router = APIRouter(prefix="/api/courses", tags=["courses"])


def _total_xp(user_id: Optional[str]) -> int:
    if not user_id:
        return 0
    user = user_stats_service.get(user_id)
    return user.total_xp if user else 0


@router.get("")
def list_courses(user_id: Optional[str] = Query(None, alias="userId")):
    """All courses, with `unlocked` computed from the user's XP when userId is given."""
    total_xp = _total_xp(user_id)
    return {"success": True, "courses": [course.to_dict(total_xp) for course in catalog_service.list_courses()]}


@router.get("/{course_id}")
def get_course(course_id: str, user_id: Optional[str] = Query(None, alias="userId")):
    course = catalog_service.get_course(course_id)
    return {"success": True, "course": course.to_dict(_total_xp(user_id))}
