"""
Health endpoints.

The service keeps no external dependencies, so liveness is enough.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    return {"status": "ok"}


@router.get("/api/health")
def health(request: Request):
    started = getattr(request.app.state, "startup_time", None)
    return {
        "ok": True,
        "uptime_s": round(time.time() - started, 1) if started else None,
        "computed_at": datetime.now(timezone.utc).isoformat(),
    }
