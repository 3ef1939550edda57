"""
Health endpoints.

Lightweight checks for operational monitoring without exposing secrets.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from streak_mentor.api.deps import get_streak_store
from streak_mentor.core.logging import get_request_id

logger = logging.getLogger("streak_mentor")

root_router = APIRouter(tags=["health"])


@root_router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    return {"status": "ok"}


@root_router.get("/readyz")
def readyz(store=Depends(get_streak_store)):
    """Readiness check: the streak store answers."""
    try:
        store.ping()
        return {"status": "ok"}
    except Exception as e:
        logger.error(f"[readyz] readiness check failed: {e}", extra={"request_id": get_request_id()})
        return JSONResponse(status_code=503, content={"status": "error", "detail": "streak store unreachable"})
