from __future__ import annotations

from fastapi import APIRouter, Depends

from streak_mentor.api.deps import get_streak_service
from streak_mentor.features.streaks.service import StreakService

router = APIRouter()


@router.get("/v1/streak")
def get_current_streak(service: StreakService = Depends(get_streak_service)):
    """Return the persisted streak state."""
    return service.get_state()
