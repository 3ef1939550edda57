from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class StreakState:
    """
    Persisted streak snapshot. Day-level only; the date is whatever the
    submission resolved (oracle or fallback), no time-of-day.
    """

    streak_count: int = 0
    last_verified_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "streak_count": self.streak_count,
            "last_verified_date": self.last_verified_date.isoformat() if self.last_verified_date else None,
        }
