from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from streak_mentor.models.streak import StreakState


class DateSource(str, Enum):
    ORACLE = "oracle"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of one orchestrated submission."""

    review_text: str
    verified_date: Optional[date]
    date_source: DateSource
    did_update_streak: bool
    streak: StreakState

    @property
    def time_verified(self) -> bool:
        return self.date_source is DateSource.ORACLE

    def to_dict(self) -> dict:
        return {
            "review_text": self.review_text,
            "verified_date": self.verified_date.isoformat() if self.verified_date else None,
            "date_source": self.date_source.value,
            "time_verified": self.time_verified,
            "did_update_streak": self.did_update_streak,
            "streak": self.streak.to_dict(),
        }
