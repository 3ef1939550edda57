from __future__ import annotations

from datetime import date
from typing import Tuple

from streak_mentor.features.streaks.store import PersistedStreakStore
from streak_mentor.models.streak import StreakState


def transition(prior: StreakState, observed: date) -> Tuple[StreakState, bool]:
    """Apply one resolved submission date to a streak snapshot.

    Pure: returns ``(next_state, incremented)`` and never touches storage.
    A date equal to the last verified date is a no-op. The day gap is an
    absolute difference, so a date exactly one day *before* the last verified
    date also counts as consecutive; see DESIGN.md.
    """
    if prior.last_verified_date is not None and prior.last_verified_date == observed:
        return prior, False

    # First ever submission
    if prior.last_verified_date is None:
        return StreakState(streak_count=1, last_verified_date=observed), True

    gap_days = abs((observed - prior.last_verified_date).days)
    if gap_days == 1:
        next_count = prior.streak_count + 1
    else:
        # Broken streak: today's submission is day one of a new run.
        next_count = 1

    return StreakState(streak_count=next_count, last_verified_date=observed), True


class StreakService:
    """Read-side view over the persisted streak."""

    def __init__(self, store: PersistedStreakStore):
        self._store = store

    def get_state(self) -> dict:
        state = self._store.load()
        payload = state.to_dict()
        payload["next_action_hint"] = self._next_action_hint(state)
        return payload

    @staticmethod
    def _next_action_hint(state: StreakState) -> str:
        if state.streak_count == 0:
            return "Submit one program today to start your streak."
        if state.streak_count == 1:
            return "Day one is in. Come back tomorrow to keep it going."
        return f"{state.streak_count} days strong. Submit today to stay hot."
