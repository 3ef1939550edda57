"""Submission orchestration.

One submission runs the date oracle and the content reviewer concurrently,
waits for both to settle, then commits at most one streak transition:

- review failed: raise ``SubmissionFailedError``, store untouched.
- review ok, oracle failed: fall back to the local clock (``DateSource.FALLBACK``).
- review ok, oracle ok: use the verified date (``DateSource.ORACLE``).
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Callable, Tuple

from streak_mentor.core.errors import OracleError, ReviewError, SubmissionFailedError, ValidationError
from streak_mentor.core.logging import log_event
from streak_mentor.core.tracing import start_span
from streak_mentor.features.oracle.client import DateOracleClient
from streak_mentor.features.review.client import ContentReviewClient
from streak_mentor.features.streaks.service import transition
from streak_mentor.features.streaks.store import PersistedStreakStore
from streak_mentor.models.submission import DateSource, SubmissionOutcome

logger = logging.getLogger("streak_mentor")


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class SubmissionOrchestrator:
    def __init__(
        self,
        oracle: DateOracleClient,
        reviewer: ContentReviewClient,
        store: PersistedStreakStore,
        clock: Callable[[], date] = utc_today,
    ):
        self._oracle = oracle
        self._reviewer = reviewer
        self._store = store
        self._clock = clock

    async def submit(self, content: str) -> SubmissionOutcome:
        """Run one submission end to end.

        Raises:
            ValidationError: blank content (nothing is dispatched)
            SubmissionFailedError: the review path failed; nothing committed
        """
        if not content or not content.strip():
            raise ValidationError("Submission content is empty")

        with start_span("submission.submit", {"content_length": len(content)}):
            date_result, review_result = await asyncio.gather(
                self._oracle.fetch_verified_date(),
                self._reviewer.review_submission(content),
                return_exceptions=True,
            )

            if isinstance(review_result, BaseException):
                self._raise_review_failure(review_result, oracle_ok=not isinstance(date_result, BaseException))

            observed, source = self._resolve_date(date_result)

            # No awaits from here on: the snapshot read, transition and write
            # happen as one step on the event loop.
            prior = self._store.load()
            next_state, incremented = transition(prior, observed)
            if incremented:
                self._store.save(next_state)

            log_event(
                "info",
                "submission.completed",
                event_type="submission.completed",
                extra={
                    "date_source": source.value,
                    "did_update_streak": incremented,
                    "streak_count": next_state.streak_count,
                },
            )
            return SubmissionOutcome(
                review_text=review_result,
                verified_date=observed,
                date_source=source,
                did_update_streak=incremented,
                streak=next_state,
            )

    def _raise_review_failure(self, exc: BaseException, *, oracle_ok: bool) -> None:
        if isinstance(exc, ReviewError):
            log_event(
                "warning",
                "submission.review_failed",
                event_type="submission.review_failed",
                error_code=exc.code,
                extra={"oracle_ok": oracle_ok},
            )
        elif isinstance(exc, Exception):
            logger.error(
                "submission.review_unexpected_error",
                exc_info=exc,
                extra={"event_type": "submission.review_failed", "error_code": "review_unexpected"},
            )
        else:
            # CancelledError and friends are not review failures.
            raise exc
        raise SubmissionFailedError(
            "Connection failed. Please check your internet and try again."
        ) from exc

    def _resolve_date(self, result) -> Tuple[date, DateSource]:
        if not isinstance(result, BaseException):
            return result, DateSource.ORACLE

        fallback = self._clock()
        if isinstance(result, OracleError):
            log_event(
                "warning",
                "submission.oracle_fallback",
                event_type="submission.oracle_fallback",
                error_code=result.code,
                extra={"fallback_date": fallback.isoformat()},
            )
        elif isinstance(result, Exception):
            logger.error(
                "submission.oracle_unexpected_error",
                exc_info=result,
                extra={"event_type": "submission.oracle_fallback", "error_code": "oracle_unexpected"},
            )
        else:
            # CancelledError and friends are not oracle failures.
            raise result
        return fallback, DateSource.FALLBACK
