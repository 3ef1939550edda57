from __future__ import annotations

from streak_mentor.core.errors import ModelUnavailableError, ReviewEmptyError, ReviewUnavailableError
from streak_mentor.core.tracing import start_span
from streak_mentor.features.ai.client import ModelClient
from streak_mentor.features.ai.prompts import MENTOR_SYSTEM_PROMPT


class ContentReviewClient:
    """Sends a submission to the mentor persona and returns its text verbatim."""

    def __init__(self, model: ModelClient, system_prompt: str = MENTOR_SYSTEM_PROMPT):
        self._model = model
        self._system_prompt = system_prompt

    async def review_submission(self, content: str) -> str:
        with start_span("review.submit", {"content_length": len(content)}):
            try:
                text = await self._model.generate(content, self._system_prompt)
            except ModelUnavailableError as exc:
                raise ReviewUnavailableError(exc.message) from exc
            if not text or not text.strip():
                raise ReviewEmptyError("No response generated.")
            return text
