"""Daily challenge, auto-fix and review-section helpers.

These sit beside the submission flow and never touch streak state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Literal

from streak_mentor.core.errors import (
    AutoFixUnavailableError,
    ChallengeUnavailableError,
    ModelUnavailableError,
    ValidationError,
)
from streak_mentor.core.tracing import start_span
from streak_mentor.features.ai.client import ModelClient
from streak_mentor.features.ai.prompts import AUTOFIX_SYSTEM_PROMPT, CHALLENGE_SYSTEM_PROMPT, CHALLENGE_USER_TEXT

SectionKind = Literal["predicted_output", "explanation", "improvements", "other"]

_FENCE_RE = re.compile(r"```c|```")


@dataclass(frozen=True)
class ReviewSection:
    title: str
    content: str
    kind: SectionKind

    def to_dict(self) -> dict:
        return {"title": self.title, "content": self.content, "kind": self.kind}


def _section_kind(title: str) -> SectionKind:
    if "Predicted" in title:
        return "predicted_output"
    if "Explanation" in title:
        return "explanation"
    if "Improvements" in title:
        return "improvements"
    return "other"


def parse_review_sections(text: str) -> List[ReviewSection]:
    """Split review text on ``###`` headers. Best effort; never validates."""
    sections: List[ReviewSection] = []
    for part in text.split("###"):
        if not part.strip():
            continue
        lines = part.strip().split("\n")
        title = lines[0].strip()
        content = "\n".join(lines[1:]).strip()
        sections.append(ReviewSection(title=title, content=content, kind=_section_kind(title)))
    return sections


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


class ChallengeService:
    def __init__(self, model: ModelClient):
        self._model = model

    async def generate_challenge(self) -> str:
        with start_span("ai.challenge"):
            try:
                text = await self._model.generate(CHALLENGE_USER_TEXT, CHALLENGE_SYSTEM_PROMPT)
            except ModelUnavailableError as exc:
                raise ChallengeUnavailableError("Could not generate a challenge.") from exc
            if not text or not text.strip():
                raise ChallengeUnavailableError("Could not generate a challenge.")
            return text.strip()

    async def auto_fix(self, code: str) -> str:
        """Return the model's corrected code with markdown fences removed.

        Raises:
            ValidationError: blank code
            AutoFixUnavailableError: model unreachable or returned nothing usable
        """
        if not code or not code.strip():
            raise ValidationError("Nothing to fix: code is empty")
        with start_span("ai.autofix", {"code_length": len(code)}):
            try:
                text = await self._model.generate(code, AUTOFIX_SYSTEM_PROMPT)
            except ModelUnavailableError as exc:
                raise AutoFixUnavailableError("Failed to auto-fix code.") from exc
            fixed = strip_code_fences(text or "")
            if not fixed:
                raise AutoFixUnavailableError("Failed to auto-fix code.")
            return fixed
