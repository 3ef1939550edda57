from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from streak_mentor.api.deps import get_orchestrator
from streak_mentor.features.ai.service import parse_review_sections
from streak_mentor.features.submissions.service import SubmissionOrchestrator

router = APIRouter()


class SubmissionRequest(BaseModel):
    content: str = Field(..., max_length=100_000)


@router.post("/v1/submissions")
async def create_submission(
    body: SubmissionRequest,
    orchestrator: SubmissionOrchestrator = Depends(get_orchestrator),
):
    """Review a program and record today's streak day."""
    outcome = await orchestrator.submit(body.content)
    payload = outcome.to_dict()
    payload["sections"] = [section.to_dict() for section in parse_review_sections(outcome.review_text)]
    return payload
