"""Daily challenge and auto-fix endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from streak_mentor.api.deps import get_challenge_service
from streak_mentor.features.ai.prompts import INITIAL_CODE
from streak_mentor.features.ai.service import ChallengeService

router = APIRouter()


class AutoFixRequest(BaseModel):
    code: str = Field(..., max_length=100_000)


@router.get("/v1/starter-code")
def starter_code():
    return {"code": INITIAL_CODE}


@router.post("/v1/challenges")
async def create_challenge(service: ChallengeService = Depends(get_challenge_service)):
    return {"challenge": await service.generate_challenge()}


@router.post("/v1/autofix")
async def autofix_code(body: AutoFixRequest, service: ChallengeService = Depends(get_challenge_service)):
    return {"code": await service.auto_fix(body.code)}
