"""FastAPI dependency providers.

Each collaborator is built once per process from settings. Tests replace
them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from streak_mentor.core.config import settings
from streak_mentor.features.ai.client import ModelClient, build_gemini_client, build_model_client
from streak_mentor.features.ai.service import ChallengeService
from streak_mentor.features.oracle.client import DateOracleClient
from streak_mentor.features.review.client import ContentReviewClient
from streak_mentor.features.streaks.service import StreakService
from streak_mentor.features.streaks.store import PersistedStreakStore, build_streak_store
from streak_mentor.features.submissions.service import SubmissionOrchestrator


@lru_cache
def get_streak_store() -> PersistedStreakStore:
    return build_streak_store(settings)


@lru_cache
def get_model_client() -> ModelClient:
    return build_model_client(settings)


@lru_cache
def get_date_oracle() -> DateOracleClient:
    # Search grounding is Gemini-only, whatever LLM_PROVIDER says.
    return DateOracleClient(build_gemini_client(settings))


def get_review_client(model: ModelClient = Depends(get_model_client)) -> ContentReviewClient:
    return ContentReviewClient(model)


def get_orchestrator(
    oracle: DateOracleClient = Depends(get_date_oracle),
    reviewer: ContentReviewClient = Depends(get_review_client),
    store: PersistedStreakStore = Depends(get_streak_store),
) -> SubmissionOrchestrator:
    return SubmissionOrchestrator(oracle, reviewer, store)


def get_streak_service(store: PersistedStreakStore = Depends(get_streak_store)) -> StreakService:
    return StreakService(store)


def get_challenge_service(model: ModelClient = Depends(get_model_client)) -> ChallengeService:
    return ChallengeService(model)
