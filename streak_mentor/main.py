import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

# Load .env before settings are read
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv()

from streak_mentor.core.config import settings, validate_config
from streak_mentor.core.logging import configure_logging
from streak_mentor.core.middleware.request_id import RequestIdMiddleware
from streak_mentor.core.validation import validate_env
from streak_mentor.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    unhandled_exception_handler,
)
from streak_mentor.core.tracing import setup_tracing
from streak_mentor.api import ai, health, streaks, submissions

configure_logging(settings.ENV)
validate_env()
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))
setup_tracing(enabled=settings.OTEL_ENABLED)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("streak_mentor")
    logger.info("Starting C-Streak Mentor backend...")
    try:
        yield
    finally:
        logging.getLogger("streak_mentor").info("Stopping C-Streak Mentor backend...")


app = FastAPI(title="C-Streak Mentor", lifespan=lifespan)

app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(HTTPException, http_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# CORS (adjust origins in production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.root_router, tags=["health"])
app.include_router(streaks.router, tags=["streaks"])
app.include_router(submissions.router, tags=["submissions"])
app.include_router(ai.router, tags=["ai"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("streak_mentor.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
