"""
Environment validation utilities.

Ensures the app fails fast on misconfiguration while
remaining bypassable for tests via SKIP_ENV_VALIDATION.
"""

import os
from typing import Optional, Iterable
from urllib.parse import urlparse

from streak_mentor.core.config import settings

STORE_BACKENDS = ("sql", "redis", "memory")
LLM_PROVIDERS = ("gemini", "groq")


class EnvValidationError(RuntimeError):
    """Raised when environment validation fails."""


def _is_valid_db_url(url: str) -> bool:
    """Basic DATABASE_URL validation using urlparse."""
    parsed = urlparse(url)
    if parsed.scheme.startswith("sqlite"):
        return True
    return bool(parsed.scheme and parsed.netloc)


def _require(vars_required: Iterable[str], source: object) -> None:
    for var in vars_required:
        if not getattr(source, var, None):
            raise EnvValidationError(f"{var} is required in production")


def validate_env(env: Optional[str] = None, settings_obj=None) -> bool:
    """Validate environment configuration.

    Args:
        env: Override environment name (defaults to settings.ENV)
        settings_obj: Override settings object (defaults to streak_mentor.core.config.settings)

    Returns:
        True if validation passes.

    Raises:
        EnvValidationError when a rule is violated.
    """
    if os.getenv("SKIP_ENV_VALIDATION") == "1":
        return True

    cfg = settings_obj or settings
    mode = (env or getattr(cfg, "ENV", "development") or "development").lower()
    backend = (getattr(cfg, "STREAK_STORE_BACKEND", "sql") or "sql").lower()
    provider = (getattr(cfg, "LLM_PROVIDER", "gemini") or "gemini").lower()
    db_url = getattr(cfg, "DATABASE_URL", None)

    if backend not in STORE_BACKENDS:
        raise EnvValidationError(
            f"STREAK_STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}"
        )
    if provider not in LLM_PROVIDERS:
        raise EnvValidationError(f"LLM_PROVIDER must be one of {', '.join(LLM_PROVIDERS)}")

    if db_url and not _is_valid_db_url(db_url):
        raise EnvValidationError("DATABASE_URL must be a valid URL (e.g. sqlite:///./streak_mentor.db)")

    if mode == "production":
        required_prod = ["GEMINI_API_KEY"]
        if provider == "groq":
            required_prod.append("GROQ_API_KEY")
        if backend == "sql":
            required_prod.append("DATABASE_URL")
        elif backend == "redis":
            required_prod.append("REDIS_URL")
        else:
            raise EnvValidationError("STREAK_STORE_BACKEND=memory is not durable; not allowed in production")
        _require(required_prod, cfg)

    return True
