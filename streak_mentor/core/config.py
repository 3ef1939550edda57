import logging

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional


class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False

    # Generative model providers
    LLM_PROVIDER: str = "gemini"  # gemini | groq
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash-preview-09-2025"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GROQ_API_KEY: Optional[str] = None
    GROQ_MODEL: str = "llama-3.1-8b-instant"
    LLM_TIMEOUT_SECONDS: float = 30.0

    # Streak persistence
    STREAK_STORE_BACKEND: str = "sql"  # sql | redis | memory
    DATABASE_URL: Optional[str] = "sqlite:///./streak_mentor.db"
    REDIS_URL: str = "redis://localhost:6379/0"
    STREAK_STORE_NAMESPACE: str = "techchat"

    # Observability / Tracing
    OTEL_ENABLED: bool = False
    OTEL_EXPORTER: str = "console"  # console | memory

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate required configuration.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    Secrets are not logged, only missing keys.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("streak_mentor")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    # The date oracle needs search grounding, which only Gemini offers.
    required_keys = ["GEMINI_API_KEY"]
    if (getattr(cfg, "LLM_PROVIDER", "gemini") or "gemini").lower() == "groq":
        required_keys.append("GROQ_API_KEY")

    missing = [key for key in required_keys if not getattr(cfg, key, None)]
    if missing:
        message = f"Missing required configuration: {', '.join(missing)}"
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)

    return True
