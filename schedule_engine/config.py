"""Engine configuration loaded from environment variables.

All settings use the SCHEDULE_ prefix, e.g. SCHEDULE_STORE_DIR or
SCHEDULE_GENERATION_TIMEOUT_SECONDS. For local development, create a .env
file in the project root.
"""

from enum import Enum
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class FailureFallback(str, Enum):
    """Schedule returned to the caller when generation fails."""
    CURRENT = "current"
    EMPTY = "empty"


class EngineSettings(BaseSettings):
    """Schedule engine configuration."""

    # Storage
    store_dir: str = Field(
        default="data/schedules",
        description="Root directory of the JSON schedule repository",
    )

    # Generation service (Gemini on Vertex AI)
    llm_model_name: str = Field(
        default="gemini-2.0-flash",
        description="Model used to rewrite schedules from instructions",
    )
    vertex_project: Optional[str] = Field(
        default=None,
        description="Google Cloud project for Vertex AI (None = ADC default)",
    )
    vertex_region: str = Field(
        default="us-central1",
        description="Vertex AI region",
    )
    llm_temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for schedule generation",
    )
    generation_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Abort a generation call after this many seconds",
    )
    generation_failure_fallback: FailureFallback = Field(
        default=FailureFallback.CURRENT,
        description="Schedule handed back when generation or parsing fails",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "SCHEDULE_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_settings: EngineSettings | None = None


def get_settings() -> EngineSettings:
    """Get the engine settings singleton.

    Returns:
        EngineSettings: Engine configuration instance
    """
    global _settings
    if _settings is None:
        _settings = EngineSettings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
