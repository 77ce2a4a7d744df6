"""
Centralized configuration with environment variable overrides.

Studio details, booking defaults, model settings and storage locations are
configurable here. Nothing studio-specific is hardcoded in engine or
report logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from studiobook.logging_context import RequestIdFilter

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class StudioConfig:
    """Studio identity and booking form defaults."""

    name: str = os.getenv("STUDIO_NAME", "S Cube Studioz")
    tagline: str = os.getenv("STUDIO_TAGLINE", "Professional Recording Studio")
    currency_label: str = os.getenv("CURRENCY_LABEL", "Rs.")
    default_rate_per_hour: float = _safe_float("DEFAULT_RATE_PER_HOUR", "1000")
    default_session_type: str = os.getenv("DEFAULT_SESSION_TYPE", "Vocal Recording")
    default_duration_hours: float = _safe_float("DEFAULT_DURATION_HOURS", "2")
    default_start_time: str = os.getenv("DEFAULT_START_TIME", "10:00")
    upcoming_limit: int = _safe_int("UPCOMING_LIMIT", "5")


@dataclass(frozen=True)
class ModelConfig:
    """Generative-AI model settings."""

    api_key: str = os.getenv("OPENAI_API_KEY", "")
    llm_model: str = os.getenv("LLM_MODEL", "gpt-4o-mini")
    llm_temperature: float = _safe_float("LLM_TEMPERATURE", "0.2")
    transcription_model: str = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")


@dataclass(frozen=True)
class StorageConfig:
    """Local key-value persistence settings."""

    data_file: str = os.getenv("DATA_FILE", "./data/studio_store.json")
    storage_key: str = os.getenv("STORAGE_KEY", "scube_bookings")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    studio: StudioConfig = field(default_factory=StudioConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not 0.0 <= config.model.llm_temperature <= 2.0:
        raise ValueError(
            f"LLM_TEMPERATURE must be between 0.0 and 2.0, got {config.model.llm_temperature}"
        )
    if config.studio.default_rate_per_hour < 0:
        raise ValueError(
            f"DEFAULT_RATE_PER_HOUR must be >= 0, got {config.studio.default_rate_per_hour}"
        )
    if config.studio.default_duration_hours <= 0:
        raise ValueError(
            f"DEFAULT_DURATION_HOURS must be > 0, got {config.studio.default_duration_hours}"
        )
    if config.studio.upcoming_limit < 1:
        raise ValueError(
            f"UPCOMING_LIMIT must be >= 1, got {config.studio.upcoming_limit}"
        )
    if not config.storage.storage_key.strip():
        raise ValueError("STORAGE_KEY must not be empty")

    hours, _, minutes = config.studio.default_start_time.partition(":")
    if not (hours.isdigit() and minutes.isdigit() and int(hours) < 24 and int(minutes) < 60):
        raise ValueError(
            f"DEFAULT_START_TIME must be HH:MM, got {config.studio.default_start_time!r}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s [%(request_id)s]: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())
    logger.info("Configuration loaded for '%s'", config.studio.name)
    return config


# Singleton instance
settings = load_config()
