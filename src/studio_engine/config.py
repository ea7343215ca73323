"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from studio_engine.services.scoring import SUB_METRICS

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    metrics_backend: Literal["http", "openai", "none"] = "none"
    metrics_service_url: str | None = None
    metrics_service_key: str | None = None
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_store: bool = False
    metrics_concurrency: int = 4
    selection_ratio: float = 0.35
    highlight_quality_threshold: float = 90.0
    highlight_top_fraction: float = 0.10
    max_category_share: float | None = None
    photo_timeout_seconds: float = 5.0
    run_timeout_seconds: float = 120.0
    scoring_concurrency: int = 8
    scoring_weights: str | None = None
    prioritize_emotions: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_scoring_weights(raw: str | None) -> dict[str, float]:
    """Parse ``sharpness=2,exposure=1`` style weights from env.

    Unlisted sub-metrics keep weight 1.0.
    """
    weights = {name: 1.0 for name in SUB_METRICS}
    if raw is None or not raw.strip():
        return weights
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value:
            continue
        name, sep, number = value.partition("=")
        name = name.strip().lower()
        if not sep or name not in weights:
            raise ValueError(f"Unknown scoring weight entry {value!r}")
        weights[name] = float(number)
    return weights
