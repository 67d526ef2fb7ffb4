"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_VISION_MODELS = ("gemini-2.5-pro", "gemini-1.5-pro", "gemini-2.5-flash", "gemini-1.5-flash")
DEFAULT_RECOMMENDATION_MODELS = ("gemini-2.5-flash",)


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def _model_list(raw: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    """Parse a comma-separated, ordered list of model identifiers."""

    if not raw:
        return default
    models = tuple(item.strip() for item in raw.split(",") if item.strip())
    return models or default


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised project settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    aitunnel_api_key: str = ""
    aitunnel_base_url: str = "https://api.aitunnel.ru/v1"
    request_timeout: float = 60.0

    vision_models: tuple[str, ...] = DEFAULT_VISION_MODELS
    critique_models: tuple[str, ...] = DEFAULT_VISION_MODELS
    recommendation_models: tuple[str, ...] = DEFAULT_RECOMMENDATION_MODELS

    max_upload_bytes: int = 20 * 1024 * 1024
    search_base_url: str = "https://www.musinsa.com/search/musinsa/goods"


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        aitunnel_api_key=os.getenv("AITUNNEL_API_KEY", ""),
        aitunnel_base_url=os.getenv("AITUNNEL_BASE_URL", "https://api.aitunnel.ru/v1"),
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", "60")),
        vision_models=_model_list(os.getenv("VISION_MODELS"), DEFAULT_VISION_MODELS),
        critique_models=_model_list(os.getenv("CRITIQUE_MODELS"), DEFAULT_VISION_MODELS),
        recommendation_models=_model_list(
            os.getenv("RECOMMENDATION_MODELS"),
            DEFAULT_RECOMMENDATION_MODELS,
        ),
        max_upload_bytes=int(float(os.getenv("MAX_UPLOAD_MB", "20")) * 1024 * 1024),
        search_base_url=os.getenv("SEARCH_BASE_URL", "https://www.musinsa.com/search/musinsa/goods"),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
