"""Tests for environment-driven configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from outfit_score.config.settings import (
    DEFAULT_RECOMMENDATION_MODELS,
    DEFAULT_VISION_MODELS,
    _load_env_file,
    get_settings,
)

_ENV_KEYS = (
    "ENVIRONMENT",
    "LOG_LEVEL",
    "AITUNNEL_API_KEY",
    "AITUNNEL_BASE_URL",
    "REQUEST_TIMEOUT",
    "VISION_MODELS",
    "CRITIQUE_MODELS",
    "RECOMMENDATION_MODELS",
    "MAX_UPLOAD_MB",
    "SEARCH_BASE_URL",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for key in _ENV_KEYS:
        # setenv first so monkeypatch restores keys that .env loading writes directly
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_defaults_without_environment() -> None:
    settings = get_settings()

    assert settings.environment == "dev"
    assert settings.aitunnel_api_key == ""
    assert settings.vision_models == DEFAULT_VISION_MODELS
    assert settings.critique_models == DEFAULT_VISION_MODELS
    assert settings.recommendation_models == DEFAULT_RECOMMENDATION_MODELS
    assert settings.max_upload_bytes == 20 * 1024 * 1024
    assert settings.search_base_url == "https://www.musinsa.com/search/musinsa/goods"


def test_model_lists_keep_order_and_skip_blanks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VISION_MODELS", " gemini-1.5-flash , ,gemini-2.5-pro")
    monkeypatch.setenv("RECOMMENDATION_MODELS", " , ")

    settings = get_settings()

    assert settings.vision_models == ("gemini-1.5-flash", "gemini-2.5-pro")
    assert settings.recommendation_models == DEFAULT_RECOMMENDATION_MODELS


def test_numeric_values_are_parsed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_UPLOAD_MB", "5")
    monkeypatch.setenv("REQUEST_TIMEOUT", "12.5")

    settings = get_settings()

    assert settings.max_upload_bytes == 5 * 1024 * 1024
    assert settings.request_timeout == 12.5


def test_settings_are_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("ENVIRONMENT", "prod")

    assert get_settings() is first


def test_env_file_does_not_override_existing_variables(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    env_file = tmp_path / "custom.env"
    env_file.write_text(
        "# comment\nAITUNNEL_API_KEY=from-file\nLOG_LEVEL = DEBUG\nnot a pair\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    _load_env_file(str(env_file))

    assert get_settings().aitunnel_api_key == "from-file"
    assert get_settings().log_level == "WARNING"
