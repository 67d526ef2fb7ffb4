"""Shared fixtures for the test suite."""

from __future__ import annotations

import io
from types import SimpleNamespace
from typing import Any, Callable, Iterator

import pytest
from PIL import Image

from outfit_score.catalog.attributes import AttributeSet, Pattern, Season, Style
from outfit_score.config.settings import Settings, get_settings
from outfit_score.recommender.scorer import Grade, ScoreSet


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        aitunnel_api_key="test-aitunnel",
        aitunnel_base_url="https://aitunnel.test/v1",
        vision_models=("model-a", "model-b", "model-c"),
        critique_models=("model-a", "model-b"),
        recommendation_models=("model-r",),
    )


@pytest.fixture
def make_attributes() -> Callable[..., AttributeSet]:
    def _factory(**overrides: Any) -> AttributeSet:
        fields: dict[str, Any] = {
            "top_colors": ("#c86432", "#ffffff"),
            "bottom_colors": ("#643214",),
            "top_pattern": Pattern.SOLID,
            "bottom_pattern": Pattern.STRIPED,
            "top_style": Style.CASUAL,
            "bottom_style": Style.CASUAL,
            "top_texture": "cotton",
            "bottom_texture": "denim",
            "season": Season.SPRING,
        }
        fields.update(overrides)
        return AttributeSet(**fields)

    return _factory


@pytest.fixture
def make_scores() -> Callable[..., ScoreSet]:
    """Score sets that default to every sub-score at its maximum."""

    def _factory(**overrides: float) -> ScoreSet:
        fields: dict[str, Any] = {
            "color_harmony": 18,
            "style_consistency": 18,
            "pattern_combination": 10,
            "proportion_silhouette": 10,
            "texture_harmony": 10,
            "context_appropriateness": 30,
            "overall_harmony": 4,
        }
        fields.update(overrides)
        total = sum(fields.values())
        return ScoreSet(**fields, total_score=total, grade=Grade.S)

    return _factory


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), (200, 100, 50)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def chat_reply() -> Callable[[str | None], SimpleNamespace]:
    """Mimic the shape of an OpenAI chat completion response."""

    def _reply(content: str | None) -> SimpleNamespace:
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

    return _reply
