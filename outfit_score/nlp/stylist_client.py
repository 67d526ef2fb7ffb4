"""Client for the hosted vision/text model behind the AITunnel proxy.

Every operation walks an ordered list of model identifiers and stops at the
first model that returns a usable answer. Any exception raised while calling a
model or handling its reply advances to the next one.
"""

from __future__ import annotations

import base64
import json
import logging
import re
from typing import Any, Awaitable, Callable, Sequence, TypeVar

from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from outfit_score.catalog.attributes import AttributeSet, Pattern, Season, Style, colors_from
from outfit_score.config.settings import Settings
from outfit_score.metrics.prometheus_exporter import fallback_response_total, model_attempt_failures_total
from outfit_score.nlp.prompts import PromptBuilder
from outfit_score.recommender.rules_engine import Suggestion
from outfit_score.recommender.scorer import ScoreSet

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_WRAPPING_QUOTES = re.compile(r"^[\"']|[\"']$")
_SEASON_ALIASES = {"autumn": "fall"}


class ModelResponseError(RuntimeError):
    """Raised when a model reply cannot be turned into the expected structure."""


class ModelFallbackExhausted(RuntimeError):
    """Raised when every model in the fallback list failed."""

    def __init__(self, operation: str, models: Sequence[str], last_error: BaseException | None) -> None:
        self.operation = operation
        self.models = tuple(models)
        self.last_error = last_error
        reason = str(last_error) if last_error else "no models configured"
        super().__init__(f"{operation} failed for all models ({', '.join(self.models) or '-'}): {reason}")


class AttributeExtractionError(ModelFallbackExhausted):
    """Raised when no model could extract outfit attributes from the photo."""


class AttributePayload(BaseModel):
    """Attribute JSON as returned by the vision model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    top_colors: list[str] = Field(min_length=1)
    bottom_colors: list[str] = Field(min_length=1)
    top_pattern: Pattern
    bottom_pattern: Pattern
    top_style: Style
    bottom_style: Style
    top_texture: str | None = None
    bottom_texture: str | None = None
    season: Season | None = None

    @field_validator("top_colors", "bottom_colors", mode="before")
    @classmethod
    def _strip_colors(cls, value: Any) -> Any:
        if isinstance(value, list):
            return list(colors_from(value))
        return value

    @field_validator("top_pattern", "bottom_pattern", "top_style", "bottom_style", mode="before")
    @classmethod
    def _normalise_tag(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("top_texture", "bottom_texture", mode="before")
    @classmethod
    def _normalise_texture(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or None
        return None

    @field_validator("season", mode="before")
    @classmethod
    def _normalise_season(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return None
        cleaned = value.strip().lower()
        cleaned = _SEASON_ALIASES.get(cleaned, cleaned)
        # optional field: unknown seasons are dropped instead of failing the model
        return cleaned if cleaned in {member.value for member in Season} else None

    def to_attributes(self) -> AttributeSet:
        return AttributeSet(
            top_colors=tuple(self.top_colors),
            bottom_colors=tuple(self.bottom_colors),
            top_pattern=self.top_pattern,
            bottom_pattern=self.bottom_pattern,
            top_style=self.top_style,
            bottom_style=self.bottom_style,
            top_texture=self.top_texture,
            bottom_texture=self.bottom_texture,
            season=self.season,
        )


class RecommendedProduct(BaseModel):
    """One purchasable item suggested by the stylist model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    category: str = "accessory"
    name: str
    description: str = ""
    color: str | None = None
    style: str | None = None
    reason: str = ""
    estimated_price: str | None = None
    search_url: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _normalise_category(cls, value: Any) -> str:
        cleaned = str(value or "").strip().lower()
        return cleaned if cleaned in {"top", "bottom"} else "accessory"


class ProductRecommendations(BaseModel):
    """Shopping suggestions plus a short summary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    products: list[RecommendedProduct]
    summary: str = ""


FALLBACK_RECOMMENDATIONS = ProductRecommendations(
    products=[
        RecommendedProduct(
            category="top",
            name="Basic white shirt",
            description="A staple piece that ties top and bottom together",
            color="#FFFFFF",
            style="casual",
            reason="A neutral item that improves colour harmony",
            estimated_price="30,000-50,000 KRW",
        ),
    ],
    summary="Start from basic solid pieces and build up your style step by step.",
)

_FALLBACK_CRITIQUES = (
    (
        90,
        "This look is a model example of colour, style and proportion in perfect harmony. "
        "The overall finish is outstanding and shows fashion sense at its peak.",
    ),
    (
        80,
        "The overall styling is excellent. Small adjustments would complete an even more polished look.",
    ),
    (
        70,
        "The styling is balanced overall, but some categories leave room for improvement. "
        "Building on the strengths while fixing the weaknesses will make the look more appealing.",
    ),
    (
        60,
        "The basics of styling are there, but colour and style consistency should be revisited "
        "for a more harmonious look.",
    ),
    (
        50,
        "The styling has a foundation, but colour harmony and pattern placement need a lot of work. "
        "An overall rework looks necessary.",
    ),
    (
        40,
        "Colour, pattern and style do not work together, so the look lacks unity. "
        "Applying basic colour theory is the first priority.",
    ),
)
_FALLBACK_CRITIQUE_FLOOR = (
    "The key elements of this look clash with each other and it needs a complete rework. "
    "Start from basic solid pieces and build the style up gradually."
)


def fallback_critique(scores: ScoreSet) -> str:
    """Canned critique chosen by total-score band."""

    for threshold, text in _FALLBACK_CRITIQUES:
        if scores.total_score >= threshold:
            return text
    return _FALLBACK_CRITIQUE_FLOOR


def extract_json_object(text: str) -> dict[str, Any]:
    """Pull the JSON object out of a reply that may contain fences or prose."""

    candidate = text.strip()
    if "```" in candidate:
        fenced = _FENCED_BLOCK.search(candidate)
        if fenced:
            candidate = fenced.group(1).strip()
        else:
            candidate = candidate.replace("```json", "").replace("```", "").strip()

    match = _JSON_OBJECT.search(candidate)
    if match:
        candidate = match.group(0)

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ModelResponseError("Model reply is not valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ModelResponseError("Model reply is not a JSON object.")
    return parsed


def clean_review(text: str) -> str:
    """Strip wrapping quotes and Markdown fences from a critique."""

    return _WRAPPING_QUOTES.sub("", text.strip()).replace("```", "").strip()


async def run_with_fallback(
    operation: str,
    models: Sequence[str],
    attempt: Callable[[str], Awaitable[T]],
    *,
    error_cls: type[ModelFallbackExhausted] = ModelFallbackExhausted,
) -> T:
    """Call ``attempt`` for each model in order and return the first success."""

    last_error: BaseException | None = None
    for model in models:
        try:
            result = await attempt(model)
        except Exception as exc:
            logger.warning("%s: model %s failed: %s", operation, model, exc)
            model_attempt_failures_total.labels(operation=operation).inc()
            last_error = exc
            continue
        logger.info("%s: model %s succeeded", operation, model)
        return result

    logger.error("%s: all models failed", operation)
    raise error_cls(operation, models, last_error)


class StylistModelClient:
    """Thin client that talks to the OpenAI-compatible AITunnel proxy."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._prompts = PromptBuilder()
        self._client: AsyncOpenAI | None = None
        # AsyncOpenAI refuses an empty key, so the client only exists once a key is set
        if settings.aitunnel_api_key:
            self._client = AsyncOpenAI(
                api_key=settings.aitunnel_api_key,
                base_url=settings.aitunnel_base_url.rstrip("/"),
                timeout=settings.request_timeout,
                max_retries=0,
            )

    async def extract_attributes(self, image_bytes: bytes, mime_type: str) -> AttributeSet:
        """Return outfit attributes for the photo or raise ``AttributeExtractionError``."""

        data_url = f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": self._prompts.attributes()},
                    {"type": "image_url", "image_url": {"url": data_url}},
                ],
            },
        ]

        async def _attempt(model: str) -> AttributeSet:
            content = await self._complete(model, messages)
            try:
                payload = AttributePayload.model_validate(extract_json_object(content))
            except ValidationError as exc:
                raise ModelResponseError(f"Model reply is missing required fields: {exc}") from exc
            return payload.to_attributes()

        return await self._run(
            "attribute_extraction",
            self._settings.vision_models,
            _attempt,
            error_cls=AttributeExtractionError,
        )

    async def write_critique(self, scores: ScoreSet, attributes: AttributeSet) -> str:
        """Return a short critic review, or a canned one if every model fails."""

        messages = [{"role": "user", "content": self._prompts.critique(scores, attributes)}]

        async def _attempt(model: str) -> str:
            review = clean_review(await self._complete(model, messages))
            if not review:
                raise ModelResponseError("Model returned an empty review.")
            return review

        try:
            return await self._run("critique", self._settings.critique_models, _attempt)
        except ModelFallbackExhausted:
            fallback_response_total.labels(operation="critique").inc()
            return fallback_critique(scores)

    async def recommend_products(
        self,
        scores: ScoreSet,
        attributes: AttributeSet,
        suggestions: Sequence[Suggestion],
    ) -> ProductRecommendations:
        """Return shopping suggestions that target the weakest categories."""

        messages = [
            {"role": "user", "content": self._prompts.recommendations(scores, attributes, suggestions)},
        ]

        async def _attempt(model: str) -> ProductRecommendations:
            content = await self._complete(model, messages)
            try:
                return ProductRecommendations.model_validate(extract_json_object(content))
            except ValidationError as exc:
                raise ModelResponseError(f"Recommendation reply has an invalid format: {exc}") from exc

        try:
            return await self._run("recommendations", self._settings.recommendation_models, _attempt)
        except ModelFallbackExhausted:
            fallback_response_total.labels(operation="recommendations").inc()
            return FALLBACK_RECOMMENDATIONS.model_copy(deep=True)

    async def list_models(self) -> list[str]:
        """Return identifiers of the models the proxy exposes."""

        models = await self._require_client().models.list()
        return [model.id for model in models.data]

    async def ping(self) -> bool:
        """Return ``True`` if the upstream service responds to a model listing call."""

        models = await self._require_client().models.list()
        return bool(models.data)

    async def close(self) -> None:
        """Release HTTP resources."""

        if self._client is not None:
            await self._client.close()

    async def _run(
        self,
        operation: str,
        models: Sequence[str],
        attempt: Callable[[str], Awaitable[T]],
        *,
        error_cls: type[ModelFallbackExhausted] = ModelFallbackExhausted,
    ) -> T:
        if not self._settings.aitunnel_api_key:
            raise error_cls(operation, (), ModelResponseError("AITunnel API key is not configured."))
        return await run_with_fallback(operation, models, attempt, error_cls=error_cls)

    def _require_client(self) -> AsyncOpenAI:
        if self._client is None:
            raise RuntimeError("AITunnel API key is not configured.")
        return self._client

    async def _complete(self, model: str, messages: list[dict[str, Any]]) -> str:
        response = await self._require_client().chat.completions.create(model=model, messages=messages)
        if not response.choices:
            raise ModelResponseError("Model returned no choices.")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise ModelResponseError("Model returned an empty reply.")
        return content
