"""Analysis pipeline that turns an outfit photo into scores and advice."""

from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass
from typing import Any

from PIL import Image, UnidentifiedImageError

from outfit_score.catalog.attributes import (
    TPO_OCCASIONS,
    TPO_PLACES,
    TPO_TIMES,
    AttributeSet,
    TPOContext,
)
from outfit_score.config.settings import Settings
from outfit_score.metrics.prometheus_exporter import outfit_analysis_total
from outfit_score.nlp.stylist_client import (
    AttributeExtractionError,
    ProductRecommendations,
    StylistModelClient,
)
from outfit_score.recommender.rules_engine import Suggestion, generate_improvements
from outfit_score.recommender.scorer import ScoreSet, compute_scores
from outfit_score.services.search import build_search_url, product_search_query

logger = logging.getLogger(__name__)


class UploadValidationError(ValueError):
    """Raised when the uploaded photo or its context cannot be accepted."""


@dataclass(frozen=True, slots=True)
class ValidatedImage:
    """Image bytes that decoded successfully, with their MIME type."""

    data: bytes
    mime_type: str
    filename: str | None = None


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """Everything returned to the client for one analysed photo."""

    scores: ScoreSet
    improvements: list[Suggestion]
    analysis: AttributeSet
    critic_review: str
    product_recommendations: ProductRecommendations

    def as_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "scores": self.scores.as_dict(),
            "improvements": [item.as_dict() for item in self.improvements],
            "analysis": self.analysis.as_dict(),
            "criticReview": self.critic_review,
            "productRecommendations": self.product_recommendations.model_dump(by_alias=True),
        }


class FashionAnalysisService:
    """Coordinates validation, the stylist model and the scoring engine."""

    def __init__(self, client: StylistModelClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    def validate_upload(
        self,
        data: bytes | None,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> ValidatedImage:
        """Check presence, size and decodability of the uploaded photo."""

        if not data:
            raise UploadValidationError("An image file is required.")

        if len(data) > self._settings.max_upload_bytes:
            limit_mb = self._settings.max_upload_bytes // (1024 * 1024)
            raise UploadValidationError(f"The image must be {limit_mb}MB or smaller.")

        try:
            with Image.open(io.BytesIO(data)) as image:
                image.verify()
                image_format = image.format
        except Image.DecompressionBombError as exc:
            raise UploadValidationError("The image has too many pixels to analyse.") from exc
        except (UnidentifiedImageError, OSError, SyntaxError) as exc:
            raise UploadValidationError("The uploaded file is not a supported image.") from exc

        mime_type = Image.MIME.get(image_format or "", None) or content_type or "image/jpeg"
        return ValidatedImage(data=data, mime_type=mime_type, filename=filename)

    @staticmethod
    def parse_tpo(raw: str | None) -> TPOContext | None:
        """Parse the JSON time/place/occasion form field."""

        if raw is None or not raw.strip():
            return None
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise UploadValidationError("The TPO context must be a JSON object.") from exc
        if not isinstance(payload, dict):
            raise UploadValidationError("The TPO context must be a JSON object.")

        tpo = TPOContext.from_mapping(payload)
        if tpo is None:
            logger.info("Incomplete TPO context ignored: %s", payload)
            return None
        if tpo.time not in TPO_TIMES or tpo.place not in TPO_PLACES or tpo.occasion not in TPO_OCCASIONS:
            logger.debug("TPO context outside the known vocabulary: %s", tpo)
        return tpo

    async def analyze(
        self,
        data: bytes | None,
        *,
        filename: str | None = None,
        content_type: str | None = None,
        tpo_raw: str | None = None,
    ) -> AnalysisReport:
        """Run the full pipeline for one uploaded photo."""

        try:
            image = self.validate_upload(data, filename=filename, content_type=content_type)
            tpo = self.parse_tpo(tpo_raw)
        except UploadValidationError:
            outfit_analysis_total.labels(outcome="invalid").inc()
            raise

        try:
            extracted = await self._client.extract_attributes(image.data, image.mime_type)
        except AttributeExtractionError:
            outfit_analysis_total.labels(outcome="failed").inc()
            raise

        attributes = extracted.with_tpo(tpo)
        logger.info(
            "Image analysed: file=%s size=%d top=%s bottom=%s",
            image.filename,
            len(image.data),
            attributes.top_colors,
            attributes.bottom_colors,
        )

        scores = compute_scores(attributes)
        improvements = generate_improvements(scores)
        critic_review = await self._client.write_critique(scores, attributes)
        recommendations = await self._client.recommend_products(scores, attributes, improvements)
        for product in recommendations.products:
            product.search_url = build_search_url(product_search_query(product), self._settings)

        outfit_analysis_total.labels(outcome="success").inc()
        return AnalysisReport(
            scores=scores,
            improvements=improvements,
            analysis=attributes,
            critic_review=critic_review,
            product_recommendations=recommendations,
        )
