"""Prompting and the hosted model client."""

from .prompts import PromptBuilder
from .stylist_client import (
    AttributeExtractionError,
    ModelFallbackExhausted,
    ModelResponseError,
    ProductRecommendations,
    RecommendedProduct,
    StylistModelClient,
)

__all__ = [
    "AttributeExtractionError",
    "ModelFallbackExhausted",
    "ModelResponseError",
    "ProductRecommendations",
    "PromptBuilder",
    "RecommendedProduct",
    "StylistModelClient",
]
