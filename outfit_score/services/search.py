"""Store search links for recommended products."""

from __future__ import annotations

from urllib.parse import quote

from outfit_score.config.settings import Settings, get_settings
from outfit_score.nlp.stylist_client import RecommendedProduct

# left unescaped by encodeURIComponent on top of what quote keeps
_URI_COMPONENT_SAFE = "!*'()"

# the store is Korean, so queries use its own category words
CATEGORY_LABELS = {
    "top": "상의",
    "bottom": "하의",
    "accessory": "액세서리",
}


def build_search_url(query: str, settings: Settings | None = None) -> str:
    """Return the store search URL for a free-text query."""

    settings = settings or get_settings()
    return f"{settings.search_base_url}?q={quote(query, safe=_URI_COMPONENT_SAFE)}"


def product_search_query(product: RecommendedProduct) -> str:
    """Category label followed by the product name; colour is left out."""

    label = CATEGORY_LABELS.get(product.category, CATEGORY_LABELS["accessory"])
    return f"{label} {product.name}".strip()
