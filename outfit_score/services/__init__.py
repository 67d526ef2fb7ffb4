"""Analysis pipeline and store search helpers."""

from .analysis import AnalysisReport, FashionAnalysisService, UploadValidationError
from .search import build_search_url, product_search_query

__all__ = [
    "AnalysisReport",
    "FashionAnalysisService",
    "UploadValidationError",
    "build_search_url",
    "product_search_query",
]
