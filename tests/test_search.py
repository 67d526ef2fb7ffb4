"""Tests for store search URL building."""

from __future__ import annotations

from outfit_score.config.settings import Settings
from outfit_score.nlp.stylist_client import RecommendedProduct
from outfit_score.services.search import build_search_url, product_search_query


def test_build_search_url_percent_encodes_query() -> None:
    url = build_search_url("white shirt & tie", Settings())

    assert url == "https://www.musinsa.com/search/musinsa/goods?q=white%20shirt%20%26%20tie"


def test_build_search_url_encodes_korean_text() -> None:
    url = build_search_url("상의 셔츠", Settings())

    assert url == "https://www.musinsa.com/search/musinsa/goods?q=%EC%83%81%EC%9D%98%20%EC%85%94%EC%B8%A0"


def test_build_search_url_honours_configured_store() -> None:
    settings = Settings(search_base_url="https://shop.test/search")

    assert build_search_url("navy slacks", settings) == "https://shop.test/search?q=navy%20slacks"


def test_product_search_query_prefixes_category_label() -> None:
    top = RecommendedProduct(category="top", name="White shirt", color="#FFFFFF")
    bottom = RecommendedProduct(category="Bottom", name="Navy slacks")
    other = RecommendedProduct(category="shoes", name="Loafers")

    assert product_search_query(top) == "상의 White shirt"
    assert product_search_query(bottom) == "하의 Navy slacks"
    assert product_search_query(other) == "액세서리 Loafers"


def test_build_search_url_keeps_uri_component_punctuation() -> None:
    url = build_search_url("polo (navy)! it's 100%*", Settings())

    assert url == "https://www.musinsa.com/search/musinsa/goods?q=polo%20(navy)!%20it's%20100%25*"
