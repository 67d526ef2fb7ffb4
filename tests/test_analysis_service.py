"""Tests for the outfit analysis pipeline."""

from __future__ import annotations

import dataclasses
import json

import pytest
import pytest_mock
from PIL import Image

from outfit_score.catalog.attributes import TPOContext
from outfit_score.nlp.stylist_client import (
    AttributeExtractionError,
    ProductRecommendations,
    RecommendedProduct,
    StylistModelClient,
)
from outfit_score.recommender.scorer import Grade
from outfit_score.services.analysis import FashionAnalysisService, UploadValidationError


@pytest.fixture
def client_mock(mocker: pytest_mock.MockerFixture, make_attributes):
    client = mocker.create_autospec(StylistModelClient, instance=True)
    client.extract_attributes.return_value = make_attributes()
    client.write_critique.return_value = "A relaxed, well balanced look."
    client.recommend_products.return_value = ProductRecommendations(
        products=[
            RecommendedProduct(category="top", name="White shirt"),
            RecommendedProduct(category="shoes", name="White sneakers"),
        ],
        summary="Keep it simple.",
    )
    return client


@pytest.fixture
def service(client_mock, settings) -> FashionAnalysisService:
    return FashionAnalysisService(client_mock, settings)


def test_validate_upload_detects_mime_type(service: FashionAnalysisService, png_bytes: bytes) -> None:
    image = service.validate_upload(png_bytes, filename="look.png", content_type="application/octet-stream")

    assert image.mime_type == "image/png"
    assert image.filename == "look.png"


@pytest.mark.parametrize("data", [None, b""])
def test_validate_upload_requires_image(service: FashionAnalysisService, data: bytes | None) -> None:
    with pytest.raises(UploadValidationError, match="image file is required"):
        service.validate_upload(data)


def test_validate_upload_rejects_oversized_image(client_mock, settings) -> None:
    service = FashionAnalysisService(client_mock, dataclasses.replace(settings, max_upload_bytes=1024 * 1024))

    with pytest.raises(UploadValidationError, match="1MB or smaller"):
        service.validate_upload(b"\x00" * (1024 * 1024 + 1))


def test_validate_upload_rejects_non_image(service: FashionAnalysisService) -> None:
    with pytest.raises(UploadValidationError, match="not a supported image"):
        service.validate_upload(b"definitely not a picture", content_type="image/jpeg")


def test_validate_upload_rejects_decompression_bomb(
    service: FashionAnalysisService,
    png_bytes: bytes,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # the 4x4 fixture is 16 pixels, above twice this limit
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 4)

    with pytest.raises(UploadValidationError, match="too many pixels"):
        service.validate_upload(png_bytes)


def test_parse_tpo_builds_context() -> None:
    raw = json.dumps({"time": "Morning", "place": "office", "occasion": "business"})

    assert FashionAnalysisService.parse_tpo(raw) == TPOContext("morning", "office", "business")


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", '{"time": "morning", "place": "office"}', '{"time": "", "place": "cafe", "occasion": "date"}'],
)
def test_parse_tpo_treats_missing_or_partial_context_as_absent(raw: str | None) -> None:
    assert FashionAnalysisService.parse_tpo(raw) is None


@pytest.mark.parametrize("raw", ["{not json", '["morning", "office", "business"]'])
def test_parse_tpo_rejects_malformed_json(raw: str) -> None:
    with pytest.raises(UploadValidationError, match="TPO context"):
        FashionAnalysisService.parse_tpo(raw)


@pytest.mark.asyncio
async def test_analyze_builds_full_report(service: FashionAnalysisService, client_mock, png_bytes: bytes) -> None:
    tpo = json.dumps({"time": "afternoon", "place": "casual", "occasion": "casual"})

    report = await service.analyze(png_bytes, filename="look.png", content_type="image/png", tpo_raw=tpo)

    client_mock.extract_attributes.assert_awaited_once_with(png_bytes, "image/png")
    assert report.analysis.tpo == TPOContext("afternoon", "casual", "casual")
    assert report.scores.context_appropriateness == 26
    assert report.scores.total_score == 70.99
    assert report.scores.grade is Grade.B
    assert report.critic_review == "A relaxed, well balanced look."

    suggestions = client_mock.recommend_products.await_args.args[2]
    assert suggestions == report.improvements

    urls = [product.search_url for product in report.product_recommendations.products]
    assert urls == [
        "https://www.musinsa.com/search/musinsa/goods?q=%EC%83%81%EC%9D%98%20White%20shirt",
        "https://www.musinsa.com/search/musinsa/goods?q=%EC%95%A1%EC%84%B8%EC%84%9C%EB%A6%AC%20White%20sneakers",
    ]


@pytest.mark.asyncio
async def test_analyze_report_serialises_wire_format(service: FashionAnalysisService, png_bytes: bytes) -> None:
    report = await service.analyze(png_bytes)

    payload = report.as_dict()

    assert payload["success"] is True
    assert payload["scores"]["totalScore"] == 64.99
    assert payload["scores"]["grade"] == "C"
    assert payload["analysis"]["topColors"] == ["#c86432", "#ffffff"]
    assert payload["analysis"]["tpo"] is None
    assert payload["criticReview"] == "A relaxed, well balanced look."
    assert payload["productRecommendations"]["summary"] == "Keep it simple."
    assert payload["productRecommendations"]["products"][0]["searchUrl"].startswith("https://www.musinsa.com/")
    assert [(item["category"], item["priority"]) for item in payload["improvements"]] == [
        ("Texture harmony", 2),
        ("Style consistency", 3),
    ]


@pytest.mark.asyncio
async def test_analyze_does_not_call_model_for_invalid_upload(
    service: FashionAnalysisService,
    client_mock,
) -> None:
    with pytest.raises(UploadValidationError):
        await service.analyze(b"")

    client_mock.extract_attributes.assert_not_awaited()


@pytest.mark.asyncio
async def test_analyze_propagates_extraction_failure(
    service: FashionAnalysisService,
    client_mock,
    png_bytes: bytes,
) -> None:
    client_mock.extract_attributes.side_effect = AttributeExtractionError(
        "attribute_extraction",
        ("model-a",),
        RuntimeError("boom"),
    )

    with pytest.raises(AttributeExtractionError):
        await service.analyze(png_bytes)

    client_mock.write_critique.assert_not_awaited()
