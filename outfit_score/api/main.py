"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from outfit_score.config.settings import Settings, get_settings
from outfit_score.monitoring.logging import configure_logging
from outfit_score.nlp.stylist_client import AttributeExtractionError, StylistModelClient
from outfit_score.services.analysis import FashionAnalysisService, UploadValidationError
from outfit_score.services.search import build_search_url

logger = logging.getLogger(__name__)


def _error(message: str, status_code: int, **extra: Any) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)


def get_analysis_service(request: Request) -> FashionAnalysisService:
    """Return the analysis service bound to the running application."""

    return request.app.state.analysis_service


def create_app(settings: Settings | None = None) -> FastAPI:
    """Initialise the FastAPI application."""

    settings = settings or get_settings()
    configure_logging(settings)

    client = StylistModelClient(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await client.close()

    app = FastAPI(
        title="Outfit Score API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.analysis_service = FashionAnalysisService(client, settings)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(_: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected malformed request: %s", exc.errors())
        return _error(
            "The request is invalid.",
            400,
            details=[error["msg"] for error in exc.errors()],
        )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    @app.get("/metrics", tags=["system"], include_in_schema=False)
    async def metrics() -> Response:
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.post("/api/analyze-fashion", tags=["analysis"])
    async def analyze_fashion(
        image: UploadFile | None = File(None),
        tpo: str | None = Form(None),
        service: FashionAnalysisService = Depends(get_analysis_service),
    ) -> Any:
        """Score an outfit photo and return advice, a critique and shopping ideas."""

        data = None
        filename = content_type = None
        if image is not None:
            # one byte past the limit is enough to reject oversized uploads
            data = await image.read(settings.max_upload_bytes + 1)
            filename, content_type = image.filename, image.content_type

        try:
            report = await service.analyze(
                data,
                filename=filename,
                content_type=content_type,
                tpo_raw=tpo,
            )
        except UploadValidationError as exc:
            return _error(str(exc), 400)
        except AttributeExtractionError as exc:
            logger.error("Image analysis failed: %s", exc)
            return _error(
                "Image analysis failed. Check the API key or try again.",
                500,
                details=str(exc),
            )
        except Exception:
            logger.exception("Unexpected analysis error")
            return _error("An error occurred during analysis. Please try again.", 500)

        return report.as_dict()

    @app.get("/api/search-musinsa", tags=["search"])
    async def search_store(q: str | None = None) -> Any:
        """Return the store search URL for a query; no products are scraped."""

        if not q or not q.strip():
            return _error("A search query is required.", 400)
        return {"query": q, "searchUrl": build_search_url(q, settings), "products": []}

    @app.post("/api/search-musinsa", tags=["search"])
    async def search_store_post(request: Request) -> Any:
        """Same as the GET variant, taking ``{"query": ...}`` as JSON."""

        try:
            payload = await request.json()
        except json.JSONDecodeError:
            payload = None
        query = payload.get("query") if isinstance(payload, dict) else None
        if not isinstance(query, str) or not query.strip():
            return _error("A search query is required.", 400)
        return {
            "query": query,
            "searchUrl": build_search_url(query, settings),
            "message": "Search directly on the store site; server-side crawling is not provided.",
        }

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""

    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "outfit_score.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "dev",
    )


if __name__ == "__main__":
    run()
