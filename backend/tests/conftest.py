"""Root conftest for route and pipeline tests.

Provides:
- A sample Figma /v1/files/:key response
- Mocked Figma client and Cloudinary uploader (no network)
- FastAPI test client with the pipeline dependency overridden
"""

from __future__ import annotations

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from figshot.config import ServiceConfig
from figshot.pipeline import ScreenshotPipeline

HOSTED_URL = (
    "https://res.cloudinary.com/demo/image/upload/v1/figma-screenshots/Submit_1.png"
)


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_file_response():
    """Sample Figma /v1/files/:key response with two pages."""
    return {
        "name": "TestFile",
        "version": "123456",
        "document": {
            "id": "0:0",
            "name": "Document",
            "type": "DOCUMENT",
            "children": [
                {
                    "id": "1:0",
                    "name": "Home",
                    "type": "CANVAS",
                    "children": [
                        {
                            "id": "1:1",
                            "name": "Header",
                            "type": "FRAME",
                            "children": [
                                {
                                    "id": "1:2",
                                    "name": "Title",
                                    "type": "TEXT",
                                    "characters": "Welcome back",
                                },
                            ],
                        },
                        {
                            "id": "1:3",
                            "name": "Form",
                            "type": "FRAME",
                            "children": [
                                {
                                    "id": "1:4",
                                    "name": "Submit Button",
                                    "type": "INSTANCE",
                                    "children": [
                                        {
                                            "id": "1:5",
                                            "name": "Label",
                                            "type": "TEXT",
                                            "characters": "Submit",
                                        },
                                    ],
                                },
                            ],
                        },
                    ],
                },
                {
                    "id": "2:0",
                    "name": "Checkout",
                    "type": "CANVAS",
                    "children": [
                        {
                            "id": "2:1",
                            "name": "Payment",
                            "type": "FRAME",
                            "children": [
                                {
                                    "id": "2:2",
                                    "name": "Cta",
                                    "type": "TEXT",
                                    "characters": "Pay now",
                                },
                            ],
                        },
                    ],
                },
            ],
        },
    }


@pytest.fixture
def service_config():
    return ServiceConfig(
        figma_token="test-figma-token-123",
        cloudinary_cloud_name="demo",
        cloudinary_api_key="key",
        cloudinary_api_secret="secret",
    )


# ---------------------------------------------------------------------------
# External service mocks
# ---------------------------------------------------------------------------


def _render_urls(file_key, node_ids, **kwargs):
    return {nid: f"https://figma-cdn.example.com/img/{nid}.png" for nid in node_ids}


@pytest.fixture
def mock_figma(sample_file_response):
    """Stand-in for FigmaClient: every node renders successfully."""
    figma = MagicMock()
    figma.get_file = AsyncMock(return_value=sample_file_response)
    figma.get_node_images = AsyncMock(side_effect=_render_urls)
    figma.close = AsyncMock()
    return figma


@pytest.fixture
def mock_uploader():
    uploader = MagicMock()
    uploader.upload_from_url = AsyncMock(return_value=HOSTED_URL)
    return uploader


@pytest.fixture
def pipeline(service_config, mock_figma, mock_uploader):
    return ScreenshotPipeline(
        service_config,
        client_factory=lambda token: mock_figma,
        uploader=mock_uploader,
    )


# ---------------------------------------------------------------------------
# FastAPI test client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(pipeline) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the FastAPI app, with the pipeline mocked."""
    from app.main import app
    from app.routes.screenshot import get_pipeline

    app.dependency_overrides[get_pipeline] = lambda: pipeline
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
