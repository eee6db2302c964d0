"""Screenshot API endpoint.

Locates a layer in a Figma file by key text, renders it, uploads the image
to Cloudinary and returns the hosted URL.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from figshot.config import ServiceConfig, get_service_config
from figshot.errors import InternalError, ScreenshotError
from figshot.logging_config import get_api_logger
from figshot.pipeline import ScreenshotPipeline, SearchRequest

logger = get_api_logger()

router = APIRouter(tags=["screenshot"])


# --- Schemas ---


class ScreenshotRequest(BaseModel):
    """Request for POST /api/screenshot.

    Fields are optional here so that missing values produce the endpoint's
    own 400 body rather than a validation error.
    """

    figmaFileUrl: Optional[str] = Field(
        None,
        description="Figma file URL, e.g. https://www.figma.com/file/{fileKey}/{name}",
    )
    keyText: Optional[str] = Field(
        None, description="Text to find in a layer name or text layer content"
    )
    # Non-string values are ignored (whole-file search), not rejected
    figmaPageName: Optional[Any] = Field(
        None, description="Restrict the search to the page with this exact name"
    )


class ScreenshotResponse(BaseModel):
    """Response for POST /api/screenshot."""

    imageUrl: str


# --- Dependencies ---


def get_pipeline(
    config: ServiceConfig = Depends(get_service_config),
) -> ScreenshotPipeline:
    return ScreenshotPipeline(config)


# --- Endpoints ---


@router.post("/api/screenshot", response_model=ScreenshotResponse)
async def create_screenshot(
    payload: ScreenshotRequest,
    pipeline: ScreenshotPipeline = Depends(get_pipeline),
):
    """Find the Figma node matching keyText and return a hosted screenshot URL.

    Usage:
        POST /api/screenshot
        {
            "figmaFileUrl": "https://www.figma.com/file/ABC123/Test",
            "keyText": "Submit",
            "figmaPageName": "Checkout"
        }
    """
    logger.info(
        f"screenshot: keyText={payload.keyText!r}, figmaFileUrl={payload.figmaFileUrl!r}, "
        f"figmaPageName={payload.figmaPageName!r}"
    )

    try:
        request = SearchRequest.create(
            payload.keyText, payload.figmaFileUrl, payload.figmaPageName
        )
        image_url = await pipeline.run(request)
    except ScreenshotError as e:
        logger.warning(
            f"screenshot: {type(e).__name__} ({e.status_code}): {e.detail}"
        )
        return JSONResponse(status_code=e.status_code, content=e.to_body())
    except Exception as e:
        logger.exception(f"screenshot: unexpected error: {e}")
        err = InternalError(str(e))
        return JSONResponse(status_code=err.status_code, content=err.to_body())

    logger.info(f"screenshot: done → {image_url}")
    return ScreenshotResponse(imageUrl=image_url)
