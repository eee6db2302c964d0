"""Error taxonomy for the screenshot pipeline.

Each error carries the HTTP status and the client-facing body it maps to.
Upstream diagnostics belong in ``detail`` (logged only), never in the body.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

GENERIC_ERROR_MESSAGE = "Internal server error while processing screenshot."


class ScreenshotError(Exception):
    """Base class for classified pipeline failures."""

    status_code: int = 500
    message: str = GENERIC_ERROR_MESSAGE

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.message)
        self.detail = detail or self.message

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class MissingParameters(ScreenshotError):
    status_code = 400
    message = "Missing parameters: keyText or figmaFileUrl."


class InvalidUrl(ScreenshotError):
    status_code = 400
    message = "Invalid Figma file URL."


class UpstreamUnavailable(ScreenshotError):
    """Figma tree fetch or render request failed."""


class NodeNotFound(ScreenshotError):
    status_code = 404
    message = "Figma node not found for the specified text."

    def __init__(self, key_text: str, detail: Optional[str] = None):
        super().__init__(detail)
        self.key_text = key_text

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "key": self.key_text}


class RenderUnavailable(ScreenshotError):
    """Render call succeeded but returned no URL for the node."""

    message = "Could not get Figma rendered image URL for the node."


class PublishUnavailable(ScreenshotError):
    """Cloudinary upload failed."""


class InternalError(ScreenshotError):
    """Fallback for anything unanticipated."""
