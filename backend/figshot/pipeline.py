"""Screenshot pipeline: Figma URL + key text → hosted image URL.

Stages run strictly in order, each consuming the previous one's output:

1. resolve the file key from the Figma URL
2. fetch the document tree
3. locate the node matching the key text (optionally within one page)
4. render the node and publish the image to Cloudinary

Every stage failure is raised as a figshot.errors.ScreenshotError subclass.
Nothing is retried.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .config import ServiceConfig
from .errors import (
    MissingParameters,
    NodeNotFound,
    PublishUnavailable,
    RenderUnavailable,
    UpstreamUnavailable,
)
from .integrations.cloudinary_uploader import (
    CloudinaryUploader,
    CloudinaryUploadError,
    build_public_id,
)
from .integrations.figma_client import FigmaClient, FigmaClientError
from .locator import locate_node
from .settings import SCREENSHOT_REQUEST_TIMEOUT
from .urls import resolve_file_key

logger = logging.getLogger("figshot.pipeline")

T = TypeVar("T")


@dataclass(frozen=True)
class SearchRequest:
    """One screenshot request, validated."""

    key_text: str
    figma_file_url: str
    figma_page_name: Optional[str] = None

    @classmethod
    def create(
        cls,
        key_text: Any,
        figma_file_url: Any,
        figma_page_name: Any = None,
    ) -> "SearchRequest":
        """Validate raw inbound values.

        Raises:
            MissingParameters if key_text or figma_file_url is missing or empty
        """
        if not isinstance(key_text, str) or not key_text:
            raise MissingParameters("keyText missing or empty")
        if not isinstance(figma_file_url, str) or not figma_file_url:
            raise MissingParameters("figmaFileUrl missing or empty")
        # An empty or non-string page name means "no page restriction"
        if figma_page_name is not None and not isinstance(figma_page_name, str):
            logger.warning(
                f"SearchRequest: ignoring non-string figmaPageName {figma_page_name!r}"
            )
        page_name = figma_page_name if isinstance(figma_page_name, str) else None
        return cls(
            key_text=key_text,
            figma_file_url=figma_file_url,
            figma_page_name=page_name or None,
        )


class _Deadline:
    """Remaining time budget for one pipeline run."""

    def __init__(self, seconds: float):
        self._end = time.monotonic() + seconds

    def remaining(self) -> float:
        return max(0.0, self._end - time.monotonic())

    async def run(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self.remaining())


class ScreenshotPipeline:
    """Runs one screenshot request end to end.

    Args:
        config: service credentials.
        client_factory: builds a Figma client from a token.
        uploader: Cloudinary uploader; built from config when omitted.
        timeout: whole-request budget in seconds.
    """

    def __init__(
        self,
        config: ServiceConfig,
        client_factory: Callable[[str], FigmaClient] = FigmaClient,
        uploader: Optional[CloudinaryUploader] = None,
        timeout: float = SCREENSHOT_REQUEST_TIMEOUT,
    ):
        self._config = config
        self._client_factory = client_factory
        self._uploader = uploader or CloudinaryUploader(config)
        self._timeout = timeout

    async def run(self, request: SearchRequest) -> str:
        """Execute all stages and return the hosted image URL."""
        deadline = _Deadline(self._timeout)
        file_key = resolve_file_key(request.figma_file_url)

        try:
            client = self._client_factory(self._config.figma_token)
        except FigmaClientError as e:
            logger.error(f"run: cannot create Figma client: {e}")
            raise UpstreamUnavailable(str(e)) from e

        try:
            node_id = await self._locate(client, file_key, request, deadline)
            render_url = await self._render(client, file_key, node_id, deadline)
        finally:
            await client.close()

        return await self._publish(render_url, request.key_text, deadline)

    async def _locate(
        self,
        client: FigmaClient,
        file_key: str,
        request: SearchRequest,
        deadline: _Deadline,
    ) -> str:
        try:
            file_data = await deadline.run(client.get_file(file_key))
        except FigmaClientError as e:
            logger.error(
                f"_locate: fetching file {file_key} failed "
                f"(status={e.status_code}): {e}"
            )
            raise UpstreamUnavailable(str(e)) from e
        except asyncio.TimeoutError as e:
            logger.error(f"_locate: fetching file {file_key} exceeded the request deadline")
            raise UpstreamUnavailable(f"Timed out fetching {file_key}") from e

        node_id = locate_node(
            file_data["document"], request.key_text, request.figma_page_name
        )
        if not node_id:
            logger.warning(
                f"_locate: no node for \"{request.key_text}\" in file {file_key} "
                f"(page: {request.figma_page_name or 'any'})"
            )
            raise NodeNotFound(request.key_text)
        return node_id

    async def _render(
        self,
        client: FigmaClient,
        file_key: str,
        node_id: str,
        deadline: _Deadline,
    ) -> str:
        try:
            images = await deadline.run(client.get_node_images(file_key, [node_id]))
        except FigmaClientError as e:
            logger.error(
                f"_render: render request for {node_id} failed "
                f"(status={e.status_code}): {e}"
            )
            raise UpstreamUnavailable(str(e)) from e
        except asyncio.TimeoutError as e:
            logger.error(f"_render: render request for {node_id} exceeded the request deadline")
            raise UpstreamUnavailable(f"Timed out rendering {node_id}") from e

        render_url = images.get(node_id)
        if not render_url:
            logger.error(f"_render: Figma returned no image URL for node {node_id}")
            raise RenderUnavailable(f"No render URL for node {node_id}")
        return render_url

    async def _publish(self, render_url: str, key_text: str, deadline: _Deadline) -> str:
        public_id = build_public_id(key_text)
        remaining = deadline.remaining()
        if remaining <= 0:
            logger.error(f"_publish: no time left to upload {public_id}")
            raise PublishUnavailable(f"Timed out before uploading {public_id}")
        # The SDK call runs in a thread that wait_for cannot cancel, so the
        # budget must reach the upload request itself.
        try:
            return await deadline.run(
                self._uploader.upload_from_url(render_url, public_id, timeout=remaining)
            )
        except CloudinaryUploadError as e:
            logger.error(f"_publish: {e}")
            raise PublishUnavailable(str(e)) from e
        except asyncio.TimeoutError as e:
            logger.error(f"_publish: upload of {public_id} exceeded the request deadline")
            raise PublishUnavailable(f"Timed out uploading {public_id}") from e
