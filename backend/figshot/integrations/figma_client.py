"""Figma REST API client for the screenshot endpoint.

Fetches document trees and rendered node images from Figma files using
Personal Access Token (PAT) authentication.

Usage:
    client = FigmaClient(token=config.figma_token)
    try:
        file_data = await client.get_file("6kGd851qaAX4TiL44vpIrO")
        images = await client.get_node_images("6kGd851qaAX4TiL44vpIrO", ["16650:539"])
    finally:
        await client.close()
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from figshot.settings import (
    FIGMA_API_BASE,
    FIGMA_HTTP_MAX_CONNECTIONS,
    FIGMA_HTTP_MAX_KEEPALIVE,
    FIGMA_HTTP_TIMEOUT,
    FIGMA_RENDER_FORMAT,
    FIGMA_RENDER_SCALE,
)

logger = logging.getLogger("figshot.integrations.figma")


class FigmaClientError(Exception):
    """Raised when a Figma API call fails.

    status_code is the upstream HTTP status when one was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FigmaClient:
    """Async Figma REST API client.

    Args:
        token: Figma PAT.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        token: str,
        timeout: float = FIGMA_HTTP_TIMEOUT,
        base_url: str = FIGMA_API_BASE,
    ):
        if not token:
            raise FigmaClientError(
                "Figma token not configured. Set FIGMA_ACCESS_TOKEN environment variable."
            )
        self._token = token
        self._base_url = base_url
        self._client: Optional[httpx.AsyncClient] = None
        self._timeout = timeout

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"X-FIGMA-TOKEN": self._token},
                timeout=self._timeout,
                limits=httpx.Limits(
                    max_connections=FIGMA_HTTP_MAX_CONNECTIONS,
                    max_keepalive_connections=FIGMA_HTTP_MAX_KEEPALIVE,
                ),
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _get(self, path: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        """Make a GET request to the Figma API."""
        client = await self._get_client()
        try:
            resp = await client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise FigmaClientError(f"Figma API timeout: {path}") from e
        except httpx.HTTPError as e:
            raise FigmaClientError(f"Figma API connection error: {path}: {e}") from e

        # Upstream body is kept in every message so the logged error shows
        # Figma's own reason (expired token, missing scope, ...)
        body = resp.text[:200]
        if resp.status_code == 403:
            raise FigmaClientError(
                "Figma API returned 403 Forbidden. Check that FIGMA_ACCESS_TOKEN is valid "
                f"and has file_content:read scope. Response: {body}",
                status_code=403,
            )
        if resp.status_code == 404:
            raise FigmaClientError(
                f"Figma resource not found: {path}: {body}", status_code=404
            )
        if resp.status_code == 429:
            raise FigmaClientError(
                f"Figma API rate limit exceeded. Retry later. Response: {body}",
                status_code=429,
            )
        if resp.status_code != 200:
            raise FigmaClientError(
                f"Figma API error {resp.status_code}: {body}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise FigmaClientError(
                f"Figma API returned invalid JSON: {path}", status_code=resp.status_code
            ) from e

    # ------------------------------------------------------------------
    # Core API methods
    # ------------------------------------------------------------------

    async def get_file(self, file_key: str) -> Dict[str, Any]:
        """Fetch the full document tree of a Figma file.

        GET /v1/files/:key
        """
        data = await self._get(f"/v1/files/{file_key}")
        if not isinstance(data.get("document"), dict):
            raise FigmaClientError(f"Figma file {file_key} has no document tree")
        logger.info(
            f"get_file: file={file_key}, name=\"{data.get('name', '')}\", "
            f"pages={len(data['document'].get('children') or [])}"
        )
        return data

    async def get_node_images(
        self,
        file_key: str,
        node_ids: List[str],
        fmt: str = FIGMA_RENDER_FORMAT,
        scale: int = FIGMA_RENDER_SCALE,
    ) -> Dict[str, Optional[str]]:
        """Render node images via Figma's image export API.

        GET /v1/images/:key?ids=...&format=png&scale=2

        Returns a node_id → URL map. A node Figma could not render maps to None.
        """
        params: Dict[str, str] = {
            "ids": ",".join(node_ids),
            "format": fmt,
            "scale": str(scale),
        }
        data = await self._get(f"/v1/images/{file_key}", params=params)

        if data.get("err"):
            raise FigmaClientError(f"Figma image render error: {data['err']}")

        images = data.get("images") or {}
        logger.info(
            f"get_node_images: file={file_key}, requested={len(node_ids)}, "
            f"rendered={sum(1 for v in images.values() if v)}"
        )
        return images
