"""Cloudinary upload of rendered Figma images.

Cloudinary fetches the image itself from the (short-lived) Figma render URL,
so no image bytes pass through this process.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Dict, Optional

import cloudinary.exceptions
import cloudinary.uploader

from figshot.config import ServiceConfig
from figshot.settings import CLOUDINARY_FOLDER, PUBLIC_ID_MAX_LENGTH

logger = logging.getLogger("figshot.integrations.cloudinary")

_UNSAFE_CHARS_RE = re.compile(r"[^a-zA-Z0-9]")


class CloudinaryUploadError(Exception):
    """Raised when an upload to Cloudinary fails."""


def build_public_id(key_text: str, now_ms: Optional[int] = None) -> str:
    """Derive a unique, human-traceable public_id from the key text.

    Every character outside [A-Za-z0-9] becomes "_", the result is cut to
    PUBLIC_ID_MAX_LENGTH characters and suffixed with a millisecond timestamp.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    safe = _UNSAFE_CHARS_RE.sub("_", key_text)[:PUBLIC_ID_MAX_LENGTH]
    return f"{safe}_{now_ms}"


class CloudinaryUploader:
    """Uploads remote images into a fixed Cloudinary folder.

    Args:
        config: service credentials, passed to every upload call.
        folder: target folder for uploaded screenshots.
    """

    def __init__(self, config: ServiceConfig, folder: str = CLOUDINARY_FOLDER):
        self._config = config
        self._folder = folder

    def _upload(
        self,
        image_url: str,
        public_id: str,
        timeout: Optional[float],
    ) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if timeout is not None:
            options["timeout"] = timeout
        return cloudinary.uploader.upload(
            image_url,
            folder=self._folder,
            public_id=public_id,
            cloud_name=self._config.cloudinary_cloud_name,
            api_key=self._config.cloudinary_api_key,
            api_secret=self._config.cloudinary_api_secret,
            **options,
        )

    async def upload_from_url(
        self,
        image_url: str,
        public_id: str,
        timeout: Optional[float] = None,
    ) -> str:
        """Upload the image at image_url and return its secure URL.

        The SDK call is blocking, so it runs in a worker thread. timeout (seconds)
        is handed to the SDK's HTTP request so the upload itself stops when the
        caller's budget runs out, not only the await on it.
        """
        if not self._config.has_cloudinary:
            raise CloudinaryUploadError(
                "Cloudinary not configured. Set CLOUDINARY_CLOUD_NAME, "
                "CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET."
            )

        logger.info(f"upload_from_url: uploading {self._folder}/{public_id}")
        try:
            result = await asyncio.to_thread(self._upload, image_url, public_id, timeout)
        except cloudinary.exceptions.Error as e:
            raise CloudinaryUploadError(f"Cloudinary upload failed: {e}") from e

        secure_url = (result or {}).get("secure_url")
        if not secure_url:
            raise CloudinaryUploadError(
                f"Cloudinary upload returned no secure_url for {public_id}"
            )

        logger.info(f"upload_from_url: {public_id} → {secure_url}")
        return secure_url
