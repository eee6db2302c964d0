"""Figma file URL parsing."""

from __future__ import annotations

import logging
import re

from .errors import InvalidUrl

logger = logging.getLogger("figshot.urls")

# /file/{key} (legacy) and /design/{key} (current) are equivalent.
# Any non-slash character is accepted in the key.
_FILE_KEY_RE = re.compile(r"/(?:file|design)/([^/]+)/?")


def resolve_file_key(url: str) -> str:
    """Extract the Figma file key from a file URL.

    Supports:
        https://www.figma.com/file/{fileKey}/{name}
        https://www.figma.com/design/{fileKey}/{name}
        https://www.figma.com/design/{fileKey}

    Raises:
        InvalidUrl if no file key can be found
    """
    match = _FILE_KEY_RE.search(url or "")
    if not match or not match.group(1):
        logger.error(f"resolve_file_key: no /file/ or /design/ segment in {url!r}")
        raise InvalidUrl(f"Unrecognized Figma file URL: {url!r}")

    file_key = match.group(1)
    logger.info(f"resolve_file_key: {url} → {file_key}")
    return file_key
