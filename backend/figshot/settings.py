"""Runtime settings: tunable parameters for the screenshot pipeline.

All values read from environment variables with defaults matching the
endpoint's documented behavior. Import from here instead of hardcoding.

Credentials stay in figshot/config.py.
"""

from __future__ import annotations

import os


def _int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


def _str(key: str, default: str) -> str:
    return os.getenv(key, default)


# =====================================================================
# HTTP Clients (Figma API)
# =====================================================================

FIGMA_API_BASE = _str("FIGMA_API_BASE", "https://api.figma.com")

FIGMA_HTTP_TIMEOUT = _float("FIGMA_HTTP_TIMEOUT", 60.0)
FIGMA_HTTP_MAX_CONNECTIONS = _int("FIGMA_HTTP_MAX_CONNECTIONS", 5)
FIGMA_HTTP_MAX_KEEPALIVE = _int("FIGMA_HTTP_MAX_KEEPALIVE", 3)


# =====================================================================
# Screenshot Pipeline
# =====================================================================

# Whole-request budget (seconds); each external call gets what is left.
# Kept under the usual 60s serverless function limit.
SCREENSHOT_REQUEST_TIMEOUT = _float("SCREENSHOT_REQUEST_TIMEOUT", 55.0)

# Render parameters for GET /v1/images/:key
FIGMA_RENDER_SCALE = _int("FIGMA_RENDER_SCALE", 2)
FIGMA_RENDER_FORMAT = _str("FIGMA_RENDER_FORMAT", "png")


# =====================================================================
# Cloudinary
# =====================================================================

CLOUDINARY_FOLDER = _str("CLOUDINARY_FOLDER", "figma-screenshots")

# Max length of the key-text part of a generated public_id
PUBLIC_ID_MAX_LENGTH = _int("PUBLIC_ID_MAX_LENGTH", 50)
