"""Service configuration: single source of truth for credential env vars."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List

# Server binding, used by entrypoint / uvicorn
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))


@dataclass(frozen=True)
class ServiceConfig:
    """Credentials for the Figma and Cloudinary APIs.

    Built once per process and passed to every component that talks to an
    external service.
    """

    figma_token: str = ""
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""

    @property
    def has_cloudinary(self) -> bool:
        return all((
            self.cloudinary_cloud_name,
            self.cloudinary_api_key,
            self.cloudinary_api_secret,
        ))

    def missing(self) -> List[str]:
        """Names of the env vars that were not provided."""
        names = []
        if not self.figma_token:
            names.append("FIGMA_ACCESS_TOKEN")
        if not self.cloudinary_cloud_name:
            names.append("CLOUDINARY_CLOUD_NAME")
        if not self.cloudinary_api_key:
            names.append("CLOUDINARY_API_KEY")
        if not self.cloudinary_api_secret:
            names.append("CLOUDINARY_API_SECRET")
        return names


def load_config() -> ServiceConfig:
    """Read credentials from the environment."""
    return ServiceConfig(
        figma_token=os.getenv("FIGMA_ACCESS_TOKEN") or os.getenv("FIGMA_TOKEN", ""),
        cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME", ""),
        cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY", ""),
        cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET", ""),
    )


@lru_cache(maxsize=1)
def get_service_config() -> ServiceConfig:
    """Process-wide config, loaded on first use and immutable afterwards."""
    return load_config()
