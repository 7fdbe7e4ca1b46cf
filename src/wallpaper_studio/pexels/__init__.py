"""Pexels stock-photo search integration."""

from .api_client import (
    PexelsAPIClient,
    PexelsAPIError,
    PexelsAuthenticationError,
    PexelsRateLimitError,
    PexelsSettings,
)

__all__ = [
    "PexelsAPIClient",
    "PexelsAPIError",
    "PexelsAuthenticationError",
    "PexelsRateLimitError",
    "PexelsSettings",
]
