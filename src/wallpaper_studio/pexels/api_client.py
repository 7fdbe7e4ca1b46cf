"""Pexels API v1 client for wallpaper search."""
from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv

from ..config import SearchSpec
from ..errors import NetworkError
from ..models import ImageCandidate

logger = logging.getLogger(__name__)

# Pexels API v1 base URL
PEXELS_API_BASE = "https://api.pexels.com/v1"


class PexelsAPIError(NetworkError):
    """Base exception for Pexels API errors."""
    pass


class PexelsRateLimitError(PexelsAPIError):
    """Rate limit exceeded error."""

    def __init__(self, message: str, retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


class PexelsAuthenticationError(PexelsAPIError):
    """Authentication error."""
    pass


@dataclass
class PexelsSettings:
    """Runtime settings required to call the Pexels API."""

    api_key: str

    @classmethod
    def from_env(cls) -> "PexelsSettings":
        """Load settings from environment variables or .env.

        Raises:
            RuntimeError: If no API key is available.
        """

        load_dotenv()
        api_key = os.getenv("PEXELS_API_KEY")
        if not api_key:
            raise RuntimeError("PEXELS_API_KEY is not set. Create a .env or export the variable.")
        return cls(api_key=api_key)


class PexelsAPIClient:
    """Pexels search client.

    Each search picks a page uniformly at random from the configured range so that
    repeated refreshes surface different photos.
    """

    def __init__(
        self,
        api_key: str,
        search: Optional[SearchSpec] = None,
        session: Optional[requests.Session] = None,
        rng: Optional[random.Random] = None,
        base_url: str = PEXELS_API_BASE,
    ):
        """Initialize Pexels API client.

        Args:
            api_key: Pexels API key
            search: Query defaults, page size and random page range
            session: requests session to reuse (a new one is created if omitted)
            rng: Random source for page selection
            base_url: API root, overridable for tests
        """
        self.api_key = api_key
        self.search = search or SearchSpec()
        self.session = session or requests.Session()
        self.rng = rng or random.Random()
        self.base_url = base_url.rstrip("/")

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers with authentication.

        Returns:
            Headers dict
        """
        return {"Authorization": self.api_key}

    def _handle_response(self, response: requests.Response) -> Dict[Any, Any]:
        """Handle API response and errors.

        Args:
            response: requests Response object

        Returns:
            Parsed JSON response

        Raises:
            PexelsRateLimitError: Rate limit exceeded
            PexelsAuthenticationError: Authentication failed
            PexelsAPIError: Other API errors
        """
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise PexelsRateLimitError(
                "Rate limit exceeded.",
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )

        if response.status_code in (401, 403):
            raise PexelsAuthenticationError(
                f"Authentication failed (status {response.status_code}). Check PEXELS_API_KEY."
            )

        if not 200 <= response.status_code < 300:
            try:
                error_msg = response.json().get("error", response.text)
            except ValueError:
                error_msg = response.text
            raise PexelsAPIError(
                f"API request failed (status {response.status_code}): {error_msg}"
            )

        try:
            return response.json()
        except ValueError as exc:
            raise PexelsAPIError("API response was not valid JSON") from exc

    def _request(self, method: str, endpoint: str, params: Optional[Dict] = None) -> Dict[Any, Any]:
        """Make API request with error handling.

        Raises:
            PexelsAPIError: API request failed
            NetworkError: Transport failure
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug("%s %s %s", method, url, params)

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=self._get_headers(),
                params=params,
            )
        except requests.RequestException as exc:
            raise NetworkError(f"Request to {url} failed: {exc}") from exc

        return self._handle_response(response)

    def random_page(self) -> int:
        """Draw a page number uniformly from the configured inclusive range."""
        low, high = self.search.page_range
        return self.rng.randint(low, high)

    def search_images(self, query: Optional[str] = None, page: Optional[int] = None) -> List[ImageCandidate]:
        """Search photos by keyword.

        Args:
            query: Search keywords (defaults to the configured query)
            page: Page number; a random page from the configured range when omitted

        Returns:
            Candidates in provider order

        Raises:
            NetworkError: Transport failure, non-2xx status or malformed payload
        """
        query = query or self.search.query
        page = page if page is not None else self.random_page()
        params = {
            "query": query,
            "per_page": self.search.per_page,
            "page": page,
            "orientation": self.search.orientation,
            "size": self.search.size,
        }

        logger.info("Searching Pexels for '%s' (page %d)", query, page)
        data = self._request("GET", "/search", params=params)

        photos = data.get("photos") if isinstance(data, dict) else None
        if not isinstance(photos, list):
            raise PexelsAPIError("API response is missing the 'photos' list")

        candidates = []
        for raw in photos:
            try:
                candidates.append(ImageCandidate.from_dict(raw))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed photo entry: %s", exc)
        logger.info("Received %d photos", len(candidates))
        return candidates


__all__ = [
    "PEXELS_API_BASE",
    "PexelsSettings",
    "PexelsAPIClient",
    "PexelsAPIError",
    "PexelsRateLimitError",
    "PexelsAuthenticationError",
]
