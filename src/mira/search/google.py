"""Google Custom Search integration.

Looks up the first result link for a query using the Custom Search JSON
API. Any failure yields None so callers can fall back to a plain search
URL.
"""

import logging
import os

import httpx

logger = logging.getLogger(__name__)

GOOGLE_CSE_URL = "https://www.googleapis.com/customsearch/v1"
GOOGLE_CSE_TIMEOUT = 5.0  # seconds


class GoogleSearch:
    """Top-result lookup via Google Custom Search.

    API docs: https://developers.google.com/custom-search/v1/reference/rest/v1/cse/list
    """

    def __init__(
        self,
        api_key: str | None = None,
        engine_id: str | None = None,
        timeout: float = GOOGLE_CSE_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize Google search client.

        Args:
            api_key: API key. Falls back to GOOGLE_CSE_KEY.
            engine_id: Search engine ID. Falls back to GOOGLE_CSE_CX.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._api_key = api_key or os.environ.get("GOOGLE_CSE_KEY")
        self._engine_id = engine_id or os.environ.get("GOOGLE_CSE_CX")
        self._timeout = timeout
        self._transport = transport

        if self.is_available:
            logger.info("Google Custom Search client initialized")
        else:
            logger.warning("GOOGLE_CSE_KEY/GOOGLE_CSE_CX not set - result lookup unavailable")

    @property
    def is_available(self) -> bool:
        """Check if both credentials are configured."""
        return bool(self._api_key and self._engine_id)

    def top_result(self, query: str) -> str | None:
        """Return the first result link for a query.

        Args:
            query: Search query

        Returns:
            Result URL, or None without credentials, results or on error
        """
        if not self.is_available or not query.strip():
            return None

        params = {"key": self._api_key, "cx": self._engine_id, "num": 1, "q": query}

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(GOOGLE_CSE_URL, params=params)
                response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Google search HTTP error {e.response.status_code} for {query!r}")
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Google search failed for {query!r}: {e}")
            return None

        items = data.get("items") if isinstance(data, dict) else None
        if not items:
            logger.debug(f"No search results for {query!r}")
            return None

        link = items[0].get("link")
        return link if isinstance(link, str) and link else None


__all__ = ["GoogleSearch"]
