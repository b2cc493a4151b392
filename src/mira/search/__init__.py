"""Web search module for Mira Voice Assistant.

Resolves queries to a single top result link.
"""

from typing import TYPE_CHECKING, Protocol

from .google import GoogleSearch
from .mock import MockSearch

if TYPE_CHECKING:
    from ..config import SearchConfig


class WebSearch(Protocol):
    """Interface for top-result lookups."""

    def top_result(self, query: str) -> str | None:
        """Return the first result URL or None."""
        ...


def create_search_client(
    config: "SearchConfig | None" = None,
    use_mock: bool = False,
) -> WebSearch:
    """Create a search client.

    Args:
        config: Search configuration
        use_mock: If True, return mock implementation

    Returns:
        WebSearch implementation. A disabled config gets a MockSearch
        with no results, so every lookup falls back to plain URLs.
    """
    if use_mock or (config is not None and not config.enabled):
        return MockSearch()
    if config is None:
        return GoogleSearch()
    return GoogleSearch(timeout=config.timeout_s)


__all__ = ["GoogleSearch", "MockSearch", "WebSearch", "create_search_client"]
