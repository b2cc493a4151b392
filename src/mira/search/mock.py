"""Mock search client for testing."""


class MockSearch:
    """Returns preset links and records every query."""

    def __init__(self, results: dict[str, str] | None = None) -> None:
        """Initialize mock search.

        Args:
            results: Query to link mapping; unknown queries return None
        """
        self._results = dict(results or {})
        self._queries: list[str] = []

    def set_result(self, query: str, link: str | None) -> None:
        """Set (or clear with None) the link returned for a query."""
        if link is None:
            self._results.pop(query, None)
        else:
            self._results[query] = link

    def top_result(self, query: str) -> str | None:
        """Return the preset link for a query."""
        self._queries.append(query)
        return self._results.get(query)

    @property
    def queries(self) -> list[str]:
        """Queries received so far."""
        return self._queries.copy()


__all__ = ["MockSearch"]
