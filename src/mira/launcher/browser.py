"""Browser navigation."""

import logging
import webbrowser
from typing import Protocol

logger = logging.getLogger(__name__)


class Navigator(Protocol):
    """Interface for opening URLs."""

    def open(self, url: str) -> None:
        """Open a URL for the user."""
        ...


class BrowserNavigator:
    """Opens URLs in the system web browser."""

    def open(self, url: str) -> None:
        """Open a URL in a new browser tab."""
        logger.info(f"Opening {url}")
        if not webbrowser.open_new_tab(url):
            logger.warning(f"No browser available to open {url}")


__all__ = ["BrowserNavigator", "Navigator"]
