"""Launcher module for Mira Voice Assistant.

Opens native applications and web pages.
"""

from .browser import BrowserNavigator, Navigator
from .mock import MockLauncher, MockNavigator
from .software import (
    SOFTWARE_ALIASES,
    SOFTWARE_MAP,
    LaunchError,
    Launcher,
    LaunchResult,
    NativeLauncher,
    find_executable,
)


def create_launcher(use_mock: bool = False) -> Launcher:
    """Create the application launcher for this host."""
    if use_mock:
        return MockLauncher()
    return NativeLauncher()


def create_navigator(use_mock: bool = False) -> Navigator:
    """Create the URL navigator for this host."""
    if use_mock:
        return MockNavigator()
    return BrowserNavigator()


__all__ = [
    "BrowserNavigator",
    "LaunchError",
    "LaunchResult",
    "Launcher",
    "MockLauncher",
    "MockNavigator",
    "NativeLauncher",
    "Navigator",
    "SOFTWARE_ALIASES",
    "SOFTWARE_MAP",
    "create_launcher",
    "create_navigator",
    "find_executable",
]
