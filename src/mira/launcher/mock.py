"""Mock launcher and navigator for testing."""

from .software import LaunchError, LaunchResult


class MockNavigator:
    """Records opened URLs."""

    def __init__(self) -> None:
        self._urls: list[str] = []

    def open(self, url: str) -> None:
        """Record the URL."""
        self._urls.append(url)

    @property
    def urls(self) -> list[str]:
        """URLs opened so far."""
        return self._urls.copy()


class MockLauncher:
    """Launcher with a preset outcome."""

    def __init__(self, success: bool = True) -> None:
        """Initialize mock launcher.

        Args:
            success: Whether launches report success
        """
        self._success = success
        self._error_message: str | None = None
        self._launched: list[str] = []

    def set_success(self, success: bool) -> None:
        """Set the reported outcome and clear any pending error."""
        self._success = success
        self._error_message = None

    def set_error(self, message: str) -> None:
        """Make launches raise LaunchError."""
        self._error_message = message

    def launch(self, name: str) -> LaunchResult:
        """Record the request and return the preset outcome."""
        self._launched.append(name)
        if self._error_message:
            raise LaunchError(self._error_message)
        if self._success:
            return LaunchResult(success=True, message=f"Opened {name}.")
        return LaunchResult(success=False, message=f"Could not open {name}.")

    @property
    def launched(self) -> list[str]:
        """Names launched so far."""
        return self._launched.copy()


__all__ = ["MockLauncher", "MockNavigator"]
