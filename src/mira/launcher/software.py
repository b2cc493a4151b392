"""Native application launcher.

Maps spoken application names to executables and starts them with the
platform's launcher command.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol

from ..config.profiles import Platform, detect_platform

logger = logging.getLogger(__name__)


class LaunchError(Exception):
    """Raised when the launcher itself cannot run."""


@dataclass
class LaunchResult:
    """Outcome of a launch request.

    Attributes:
        success: Whether the application was started
        message: Human-readable outcome
    """

    success: bool
    message: str


# Ways a user might say each application, keyed by canonical name.
SOFTWARE_ALIASES: dict[str, list[str]] = {
    "notepad": ["notepad", "note pad"],
    "calculator": ["calculator", "calc"],
    "paint": ["paint", "mspaint", "microsoft paint"],
    "wordpad": ["wordpad", "write", "word pad"],
    "explorer": ["explorer", "file explorer", "windows explorer"],
    "cmd": ["cmd", "command prompt", "terminal", "dos"],
    "powershell": ["powershell", "ps"],
    "task_manager": ["task manager", "taskmgr"],
    "control_panel": ["control panel"],
    "settings": ["settings", "windows settings"],
    "clock": ["clock", "alarm", "alarms and clock"],
    "word": ["word", "ms word", "microsoft word"],
    "excel": ["excel", "ms excel", "microsoft excel"],
    "powerpoint": ["powerpoint", "ppt", "ms powerpoint"],
    "outlook": ["outlook", "ms outlook", "microsoft outlook", "email"],
    "onenote": ["onenote", "ms onenote", "microsoft onenote"],
    "access": ["access", "ms access", "microsoft access"],
    "publisher": ["publisher", "ms publisher", "microsoft publisher"],
    "chrome": ["chrome", "google chrome", "browser"],
    "edge": ["edge", "microsoft edge"],
    "brave": ["brave", "brave browser"],
    "vscode": ["vscode", "vs code", "visual studio code", "code"],
    "gitbash": ["git bash", "gitbash"],
    "teams": ["teams", "microsoft teams", "ms teams", "m s teams"],
    "whatsapp": ["whatsapp", "whatsapp desktop"],
    "telegram": ["telegram"],
    "copilot": ["copilot", "microsoft copilot", "github copilot", "co-pilot"],
    "steam": ["steam"],
    "epic": ["epic", "epic games", "epic games launcher"],
    "rockstar": ["rockstar", "rockstar games", "rockstar games launcher"],
    "rust": ["rust"],
    "adobe_reader": ["acrobat", "adobe reader", "acrobat reader", "pdf reader"],
    "getscreen": ["getscreen", "remote desktop", "getscreen remote", "get screen"],
    "chatgpt": ["chatgpt", "openai chatgpt", "gpt", "chat gpt"],
}

# Executable (or URI) started for each canonical name.
SOFTWARE_MAP: dict[str, str] = {
    "notepad": "notepad.exe",
    "calculator": "calc.exe",
    "paint": "mspaint.exe",
    "wordpad": "write.exe",
    "explorer": "explorer.exe",
    "cmd": "cmd.exe",
    "powershell": "powershell.exe",
    "task_manager": "taskmgr.exe",
    "control_panel": "control.exe",
    "settings": "ms-settings:",
    "clock": "ms-clock:",
    "word": "winword.exe",
    "excel": "excel.exe",
    "powerpoint": "powerpnt.exe",
    "outlook": "outlook.exe",
    "onenote": "onenote.exe",
    "access": "msaccess.exe",
    "publisher": "mspub.exe",
    "chrome": "chrome.exe",
    "edge": "msedge.exe",
    "brave": "brave.exe",
    "vscode": "code",
    "gitbash": "git-bash.exe",
    "teams": "teams.exe",
    "whatsapp": "whatsapp.exe",
    "telegram": "telegram.exe",
    "copilot": "copilot.exe",
    "steam": "steam.exe",
    "epic": "EpicGamesLauncher.exe",
    "rockstar": "Launcher.exe",
    "rust": "RustClient.exe",
    "adobe_reader": "AcroRd32.exe",
    "getscreen": "getscreen.me",
    "chatgpt": "chatgpt.exe",
}


def find_executable(name: str) -> str | None:
    """Resolve a spoken application name to its executable.

    An alias matches when it appears anywhere in the lower-cased name.
    Canonical names are tried in table order.

    Args:
        name: Spoken application name

    Returns:
        Executable name, or None for unknown applications
    """
    text = name.lower()
    for canonical, aliases in SOFTWARE_ALIASES.items():
        if any(alias in text for alias in aliases):
            return SOFTWARE_MAP[canonical]
    return None


class Launcher(Protocol):
    """Interface for starting native applications."""

    def launch(self, name: str) -> LaunchResult:
        """Start an application by spoken name.

        Raises:
            LaunchError: If the launcher cannot run at all
        """
        ...


class NativeLauncher:
    """Starts applications with the host platform's launcher command."""

    def __init__(self, platform: Platform | None = None, timeout_s: float = 10.0) -> None:
        """Initialize launcher.

        Args:
            platform: Host platform (detected when None)
            timeout_s: Maximum time to wait for the launcher command
        """
        self._platform = platform or detect_platform()
        self._timeout_s = timeout_s

    def build_command(self, executable: str) -> list[str]:
        """Build the launcher command for an executable."""
        if self._platform == Platform.WINDOWS:
            return ["cmd", "/c", "start", "", executable]
        if self._platform == Platform.MACOS:
            return ["open", "-a", executable.removesuffix(".exe")]
        return ["xdg-open", executable]

    def launch(self, name: str) -> LaunchResult:
        """Start an application by spoken name.

        Args:
            name: Spoken application name

        Returns:
            LaunchResult describing the outcome

        Raises:
            LaunchError: If the launcher command cannot be executed
        """
        if not name.strip():
            return LaunchResult(success=False, message="Software name is required.")

        executable = find_executable(name)
        if executable is None:
            return LaunchResult(success=False, message=f"I don't know how to open {name}.")

        cmd = self.build_command(executable)
        logger.info(f"Launching {name} via {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self._timeout_s)
        except FileNotFoundError as e:
            raise LaunchError(f"Launcher command not available: {cmd[0]}") from e
        except (subprocess.TimeoutExpired, OSError) as e:
            raise LaunchError(f"Launcher failed for {name}: {e}") from e

        if result.returncode != 0:
            logger.warning(f"Launcher exited with {result.returncode}: {result.stderr.strip()}")
            return LaunchResult(success=False, message=f"Could not open {name}.")
        if "cannot find" in (result.stderr or "").lower():
            return LaunchResult(success=False, message=f"Could not find {name}.")

        return LaunchResult(success=True, message=f"Opened {name}.")


__all__ = [
    "LaunchError",
    "LaunchResult",
    "Launcher",
    "NativeLauncher",
    "SOFTWARE_ALIASES",
    "SOFTWARE_MAP",
    "find_executable",
]
