"""OpenAI Whisper command-line transcriber.

Runs `whisper <clip> --model <m> --output_dir <dir> --output_format txt`.
"""

import logging
import subprocess
from pathlib import Path

from .transcriber import TranscriptionError

logger = logging.getLogger(__name__)


class WhisperCLITranscriber:
    """Transcriber that shells out to the whisper CLI."""

    def __init__(
        self,
        model: str = "medium",
        executable: str = "whisper",
        timeout_s: float = 120.0,
    ) -> None:
        """Initialize CLI transcriber.

        Args:
            model: Whisper model name
            executable: CLI executable name or path
            timeout_s: Maximum job runtime
        """
        self._model = model
        self._executable = executable
        self._timeout_s = timeout_s

    def build_command(self, clip_path: Path, output_dir: Path) -> list[str]:
        """Build the CLI invocation for a clip."""
        return [
            self._executable,
            str(clip_path),
            "--model",
            self._model,
            "--output_dir",
            str(output_dir),
            "--output_format",
            "txt",
        ]

    def submit(self, clip_path: Path, output_dir: Path) -> None:
        """Run the CLI to completion.

        Raises:
            TranscriptionError: If the executable is missing, fails or times out
        """
        cmd = self.build_command(clip_path, output_dir)
        logger.debug(f"Running {' '.join(cmd)}")

        try:
            subprocess.run(cmd, check=True, capture_output=True, timeout=self._timeout_s)
        except FileNotFoundError as e:
            raise TranscriptionError(f"whisper executable not found: {self._executable}") from e
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode(errors="replace") if e.stderr else ""
            raise TranscriptionError(f"whisper exited with {e.returncode}: {stderr[:200]}") from e
        except subprocess.TimeoutExpired as e:
            raise TranscriptionError(f"whisper timed out after {self._timeout_s}s") from e


__all__ = ["WhisperCLITranscriber"]
