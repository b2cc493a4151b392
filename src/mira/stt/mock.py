"""Mock transcriber for testing.

Writes a preset transcript artifact instead of running a model.
"""

from pathlib import Path

from .transcriber import ArtifactNaming, TranscriptionError


class MockTranscriber:
    """Mock transcriber for testing.

    Allows setting predetermined transcripts for predictable testing.
    """

    def __init__(self) -> None:
        """Initialize mock transcriber."""
        self._response_text: str = ""
        self._naming: ArtifactNaming = ArtifactNaming.FULL_NAME
        self._write_artifact: bool = True
        self._error_message: str | None = None
        self._submitted: list[Path] = []

    def set_response(self, text: str, naming: ArtifactNaming = ArtifactNaming.FULL_NAME) -> None:
        """Set the transcript written on the next submission.

        Args:
            text: Transcript text
            naming: Artifact naming pattern to write
        """
        self._response_text = text
        self._naming = naming
        self._write_artifact = True
        self._error_message = None

    def set_no_artifact(self) -> None:
        """Accept jobs without ever writing an artifact."""
        self._write_artifact = False

    def set_error(self, message: str) -> None:
        """Set an error to raise on submission.

        Args:
            message: Error message
        """
        self._error_message = message

    def submit(self, clip_path: Path, output_dir: Path) -> None:
        """Write the preset transcript artifact."""
        self._submitted.append(clip_path)

        if self._error_message:
            raise TranscriptionError(self._error_message)

        if self._write_artifact:
            artifact = self._naming.path_for(clip_path, output_dir)
            artifact.write_text(self._response_text, encoding="utf-8")

    @property
    def call_count(self) -> int:
        """Get number of submissions."""
        return len(self._submitted)

    @property
    def submitted(self) -> list[Path]:
        """Clips submitted so far."""
        return self._submitted.copy()


__all__ = ["MockTranscriber"]
