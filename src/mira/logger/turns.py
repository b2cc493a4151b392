"""JSONL log of completed turns."""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..router.turn import TurnResult

logger = logging.getLogger(__name__)


class TurnLogger:
    """Appends each completed turn as one JSON line to `turns.jsonl`."""

    FILENAME = "turns.jsonl"

    def __init__(self, log_dir: Path) -> None:
        """Initialize turn logger.

        Args:
            log_dir: Directory for the log file.
        """
        self._log_dir = log_dir
        log_dir.mkdir(parents=True, exist_ok=True)

    @property
    def log_file(self) -> Path:
        """Path of the log file."""
        return self._log_dir / self.FILENAME

    def write(self, result: "TurnResult") -> None:
        """Append a turn record.

        Write failures are logged; a turn never fails because of its log.
        """
        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                json.dump(result.to_dict(), f)
                f.write("\n")
        except OSError as e:
            logger.warning(f"Failed to write turn log: {e}")

    def read(self) -> list[dict[str, Any]]:
        """Read all logged turns, oldest first.

        Returns:
            List of turn records (malformed lines are skipped).
        """
        if not self.log_file.exists():
            return []

        records = []
        with open(self.log_file, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(json.loads(line))
                except json.JSONDecodeError:
                    logger.debug("Skipping malformed turn log line")
        return records


__all__ = ["TurnLogger"]
