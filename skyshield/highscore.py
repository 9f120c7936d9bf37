"""High-score persistence: read once at startup, written through when beaten."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SCORE_KEY = "skyshield_high_score"
DEFAULT_PATH = Path.home() / ".skyshield" / "scores.json"


class MemoryHighScoreStore:
    """Keeps the score in memory only. Used by tests and headless runs."""

    def __init__(self, value: int = 0):
        self.value = value

    def load(self) -> int:
        return self.value

    def save(self, value: int):
        self.value = value


class HighScoreStore:
    """
    JSON file holding ``{"skyshield_high_score": <int>}``.

    A missing or unreadable file reads as zero; a failed write is logged and
    the game carries on with the in-memory value.
    """

    def __init__(self, path=DEFAULT_PATH):
        self.path = Path(path)

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return max(0, int(data.get(SCORE_KEY, 0)))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("High score file %s unreadable: %s", self.path, e)
            return 0

    def save(self, value: int):
        data = {}
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
                if not isinstance(data, dict):
                    data = {}
            except (OSError, ValueError):
                data = {}
        data[SCORE_KEY] = int(value)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save high score to %s: %s", self.path, e)
            return
        logger.info("High score %d saved to %s", value, self.path)
