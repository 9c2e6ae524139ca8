"""Persistence of the user's class selection.

SelectionStore keeps the selected "course - section" keys in a single JSON
file and rewrites it on every change. A missing or corrupt file is treated
as an empty selection.
"""

import json
from collections.abc import Iterable
from pathlib import Path

from src.timetable.logging import get_logger
from src.timetable.models import TimetableSnapshot

logger = get_logger(__name__)


class SelectionStore:
    """Loads and saves the selected classes under state_dir."""

    FILENAME = "selected_classes.json"

    def __init__(self, state_dir: str = "data/state") -> None:
        """Initialize SelectionStore.

        Args:
            state_dir: Directory to store the selection file in.
        """
        self.state_dir = Path(state_dir)
        self.state_file = self.state_dir / self.FILENAME

        self.state_dir.mkdir(parents=True, exist_ok=True)

        logger.debug("selection_store_initialized", state_file=str(self.state_file))

    def load(self) -> list[str]:
        """Read the saved selection.

        Returns:
            Selected class keys in saved order, or [] if absent or corrupt.
        """
        if not self.state_file.exists():
            logger.debug("selection_load", result="missing")
            return []

        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("selection_load_failed", error=str(e))
            return []

        if not isinstance(data, list):
            logger.warning("selection_load_failed", error="not a JSON list")
            return []

        return _dedupe(str(item) for item in data)

    def save(self, selection: Iterable[str]) -> list[str]:
        """Overwrite the saved selection.

        Returns:
            The de-duplicated selection that was written.
        """
        keys = _dedupe(selection)
        self.state_file.write_text(json.dumps(keys), encoding="utf-8")
        logger.debug("selection_saved", path=str(self.state_file), count=len(keys))
        return keys

    def add(self, *keys: str) -> list[str]:
        return self.save([*self.load(), *keys])

    def remove(self, *keys: str) -> list[str]:
        drop = set(keys)
        return self.save(k for k in self.load() if k not in drop)

    def toggle(self, key: str) -> list[str]:
        current = self.load()
        if key in current:
            return self.save(k for k in current if k != key)
        return self.save([*current, key])

    def clear(self) -> None:
        """Delete the saved selection file."""
        if self.state_file.exists():
            self.state_file.unlink()
            logger.info("selection_cleared", path=str(self.state_file))
        else:
            logger.debug("selection_clear_skipped", reason="file_not_found")


def _dedupe(keys: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(keys))


def available_classes(snapshot: TimetableSnapshot) -> list[str]:
    """Sorted unique "course - section" keys present in a snapshot."""
    return sorted({o.class_key for o in snapshot.occurrences})


def search_classes(classes: Iterable[str], query: str) -> list[str]:
    """Case-insensitive substring filter over class keys."""
    needle = query.lower()
    return [c for c in classes if needle in c.lower()]
