"""Legacy per-article flags kept by older releases.

Older releases stored read and favorite flags as plain number lists in a
preferences file instead of the record store. They are read once, when the
record store is populated for the first time.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class LegacyPreferences(Protocol):
    def check_read(self, number: int) -> bool: ...

    def check_favorite(self, number: int) -> bool: ...


class NoLegacyPreferences:
    """Preference store for installs without legacy data."""

    def check_read(self, number: int) -> bool:
        return False

    def check_favorite(self, number: int) -> bool:
        return False


class JsonLegacyPreferences:
    """Legacy flags read from a JSON file.

    Expected layout::

        {"read": [1, 2, 5], "favorites": [2]}
    """

    def __init__(self, path: Path):
        self.path = path
        self._read: set[int] = set()
        self._favorites: set[int] = set()
        if path.exists():
            data = json.loads(path.read_text())
            self._read = {int(n) for n in data.get("read", [])}
            self._favorites = {int(n) for n in data.get("favorites", [])}
            logger.debug(
                f"Loaded legacy flags: {len(self._read)} read, "
                f"{len(self._favorites)} favorites"
            )

    def check_read(self, number: int) -> bool:
        return number in self._read

    def check_favorite(self, number: int) -> bool:
        return number in self._favorites
