"""Session-scoped key/value storage for particle snapshots.

A session store outlives a single page but not the session: every page shown
by the same ViewManager shares one store, and the store is cleared when the
session ends.

Two stores are provided:
- MemorySessionStore: keeps values in a dict (default, and used by tests)
- FileSessionStore: writes one ``<key>.json`` file per key to a directory,
  so snapshots can be inspected on disk while the window is open
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class SessionStore(ABC):
    """Abstract base class for session stores.

    Values are opaque strings. ``get`` returns None for a key that was never
    written or has been cleared.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Read the value stored under ``key``."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Forget ``key``. No-op if it is not stored."""

    @abstractmethod
    def clear(self) -> None:
        """End the session: forget every key."""


class MemorySessionStore(SessionStore):
    """Session store backed by a dict."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        """Read the value stored under ``key``."""
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        self._values[key] = value

    def remove(self, key: str) -> None:
        """Forget ``key``."""
        self._values.pop(key, None)

    def clear(self) -> None:
        """Forget every key."""
        self._values.clear()


class FileSessionStore(SessionStore):
    """Session store that keeps each key in a JSON file.

    Attributes:
        session_dir: Directory holding one ``<key>.json`` file per key.
    """

    def __init__(self, session_dir: Path) -> None:
        """Initialize the store, creating the directory if needed.

        Args:
            session_dir: Directory to keep session files in.
        """
        self.session_dir = session_dir
        self.session_dir.mkdir(parents=True, exist_ok=True)

    def get(self, key: str) -> str | None:
        """Read the value stored under ``key``.

        Raises:
            OSError: If the file exists but cannot be read.
        """
        path = self._get_path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``.

        The value is written to a temporary file first and then moved into
        place, so a reader never sees a half-written snapshot.

        Raises:
            OSError: If the file cannot be written.
        """
        path = self._get_path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)
        logger.debug("Wrote session key %s to %s", key, path)

    def remove(self, key: str) -> None:
        """Delete the file for ``key``."""
        self._get_path(key).unlink(missing_ok=True)

    def clear(self) -> None:
        """Delete every session file in the directory."""
        for path in self.session_dir.glob("*.json"):
            path.unlink(missing_ok=True)
        logger.info("Cleared session store at %s", self.session_dir)

    def _get_path(self, key: str) -> Path:
        """Get the file path for a key.

        Raises:
            ValueError: If the key could escape the session directory.
        """
        if not _KEY_PATTERN.match(key):
            msg = f"Invalid session key: {key!r}"
            raise ValueError(msg)
        return self.session_dir / f"{key}.json"
