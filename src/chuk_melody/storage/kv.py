"""
Key-value persistence for stores.

Stores keep one JSON document per key. Any backend operation may raise;
read_json and write_json turn failures into a logged default so callers
never see storage errors.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from chuk_melody.encoding import to_json

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String key-value storage, e.g. browser-style local storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store, used by default and in tests."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class FileKeyValueStore:
    """
    Store each key as `<key>.json` in a directory.

    The directory is created on first write.
    """

    def __init__(self, directory: Path):
        """
        Initialize the store.

        Args:
            directory: Directory holding the key files
        """
        self.directory = directory

    def get(self, key: str) -> str | None:
        path = self._get_path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._get_path(key).write_text(value, encoding="utf-8")

    def remove(self, key: str) -> None:
        self._get_path(key).unlink(missing_ok=True)

    def _get_path(self, key: str) -> Path:
        """Get the file path for a key."""
        return self.directory / f"{key}.json"

    def __repr__(self) -> str:
        return f"FileKeyValueStore({str(self.directory)!r})"


def read_json(store: KeyValueStore, key: str) -> Any | None:
    """
    Read and parse the JSON stored under a key.

    Returns:
        Parsed JSON, or None when the key is missing, unreadable or corrupt
    """
    try:
        raw = store.get(key)
    except Exception:
        logger.exception("Failed to read %s", key)
        return None

    if not raw:
        return None

    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        logger.warning("Discarding corrupt JSON stored under %s", key)
        return None


def write_json(store: KeyValueStore, key: str, data: Any) -> bool:
    """
    Serialize and store JSON under a key.

    Returns:
        True on success; failures (quota, permissions) are logged
    """
    try:
        store.set(key, to_json(data))
    except Exception:
        logger.exception("Failed to save %s", key)
        return False
    return True
