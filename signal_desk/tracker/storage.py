"""
Key-value storage for desk state.

Values are JSON documents addressed by key. The file backend keeps one file
per key, the memory backend is used in tests and for throwaway sessions.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any
import json
import logging
import re

from signal_desk.core.exceptions import StorageError


_MISSING = object()


class Storage(ABC):
    """Abstract key -> JSON store."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value for key, or default when absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Encode and store value under key."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove key. Returns False when it was not present."""

    @abstractmethod
    def keys(self) -> list[str]:
        pass


class MemoryStorage(Storage):
    """In-memory store. Values are kept encoded, like browser localStorage."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key, _MISSING)
        if raw is _MISSING:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt value for key '{key}': {e}") from e

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value, default=str)

    def set_raw(self, key: str, raw: str) -> None:
        """Store an already-encoded value."""
        self._data[key] = raw

    def delete(self, key: str) -> bool:
        return self._data.pop(key, _MISSING) is not _MISSING

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileStorage(Storage):
    """Stores each key as <directory>/<key>.json."""

    KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")

    def __init__(self, directory: str = "./desk_data"):
        """
        Initialize file storage.

        Args:
            directory: Directory for the JSON files (created if missing)
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger(self.__class__.__name__)

    def _path(self, key: str) -> Path:
        if not self.KEY_PATTERN.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt value in {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")

        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2, default=str)
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

        self.logger.debug(f"Stored {key} -> {path}")

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def keys(self) -> list[str]:
        return sorted(p.stem for p in self.directory.glob("*.json"))
