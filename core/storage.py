"""
Core Module - Key/Value Storage.

============================================================
RESPONSIBILITY
============================================================
Small string-keyed storage shared by shell collaborators
(settings manager, theme manager, survey-name store).

- String keys, string values only
- Change listeners receive (key, old_value, new_value)
- Several consumers sharing one storage model separate tabs
  observing each other's writes

============================================================
"""

import json
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol

from .exceptions import StorageError, wrap_exception


logger = logging.getLogger(__name__)


StorageListener = Callable[[str, Optional[str], Optional[str]], None]


# ============================================================
# STORAGE PROTOCOL
# ============================================================

class KeyValueStorage(Protocol):
    """Protocol every storage backend implements."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...

    def subscribe(self, listener: StorageListener) -> Callable[[], None]:
        ...


# ============================================================
# IN-MEMORY STORAGE
# ============================================================

class MemoryStorage:
    """Process-local storage, the default for tests and scripts."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._listeners: List[StorageListener] = []

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Storage values must be strings, got {type(value).__name__}", key=key)
        old = self._data.get(key)
        self._data[key] = value
        self._persist(key, old)
        self._notify(key, old, value)

    def remove_item(self, key: str) -> None:
        if key not in self._data:
            return
        old = self._data.pop(key)
        self._persist(key, old)
        self._notify(key, old, None)

    def keys(self) -> List[str]:
        return sorted(self._data)

    def subscribe(self, listener: StorageListener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Function removing the listener again
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _persist(self, key: str, old: Optional[str]) -> None:
        """Make the change to key durable; nothing to do in memory."""

    def _notify(self, key: str, old: Optional[str], new: Optional[str]) -> None:
        for listener in list(self._listeners):
            try:
                listener(key, old, new)
            except Exception as e:
                logger.error(f"Storage listener failed for key {key}: {e}")


# ============================================================
# JSON FILE STORAGE
# ============================================================

class JsonFileStorage(MemoryStorage):
    """
    Storage persisted as one flat JSON object on disk.

    The file is read once on construction and rewritten on
    every change. Listeners hear about a change only after it
    reached disk; a failed write leaves memory unchanged.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        super().__init__(self._load())

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise wrap_exception(
                e,
                StorageError,
                message="Storage file could not be read",
                location=str(self._path),
            ) from e
        if not isinstance(data, dict):
            raise StorageError("Storage file must contain a JSON object", location=str(self._path))
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self._data, sort_keys=True, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            raise wrap_exception(
                e,
                StorageError,
                message="Storage file could not be written",
                location=str(self._path),
            ) from e

    def _persist(self, key: str, old: Optional[str]) -> None:
        try:
            self._flush()
        except StorageError:
            if old is None:
                self._data.pop(key, None)
            else:
                self._data[key] = old
            raise


__all__ = [
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "StorageListener",
]
