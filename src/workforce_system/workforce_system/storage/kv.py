from __future__ import annotations

import threading
from typing import Optional, Protocol

from ..core.exceptions import ConcurrentUpdateError


class KeyValueStore(Protocol):
    """Local key-value persistence holding one JSON string per key.

    Implementations raise StorageError when the backend fails; a missing key
    is not an error and reads back as None.

    Versions are opaque tokens (None for an absent key). `compare_and_set`
    writes only if the key still carries `expected_version` and raises
    ConcurrentUpdateError otherwise.
    """

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def get_versioned(self, key: str) -> tuple[Optional[str], Optional[str]]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def compare_and_set(self, key: str, value: str, expected_version: Optional[str]) -> str:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store used by tests and the `memory` backend."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self._versions: dict[str, int] = {k: 1 for k in self._data}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def get_versioned(self, key: str) -> tuple[Optional[str], Optional[str]]:
        with self._lock:
            if key not in self._data:
                return None, None
            return self._data[key], str(self._versions[key])

    def _write(self, key: str, value: str) -> str:
        self._data[key] = value
        self._versions[key] = self._versions.get(key, 0) + 1
        return str(self._versions[key])

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._write(key, value)

    def compare_and_set(self, key: str, value: str, expected_version: Optional[str]) -> str:
        with self._lock:
            current = str(self._versions[key]) if key in self._data else None
            if current != expected_version:
                raise ConcurrentUpdateError(f"{key} was changed by another writer")
            return self._write(key, value)

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)
            self._versions.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)
