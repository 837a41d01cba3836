from __future__ import annotations

import hashlib
import os
import re
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..core.exceptions import ConcurrentUpdateError, StorageError
from .kv import KeyValueStore

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_\-]+$")


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


class FileKeyValueStore(KeyValueStore):
    """One `<key>.json` file per key inside a directory.

    Writes go to a temp file in the same directory and are swapped in with
    os.replace, so a reader never sees a half-written value. The version of a
    key is the digest of its content; conditional writes hold a `<key>.lock`
    file, created exclusively, across the compare and the replace.
    """

    def __init__(self, directory: str | Path, *, lock_timeout: float = 5.0):
        self._dir = Path(directory)
        self._lock_timeout = lock_timeout

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._dir / f"{key}.json"

    @contextmanager
    def _locked(self, key: str) -> Iterator[None]:
        lock_path = self._dir / f".{key}.lock"
        deadline = time.monotonic() + self._lock_timeout
        while True:
            try:
                self._dir.mkdir(parents=True, exist_ok=True)
                fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
                break
            except FileExistsError:
                if time.monotonic() >= deadline:
                    raise StorageError(f"Timed out waiting for the {key} lock")
                time.sleep(0.01)
            except OSError as e:
                raise StorageError(f"Failed to lock {key}: {e}") from e
        try:
            os.close(fd)
            yield
        finally:
            lock_path.unlink(missing_ok=True)

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def get_versioned(self, key: str) -> tuple[Optional[str], Optional[str]]:
        value = self.get(key)
        return value, _digest(value) if value is not None else None

    def _replace(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self._dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    def set(self, key: str, value: str) -> None:
        self._path(key)
        with self._locked(key):
            self._replace(key, value)

    def compare_and_set(self, key: str, value: str, expected_version: Optional[str]) -> str:
        self._path(key)
        with self._locked(key):
            _, current = self.get_versioned(key)
            if current != expected_version:
                raise ConcurrentUpdateError(f"{key} was changed by another writer")
            self._replace(key, value)
        return _digest(value)

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {key}: {e}") from e
