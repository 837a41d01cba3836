from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from ..core.exceptions import ConcurrentUpdateError, StorageError
from .kv import KeyValueStore

logger = logging.getLogger(__name__)


class JsonCollection:
    """A named JSON array of records stored under one key.

    Every feature repository goes through this class, so the read-modify-write
    cycle and the read-failure policy live in one place.

    Read policy: when `strict_reads` is off, a failed or corrupt read is logged
    and returned as an empty list. A transient failure is then indistinguishable
    from "no data yet", which is why `mutate()` always reads strictly: a
    degraded read must never be written back over the real collection.

    Write policy: `mutate()` writes with compare-and-set against the version it
    read. If another writer (another collection object, thread or process)
    saved the key in between, ConcurrentUpdateError is raised and nothing is
    written.
    """

    def __init__(self, store: KeyValueStore, key: str, *, strict_reads: bool = False):
        self._store = store
        self._key = key
        self._strict_reads = strict_reads
        self._lock = threading.RLock()

    @property
    def key(self) -> str:
        return self._key

    def exists(self) -> bool:
        return self._store.get(self._key) is not None

    def _decode(self, raw: Optional[str]) -> list[dict]:
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Collection {self._key} is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"Collection {self._key} is not a JSON array")
        return [r for r in data if isinstance(r, dict)]

    def load(self, *, strict: Optional[bool] = None) -> list[dict]:
        strict = self._strict_reads if strict is None else strict
        try:
            return self._decode(self._store.get(self._key))
        except StorageError as e:
            if strict:
                raise
            logger.warning(f"Reading {self._key} failed, treating it as empty: {e}")
            return []

    def save(self, records: list[dict]) -> None:
        """Unconditional write; used for seeding and tests."""
        payload = json.dumps(records, ensure_ascii=False)
        try:
            self._store.set(self._key, payload)
        except StorageError as e:
            logger.error(f"Writing {self._key} failed: {e}")
            raise

    @contextmanager
    def mutate(self) -> Iterator[list[dict]]:
        """Yield the records for in-place changes and write them back.

        Nothing is written if the body raises or if the collection changed
        since it was read.
        """
        with self._lock:
            raw, version = self._store.get_versioned(self._key)
            records = self._decode(raw)
            yield records
            payload = json.dumps(records, ensure_ascii=False)
            try:
                self._store.compare_and_set(self._key, payload, version)
            except ConcurrentUpdateError:
                logger.warning(f"Concurrent update on {self._key}; write rejected")
                raise
            except StorageError as e:
                logger.error(f"Writing {self._key} failed: {e}")
                raise
