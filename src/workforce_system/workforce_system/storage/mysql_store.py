from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import mysql.connector

from ..core.exceptions import ConcurrentUpdateError, StorageError
from .kv import KeyValueStore


@dataclass(frozen=True)
class MySQLConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_settings(cls, db_config: dict) -> "MySQLConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "workforce_db")),
        )

    def connect(self, *, with_database: bool = True):
        kwargs = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "use_pure": True,
        }
        if with_database:
            kwargs["database"] = self.database
        return mysql.connector.connect(**kwargs)


class MySQLKeyValueStore(KeyValueStore):
    """Key-value store backed by the `kv_store` table.

    Used when several devices or workers share one data set; the table is
    created by `bootstrap.ensure_kv_table`. Connections are short-lived, one
    per operation. Each row carries a `version` counter; conditional writes
    are a single `UPDATE ... WHERE version=%s`, so two workers cannot both
    commit a write based on the same read.
    """

    def __init__(self, config: MySQLConfig):
        self._config = config

    @contextmanager
    def _cursor(self, action: str, key: str) -> Iterator:
        try:
            conn = self._config.connect()
        except mysql.connector.Error as e:
            raise StorageError(f"Failed to {action} {key}: {e}") from e
        try:
            cur = conn.cursor(dictionary=True)
            try:
                yield cur
                conn.commit()
            finally:
                cur.close()
        except mysql.connector.Error as e:
            conn.rollback()
            raise StorageError(f"Failed to {action} {key}: {e}") from e
        finally:
            conn.close()

    def get(self, key: str) -> Optional[str]:
        value, _ = self.get_versioned(key)
        return value

    def get_versioned(self, key: str) -> tuple[Optional[str], Optional[str]]:
        with self._cursor("read", key) as cur:
            cur.execute("SELECT store_value, version FROM kv_store WHERE store_key=%s", (key,))
            row = cur.fetchone()
        if not row:
            return None, None
        return row["store_value"], str(row["version"])

    def set(self, key: str, value: str) -> None:
        with self._cursor("write", key) as cur:
            cur.execute(
                """
                INSERT INTO kv_store(store_key, store_value, version)
                VALUES(%s,%s,1)
                ON DUPLICATE KEY UPDATE store_value=VALUES(store_value), version=version+1
                """,
                (key, value),
            )

    def compare_and_set(self, key: str, value: str, expected_version: Optional[str]) -> str:
        if expected_version is None:
            try:
                with self._cursor("write", key) as cur:
                    cur.execute(
                        "INSERT INTO kv_store(store_key, store_value, version) VALUES(%s,%s,1)",
                        (key, value),
                    )
            except StorageError as e:
                if isinstance(e.__cause__, mysql.connector.IntegrityError):
                    raise ConcurrentUpdateError(f"{key} was created by another writer") from e
                raise
            return "1"

        with self._cursor("write", key) as cur:
            cur.execute(
                "UPDATE kv_store SET store_value=%s, version=version+1 WHERE store_key=%s AND version=%s",
                (value, key, int(expected_version)),
            )
            if cur.rowcount != 1:
                raise ConcurrentUpdateError(f"{key} was changed by another writer")
        return str(int(expected_version) + 1)

    def remove(self, key: str) -> None:
        with self._cursor("remove", key) as cur:
            cur.execute("DELETE FROM kv_store WHERE store_key=%s", (key,))
