from __future__ import annotations

import json
import logging

from ..core.constants import EMPLOYEES_KEY, LOCATIONS_KEY
from .kv import KeyValueStore
from .mysql_store import MySQLConfig

logger = logging.getLogger(__name__)


KV_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
    store_key VARCHAR(64) NOT NULL PRIMARY KEY,
    store_value LONGTEXT NOT NULL,
    version BIGINT NOT NULL DEFAULT 1,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
) CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci
"""

KV_VERSION_COLUMN_SQL = "ALTER TABLE kv_store ADD COLUMN version BIGINT NOT NULL DEFAULT 1 AFTER store_value"


def ensure_database_exists(db_config: dict) -> None:
    config = MySQLConfig.from_settings(db_config)
    conn = config.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def ensure_kv_table(db_config: dict) -> None:
    ensure_database_exists(db_config)

    config = MySQLConfig.from_settings(db_config)
    conn = config.connect()
    try:
        cur = conn.cursor()
        cur.execute(KV_TABLE_SQL)
        cur.execute(
            "SELECT COUNT(*) FROM information_schema.COLUMNS "
            "WHERE TABLE_SCHEMA=%s AND TABLE_NAME='kv_store' AND COLUMN_NAME='version'",
            (config.database,),
        )
        if cur.fetchone()[0] == 0:
            # tables created before conditional writes existed
            cur.execute(KV_VERSION_COLUMN_SQL)
        conn.commit()
    finally:
        conn.close()
    logger.info("kv_store table ready")


SAMPLE_EMPLOYEES = [
    {
        "id": "1",
        "name": "John Smith",
        "email": "john@erosecurity.com",
        "phone": "+1-555-0101",
        "position": "Security Officer",
        "hireDate": "2023-01-15",
        "isActive": True,
    },
    {
        "id": "2",
        "name": "Sarah Johnson",
        "email": "sarah@erosecurity.com",
        "phone": "+1-555-0102",
        "position": "Senior Security Officer",
        "hireDate": "2022-08-20",
        "isActive": True,
    },
    {
        "id": "3",
        "name": "Mike Davis",
        "email": "mike@erosecurity.com",
        "phone": "+1-555-0103",
        "position": "Security Supervisor",
        "hireDate": "2021-03-10",
        "isActive": True,
    },
]

SAMPLE_LOCATIONS = [
    {
        "id": "1",
        "name": "Downtown Office Complex",
        "address": "123 Business Ave, Downtown",
        "description": "Main office building security",
    },
    {
        "id": "2",
        "name": "Shopping Mall West",
        "address": "456 Mall Dr, West Side",
        "description": "Shopping center patrol",
    },
    {
        "id": "3",
        "name": "Corporate Event Center",
        "address": "789 Event Blvd, City Center",
        "description": "Event security services",
    },
    {
        "id": "4",
        "name": "Residential Complex",
        "address": "321 Residential St, Suburbs",
        "description": "Residential area security",
    },
]


def seed_sample_data(store: KeyValueStore) -> list[str]:
    """Write sample employees/locations for collections that were never created.

    Returns the keys that were seeded. Sample employees have no PIN; the
    employee service backfills one on start-up.
    """

    seeded: list[str] = []
    for key, records in ((EMPLOYEES_KEY, SAMPLE_EMPLOYEES), (LOCATIONS_KEY, SAMPLE_LOCATIONS)):
        if store.get(key) is None:
            store.set(key, json.dumps(records))
            seeded.append(key)
    if seeded:
        logger.info(f"Seeded sample data: {', '.join(seeded)}")
    return seeded
