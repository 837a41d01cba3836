from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.workforce_system.workforce_system.storage.bootstrap import ensure_kv_table


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    if getattr(settings, "STORAGE_BACKEND", "file") != "mysql":
        raise SystemExit("STORAGE_BACKEND is not mysql; nothing to initialize.")

    db_config = dict(settings.DB_CONFIG)
    ensure_kv_table(db_config)
    print(
        "OK: kv_store ready -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
