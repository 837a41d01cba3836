from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.workforce_system.workforce_system.container import build_container, build_store
from src.workforce_system.workforce_system.storage.bootstrap import seed_sample_data


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    store = build_store(
        backend=getattr(settings, "STORAGE_BACKEND", "file"),
        storage_dir=getattr(settings, "STORAGE_DIR", None),
        db_config=getattr(settings, "DB_CONFIG", None),
    )

    seeded = seed_sample_data(store)
    container = build_container(store=store, admin_password_hash=getattr(settings, "ADMIN_PASSWORD_HASH", ""))
    pins = container.employee_service.backfill_missing_pins()

    print(f"OK: Seeded {', '.join(seeded) or 'nothing'} (new PINs={pins})")
    for e in container.employee_service.list_employees():
        print(f"  {e.name}: PIN {e.pin}")


if __name__ == "__main__":
    main()
