from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .checkins.controller import register as register_checkins
from .common.web import register_error_handlers
from .core.exceptions import StorageError
from .container import build_container, build_geocoder, build_store
from .employees.controller import register as register_employees
from .events.controller import register as register_events
from .locations.controller import register as register_locations
from .reports.controller import register as register_reports
from .shifts.controller import register as register_shifts
from .storage.bootstrap import ensure_kv_table, seed_sample_data
from .storage.kv import KeyValueStore
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(*, store: Optional[KeyValueStore] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    backend = getattr(settings, "STORAGE_BACKEND", "file")
    db_config = getattr(settings, "DB_CONFIG", None)
    if store is None:
        if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            ensure_kv_table(db_config)
        store = build_store(backend=backend, storage_dir=getattr(settings, "STORAGE_DIR", None), db_config=db_config)
    logger.debug(f"settings={settings_module} storage={backend}")

    if bool(getattr(settings, "SEED_SAMPLE_DATA", False)):
        seed_sample_data(store)

    container = build_container(
        store=store,
        admin_password_hash=getattr(settings, "ADMIN_PASSWORD_HASH", ""),
        strict_reads=bool(getattr(settings, "STRICT_STORAGE_READS", False)),
        geocoder=build_geocoder(
            enabled=bool(getattr(settings, "REVERSE_GEOCODING", False)),
            base_url=getattr(settings, "NOMINATIM_URL", None),
        ),
    )

    # Lazy backfills for records written by older versions of the app.
    try:
        container.employee_service.backfill_missing_pins()
        container.shift_service.backfill_employee_ids()
        container.session.load()
    except StorageError as e:
        logger.error(f"Start-up load skipped: {e}")

    app.extensions["workforce"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_employees(app, container)
    register_locations(app, container)
    register_shifts(app, container)
    register_checkins(app, container)
    register_events(app, container)
    register_reports(app, container)

    return app
