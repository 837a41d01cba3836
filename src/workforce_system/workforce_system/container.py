from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .checkins.geolocation import NominatimReverseGeocoder, NullReverseGeocoder, ReverseGeocoder
from .checkins.json_checkin_repository import JsonCheckInRepository
from .checkins.service import CheckInService
from .core.constants import CHECKINS_KEY, EMPLOYEES_KEY, EVENTS_KEY, LOCATIONS_KEY, SHIFTS_KEY
from .core.exceptions import ValidationError
from .employees.json_employee_repository import JsonEmployeeRepository
from .employees.service import EmployeeService
from .events.json_event_repository import JsonEventRepository
from .events.service import EventService
from .locations.json_location_repository import JsonLocationRepository
from .locations.service import LocationService
from .reports.service import TimeReportService
from .shifts.json_shift_repository import JsonShiftRepository
from .shifts.lifecycle import ShiftLifecycle
from .shifts.service import ShiftService
from .storage.collections import JsonCollection
from .storage.file_store import FileKeyValueStore
from .storage.kv import InMemoryKeyValueStore, KeyValueStore
from .storage.mysql_store import MySQLConfig, MySQLKeyValueStore
from .users.service import AuthService
from .users.session import SessionContext


@dataclass(frozen=True)
class Container:
    store: KeyValueStore
    session: SessionContext

    employees_repo: JsonEmployeeRepository
    locations_repo: JsonLocationRepository
    shifts_repo: JsonShiftRepository
    checkins_repo: JsonCheckInRepository
    events_repo: JsonEventRepository

    lifecycle: ShiftLifecycle
    auth_service: AuthService
    employee_service: EmployeeService
    location_service: LocationService
    shift_service: ShiftService
    checkin_service: CheckInService
    event_service: EventService
    report_service: TimeReportService


def build_store(*, backend: str, storage_dir: Optional[str] = None, db_config: Optional[dict] = None) -> KeyValueStore:
    backend = (backend or "file").lower()
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "file":
        if not storage_dir:
            raise ValidationError("STORAGE_DIR is required for the file backend")
        return FileKeyValueStore(storage_dir)
    if backend == "mysql":
        if not db_config:
            raise ValidationError("DB_CONFIG is required for the mysql backend")
        return MySQLKeyValueStore(MySQLConfig.from_settings(db_config))
    raise ValidationError(f"Unknown storage backend: {backend}")


def build_container(
    *,
    store: KeyValueStore,
    admin_password_hash: str,
    strict_reads: bool = False,
    geocoder: Optional[ReverseGeocoder] = None,
) -> Container:
    def collection(key: str) -> JsonCollection:
        return JsonCollection(store, key, strict_reads=strict_reads)

    employees_repo = JsonEmployeeRepository(collection(EMPLOYEES_KEY))
    locations_repo = JsonLocationRepository(collection(LOCATIONS_KEY))
    shifts_repo = JsonShiftRepository(collection(SHIFTS_KEY))
    checkins_repo = JsonCheckInRepository(collection(CHECKINS_KEY))
    events_repo = JsonEventRepository(collection(EVENTS_KEY))

    session = SessionContext(store)
    lifecycle = ShiftLifecycle(shifts_repo)

    auth_service = AuthService(employees_repo, session, admin_password_hash=admin_password_hash)
    employee_service = EmployeeService(employees_repo, shifts_repo, checkins_repo, events_repo)
    location_service = LocationService(locations_repo)
    shift_service = ShiftService(shifts_repo, employees_repo, locations_repo, events_repo, lifecycle=lifecycle)
    checkin_service = CheckInService(
        checkins_repo,
        shifts_repo,
        employees_repo,
        locations_repo,
        lifecycle=lifecycle,
        geocoder=geocoder or NullReverseGeocoder(),
    )
    event_service = EventService(events_repo, shifts_repo, locations_repo, shift_service)
    report_service = TimeReportService(checkins_repo, employees_repo, locations_repo, shifts_repo)

    return Container(
        store=store,
        session=session,
        employees_repo=employees_repo,
        locations_repo=locations_repo,
        shifts_repo=shifts_repo,
        checkins_repo=checkins_repo,
        events_repo=events_repo,
        lifecycle=lifecycle,
        auth_service=auth_service,
        employee_service=employee_service,
        location_service=location_service,
        shift_service=shift_service,
        checkin_service=checkin_service,
        event_service=event_service,
        report_service=report_service,
    )


def build_geocoder(*, enabled: bool, base_url: Optional[str] = None) -> ReverseGeocoder:
    if not enabled:
        return NullReverseGeocoder()
    return NominatimReverseGeocoder(base_url or "https://nominatim.openstreetmap.org")
