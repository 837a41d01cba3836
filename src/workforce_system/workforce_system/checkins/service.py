from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.ids import new_id
from ..common.validators import optional_text
from ..core.enums import ShiftStatus
from ..core.exceptions import (
    ConflictError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from ..locations.repository import LocationRepository
from ..shifts.lifecycle import ShiftLifecycle, can_transition
from ..shifts.repository import ShiftRepository
from .geolocation import (
    GeolocationProvider,
    GeoPosition,
    NullReverseGeocoder,
    ReverseGeocoder,
    UnavailableGeolocationProvider,
)
from .model import CapturedLocation, CheckIn
from .repository import CheckInRepository

logger = logging.getLogger(__name__)


class CheckInService:
    """Records check-ins and check-outs and drives the matching shift.

    An employee holds at most one open check-in at a time, across all shifts.
    Commands are serialized so the check-then-write sequence cannot interleave,
    and the open-session check is repeated inside the write itself. If the
    shift write fails, the check-in write is rolled back so an open check-in
    and an in-progress shift always go together.
    """

    def __init__(
        self,
        checkins: CheckInRepository,
        shifts: ShiftRepository,
        employees: EmployeeRepository,
        locations: LocationRepository,
        *,
        lifecycle: Optional[ShiftLifecycle] = None,
        geolocation: Optional[GeolocationProvider] = None,
        geocoder: Optional[ReverseGeocoder] = None,
    ):
        self._checkins = checkins
        self._shifts = shifts
        self._employees = employees
        self._locations = locations
        self._lifecycle = lifecycle or ShiftLifecycle(shifts)
        self._geolocation = geolocation or UnavailableGeolocationProvider()
        self._geocoder = geocoder or NullReverseGeocoder()
        self._lock = threading.RLock()

    def _capture(self, position: Optional[GeoPosition]) -> CapturedLocation:
        position = position or self._geolocation.current_position()
        address = None
        try:
            address = self._geocoder.reverse(position.latitude, position.longitude)
        except Exception as e:
            # Address lookup must never fail the check-in.
            logger.warning(f"Reverse geocoding raised: {e}")
        return CapturedLocation(
            latitude=position.latitude,
            longitude=position.longitude,
            accuracy=position.accuracy,
            address=address,
        )

    def _undo(self, what: str, action) -> None:
        """Roll back the check-in write after the shift write failed."""
        try:
            action()
        except (StorageError, ConflictError) as e:
            logger.error(f"Could not roll back {what}: {e}")

    def check_in(
        self,
        employee_id: str,
        *,
        position: Optional[GeoPosition] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CheckIn:
        now = now or now_local()
        with self._lock:
            employee = self._employees.get_by_id(employee_id)
            if not employee:
                raise NotFoundError("Employee not found")

            shift = self._lifecycle.find_shift_for_today(employee_id, today=now.date())
            if not shift:
                raise NotFoundError("No shift scheduled for today")

            if self._checkins.get_open_for_employee(employee_id):
                raise ConflictError("You are already checked in")

            if not can_transition(shift.status, ShiftStatus.IN_PROGRESS):
                raise InvalidTransitionError(f"Cannot check in to a {shift.status.value} shift")

            captured = self._capture(position)

            location = self._locations.get_by_id(shift.location_id)
            checkin = CheckIn(
                checkin_id=new_id(),
                shift_id=shift.shift_id,
                employee_id=employee.employee_id,
                employee_name=employee.name,
                location_id=shift.location_id,
                location_name=location.name if location else shift.location_name,
                check_in_time=now,
                actual_location=captured,
                notes=optional_text(notes),
            )
            self._checkins.add_open(checkin)
            try:
                self._lifecycle.start(shift, now=now)
            except DomainError:
                self._undo(f"check-in {checkin.checkin_id}", lambda: self._checkins.delete_by_id(checkin.checkin_id))
                raise
            logger.info(f"Checked in: {employee.name} on shift {shift.shift_id} at {now.isoformat()}")
            return checkin

    def check_out(self, checkin_id: str, *, now: Optional[datetime] = None) -> CheckIn:
        now = now or now_local()
        with self._lock:
            checkin = self._checkins.get_by_id(checkin_id)
            if not checkin:
                raise NotFoundError("Check-in not found")
            if not checkin.is_open:
                raise ValidationError("You have already checked out")
            if now < checkin.check_in_time:
                raise ValidationError("Check-out time cannot be before check-in time")

            closed = replace(checkin, check_out_time=now)
            if not self._checkins.update(closed):
                raise NotFoundError("Check-in not found")

            shift = self._shifts.get_by_id(checkin.shift_id)
            if shift and shift.status == ShiftStatus.IN_PROGRESS:
                try:
                    self._lifecycle.complete(shift, now=now)
                except DomainError:
                    self._undo(f"check-out {checkin_id}", lambda: self._checkins.update(checkin))
                    raise
            else:
                logger.warning(
                    f"Check-in {checkin_id} closed but shift {checkin.shift_id} is "
                    f"{shift.status.value if shift else 'missing'}"
                )
            logger.info(f"Checked out: {checkin.employee_name} from check-in {checkin_id} at {now.isoformat()}")
            return closed

    def check_out_active(self, employee_id: str, *, now: Optional[datetime] = None) -> CheckIn:
        with self._lock:
            active = self._checkins.get_open_for_employee(employee_id)
            if not active:
                raise NotFoundError("You are not checked in")
            return self.check_out(active.checkin_id, now=now)

    def active_check_in(self, employee_id: str) -> Optional[CheckIn]:
        return self._checkins.get_open_for_employee(employee_id)

    def history(self, employee_id: str) -> list[CheckIn]:
        items = list(self._checkins.list_for_employee(employee_id))
        items.sort(key=lambda c: c.check_in_time, reverse=True)
        return items
