from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local, parse_hhmm, parse_iso_date, require_date, require_hhmm
from ..common.ids import new_id
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_UPCOMING_LIMIT
from ..core.enums import ShiftStatus
from ..core.exceptions import NotFoundError
from ..employees.repository import EmployeeRepository
from ..events.repository import EventRepository
from ..locations.repository import LocationRepository
from .lifecycle import ShiftLifecycle
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


class ShiftService:
    """Use case: schedule shifts (admin) and read them back (admin/employee)."""

    def __init__(
        self,
        shifts: ShiftRepository,
        employees: EmployeeRepository,
        locations: LocationRepository,
        events: Optional[EventRepository] = None,
        *,
        lifecycle: Optional[ShiftLifecycle] = None,
    ):
        self._shifts = shifts
        self._employees = employees
        self._locations = locations
        self._events = events
        self._lifecycle = lifecycle or ShiftLifecycle(shifts)

    def _with_current_names(self, shifts: Sequence[Shift]) -> list[Shift]:
        employee_names = {e.employee_id: e.name for e in self._employees.list_all()}
        location_names = {loc.location_id: loc.name for loc in self._locations.list_all()}
        return [
            replace(
                s,
                employee_name=employee_names.get(s.employee_id, s.employee_name),
                location_name=location_names.get(s.location_id, s.location_name),
            )
            for s in shifts
        ]

    def new_shift(
        self,
        *,
        employee_id: str,
        location_id: str,
        shift_date: str,
        start_time: str,
        end_time: str,
        notes: Optional[str] = None,
        event_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Shift:
        """Validate an assignment and build the Shift without storing it."""
        employee_id = require_non_empty(employee_id, "Employee")
        location_id = require_non_empty(location_id, "Location")
        require_date(shift_date, "Date")
        require_hhmm(start_time, "Start time")
        require_hhmm(end_time, "End time")

        employee = self._employees.get_by_id(employee_id)
        location = self._locations.get_by_id(location_id)
        if not employee or not location:
            raise NotFoundError("Invalid employee or location selected")

        now = now or now_local()
        return Shift(
            shift_id=new_id(),
            employee_id=employee.employee_id,
            employee_name=employee.name,
            location_id=location.location_id,
            location_name=location.name,
            shift_date=parse_iso_date(shift_date),
            start_time=parse_hhmm(start_time),
            end_time=parse_hhmm(end_time),
            status=ShiftStatus.SCHEDULED,
            notes=optional_text(notes),
            event_id=event_id,
            created_at=now,
            updated_at=now,
        )

    def create_shift(
        self,
        *,
        employee_id: str,
        location_id: str,
        shift_date: str,
        start_time: str,
        end_time: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Shift:
        shift = self.new_shift(
            employee_id=employee_id,
            location_id=location_id,
            shift_date=shift_date,
            start_time=start_time,
            end_time=end_time,
            notes=notes,
            now=now,
        )
        self._shifts.add_many([shift])
        logger.info(f"Shift created: {shift.shift_id} ({shift.employee_name} @ {shift.location_name} {shift.shift_date})")
        return shift

    def get_shift(self, shift_id: str) -> Shift:
        shift = self._shifts.get_by_id(shift_id)
        if not shift:
            raise NotFoundError("Shift not found")
        return shift

    def delete_shift(self, shift_id: str) -> None:
        shift = self._shifts.get_by_id(shift_id)
        if not shift:
            raise NotFoundError("Shift not found")
        self._shifts.delete_by_id(shift_id)
        if self._events and shift.event_id:
            self._events.remove_shift_ids([shift_id])
        logger.info(f"Shift deleted: {shift_id}")

    def list_shifts(self, *, shift_date: Optional[date] = None, employee_id: Optional[str] = None) -> list[Shift]:
        if shift_date is not None:
            shifts = list(self._shifts.list_for_date(shift_date))
        else:
            shifts = list(self._shifts.list_all())
        if employee_id is not None:
            shifts = [s for s in shifts if s.employee_id == employee_id]
        shifts.sort(key=lambda s: (s.shift_date, s.start_time))
        return self._with_current_names(shifts)

    def upcoming_shifts(
        self,
        *,
        today: date,
        employee_id: Optional[str] = None,
        limit: Optional[int] = DEFAULT_UPCOMING_LIMIT,
    ) -> list[Shift]:
        shifts = [s for s in self.list_shifts(employee_id=employee_id) if s.shift_date >= today]
        return shifts[:limit] if limit is not None else shifts

    def shift_for_today(self, employee_id: str, *, today: Optional[date] = None) -> Optional[Shift]:
        shift = self._lifecycle.find_shift_for_today(employee_id, today=today)
        return self._with_current_names([shift])[0] if shift else None

    def mark_missed(self, shift_id: str, *, now: Optional[datetime] = None) -> Shift:
        return self._lifecycle.mark_missed(self.get_shift(shift_id), now=now)

    def sweep_missed(self, *, before: date, now: Optional[datetime] = None) -> list[Shift]:
        """Mark every still-scheduled shift dated before `before` as missed.

        Administrator command; nothing schedules it.
        """
        missed = [
            self._lifecycle.mark_missed(s, now=now)
            for s in self._shifts.list_all()
            if s.status == ShiftStatus.SCHEDULED and s.shift_date < before
        ]
        if missed:
            logger.info(f"Marked {len(missed)} shift(s) before {before} as missed")
        return missed

    def backfill_employee_ids(self) -> int:
        """Re-link legacy shifts that only match their employee by name.

        A shift is re-linked when its employeeId names no employee and its
        employeeName matches exactly one employee. Ambiguous names are left
        alone and logged.
        """
        employees = list(self._employees.list_all())
        known_ids = {e.employee_id for e in employees}
        by_name: dict[str, list[str]] = {}
        for e in employees:
            by_name.setdefault(e.name, []).append(e.employee_id)

        count = 0
        for shift in self._shifts.list_all():
            if shift.employee_id in known_ids:
                continue
            matches = by_name.get(shift.employee_name, [])
            if len(matches) != 1:
                if len(matches) > 1:
                    logger.warning(f"Shift {shift.shift_id}: employee name {shift.employee_name!r} is ambiguous")
                continue
            self._shifts.update(replace(shift, employee_id=matches[0]))
            count += 1
        if count:
            logger.info(f"Re-linked {count} shift(s) to employee ids")
        return count
