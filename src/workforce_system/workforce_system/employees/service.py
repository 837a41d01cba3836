from __future__ import annotations

import logging
import random
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..checkins.repository import CheckInRepository
from ..common.ids import new_id
from ..common.validators import require_email, require_non_empty, require_phone, require_pin
from ..core.constants import PIN_MAX, PIN_MIN
from ..core.exceptions import ConflictError, NotFoundError
from ..events.repository import EventRepository
from ..shifts.repository import ShiftRepository
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: manage employees (admin).

    Uniqueness (email, PIN) is checked against the stored collection at write
    time; deleting an employee cascades to their shifts and check-ins.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        shifts: ShiftRepository,
        checkins: CheckInRepository,
        events: Optional[EventRepository] = None,
        *,
        rng: Optional[random.Random] = None,
    ):
        self._employees = employees
        self._shifts = shifts
        self._checkins = checkins
        self._events = events
        self._rng = rng or random.Random()

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def find_by_pin(self, pin: str) -> Optional[Employee]:
        return self._employees.get_by_pin(str(pin).strip())

    def _used_pins(self, *, exclude_id: Optional[str] = None) -> set[str]:
        return {e.pin for e in self._employees.list_all() if e.pin and e.employee_id != exclude_id}

    def generate_pin(self, used: Optional[set[str]] = None) -> str:
        used = self._used_pins() if used is None else used
        if len(used) >= PIN_MAX - PIN_MIN + 1:
            raise ConflictError("No free PIN left")
        while True:
            pin = str(self._rng.randint(PIN_MIN, PIN_MAX))
            if pin not in used:
                return pin

    def _validate(self, *, name: str, email: str, phone: str, position: str) -> tuple[str, str, str, str]:
        return (
            require_non_empty(name, "Name"),
            require_email(email),
            require_phone(phone),
            require_non_empty(position, "Position"),
        )

    def _check_unique(self, *, email: str, pin: Optional[str], exclude_id: Optional[str] = None) -> None:
        existing = self._employees.get_by_email(email)
        if existing and existing.employee_id != exclude_id:
            raise ConflictError("An employee with this email already exists")
        if pin and pin in self._used_pins(exclude_id=exclude_id):
            raise ConflictError("This PIN is already in use")

    def create_employee(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        position: str,
        pin: Optional[str] = None,
        hire_date: Optional[date] = None,
        is_active: bool = True,
    ) -> Employee:
        name, email, phone, position = self._validate(name=name, email=email, phone=phone, position=position)
        pin = require_pin(pin) if pin else None
        self._check_unique(email=email, pin=pin)

        employee = Employee(
            employee_id=new_id(),
            name=name,
            email=email,
            phone=phone,
            position=position,
            hire_date=hire_date or date.today(),
            is_active=bool(is_active),
            pin=pin or self.generate_pin(),
        )
        self._employees.add(employee)
        logger.info(f"Employee created: {employee.employee_id} ({employee.name})")
        return employee

    def update_employee(
        self,
        employee_id: str,
        *,
        name: str,
        email: str,
        phone: str,
        position: str,
        pin: Optional[str] = None,
    ) -> Employee:
        current = self.get_employee(employee_id)
        name, email, phone, position = self._validate(name=name, email=email, phone=phone, position=position)
        pin = require_pin(pin) if pin else current.pin
        self._check_unique(email=email, pin=pin, exclude_id=employee_id)

        updated = replace(current, name=name, email=email, phone=phone, position=position, pin=pin)
        if not self._employees.update(updated):
            raise NotFoundError("Employee not found")
        logger.info(f"Employee updated: {employee_id}")
        return updated

    def toggle_employee_active(self, employee_id: str) -> Employee:
        current = self.get_employee(employee_id)
        updated = replace(current, is_active=not current.is_active)
        if not self._employees.update(updated):
            raise NotFoundError("Employee not found")
        logger.info(f"Employee {employee_id} active={updated.is_active}")
        return updated

    def delete_employee(self, employee_id: str) -> None:
        """Remove the employee with their shifts and check-ins. No-op if absent."""
        removed = self._employees.delete_by_id(employee_id)
        shift_ids = self._shifts.delete_for_employee(employee_id)
        checkin_count = self._checkins.delete_for_employee(employee_id)
        if self._events and shift_ids:
            self._events.remove_shift_ids(shift_ids)
        if removed:
            logger.info(
                f"Employee deleted: {employee_id} (shifts={len(shift_ids)}, check-ins={checkin_count})"
            )

    def backfill_missing_pins(self) -> int:
        """Assign unique PINs to employees stored before PINs existed."""
        used = self._used_pins()
        count = 0
        for employee in self._employees.list_all():
            if employee.pin:
                continue
            pin = self.generate_pin(used)
            used.add(pin)
            self._employees.update(replace(employee, pin=pin))
            count += 1
        if count:
            logger.info(f"Backfilled PINs for {count} employee(s)")
        return count
