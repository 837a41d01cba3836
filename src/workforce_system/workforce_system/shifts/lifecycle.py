from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

from ..common.datetime_utils import now_local
from ..core.enums import ShiftStatus
from ..core.exceptions import InvalidTransitionError, NotFoundError
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS: dict[ShiftStatus, frozenset[ShiftStatus]] = {
    ShiftStatus.SCHEDULED: frozenset({ShiftStatus.IN_PROGRESS, ShiftStatus.MISSED}),
    ShiftStatus.IN_PROGRESS: frozenset({ShiftStatus.COMPLETED}),
    ShiftStatus.COMPLETED: frozenset(),
    ShiftStatus.MISSED: frozenset(),
}


def can_transition(current: ShiftStatus, target: ShiftStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


_CLOSED = (ShiftStatus.COMPLETED, ShiftStatus.MISSED)


def select_shift_for_today(shifts: Iterable[Shift], *, employee_id: str, today: date) -> Optional[Shift]:
    """Pick today's open shift for an employee.

    Candidates are the employee's shifts dated `today` that are still open;
    completed and missed shifts are skipped.
    Several candidates is a data anomaly; the earliest `created_at` wins, then
    the smallest id, so the choice is stable across reloads.
    """

    candidates = [
        s
        for s in shifts
        if s.employee_id == employee_id and s.shift_date == today and s.status not in _CLOSED
    ]
    if not candidates:
        return None
    candidates.sort(key=lambda s: (s.created_at or datetime.min, s.shift_id))
    return candidates[0]


class ShiftLifecycle:
    """State machine for a shift's status.

    scheduled -> in-progress -> completed, plus scheduled -> missed.
    Only the check-in recorder starts and completes shifts.
    """

    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    def find_shift_for_today(self, employee_id: str, *, today: Optional[date] = None) -> Optional[Shift]:
        today = today or now_local().date()
        return select_shift_for_today(self._shifts.list_for_employee(employee_id), employee_id=employee_id, today=today)

    def transition(self, shift: Shift, target: ShiftStatus, *, now: Optional[datetime] = None) -> Shift:
        if not can_transition(shift.status, target):
            raise InvalidTransitionError(
                f"Shift cannot move from {shift.status.value} to {target.value}"
            )
        updated = replace(shift, status=target, updated_at=now or now_local())
        if not self._shifts.update(updated):
            raise NotFoundError("Shift not found")
        logger.info(f"Shift {shift.shift_id}: {shift.status.value} -> {target.value}")
        return updated

    def start(self, shift: Shift, *, now: Optional[datetime] = None) -> Shift:
        return self.transition(shift, ShiftStatus.IN_PROGRESS, now=now)

    def complete(self, shift: Shift, *, now: Optional[datetime] = None) -> Shift:
        return self.transition(shift, ShiftStatus.COMPLETED, now=now)

    def mark_missed(self, shift: Shift, *, now: Optional[datetime] = None) -> Shift:
        return self.transition(shift, ShiftStatus.MISSED, now=now)
