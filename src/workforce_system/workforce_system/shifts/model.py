from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import ShiftStatus


@dataclass(frozen=True)
class Shift:
    """Domain entity: an employee assigned to a location for a time window.

    `employee_name` / `location_name` are a display cache; the ids are the
    source of truth.
    """

    shift_id: str
    employee_id: str
    employee_name: str
    location_id: str
    location_name: str
    shift_date: date
    start_time: time
    end_time: time
    status: ShiftStatus = ShiftStatus.SCHEDULED
    notes: Optional[str] = None
    event_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
