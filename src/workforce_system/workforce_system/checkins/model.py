from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CapturedLocation:
    """Device position recorded at check-in time."""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class CheckIn:
    """Domain entity: one work session on a shift.

    An absent `check_out_time` means the session is still open.
    """

    checkin_id: str
    shift_id: str
    employee_id: str
    employee_name: str
    location_id: str
    location_name: str
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    actual_location: Optional[CapturedLocation] = None
    notes: Optional[str] = None
    signature: Optional[str] = None
    photos: tuple[str, ...] = ()

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None
