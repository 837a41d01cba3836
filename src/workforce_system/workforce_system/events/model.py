from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import EventType


@dataclass(frozen=True)
class CalendarEvent:
    """Domain entity: a calendar event that shifts can be created under."""

    event_id: str
    title: str
    event_date: date
    start_time: time
    end_time: time
    location_id: str
    location_name: str
    event_type: EventType = EventType.EVENT
    color: Optional[str] = None
    description: Optional[str] = None
    shift_ids: tuple[str, ...] = ()
