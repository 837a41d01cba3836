from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local, parse_hhmm, parse_iso_date, require_date, require_hhmm
from ..common.ids import new_id
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_EVENT_COLOR
from ..core.enums import EventType
from ..core.exceptions import NotFoundError, ValidationError
from ..locations.repository import LocationRepository
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from ..shifts.service import ShiftService
from .model import CalendarEvent
from .repository import EventRepository

logger = logging.getLogger(__name__)


class EventService:
    """Use case: calendar events with the shifts staffed under them (admin)."""

    def __init__(
        self,
        events: EventRepository,
        shifts: ShiftRepository,
        locations: LocationRepository,
        shift_service: ShiftService,
    ):
        self._events = events
        self._shifts = shifts
        self._locations = locations
        self._shift_service = shift_service

    def list_events(self, *, event_date: Optional[date] = None) -> list[CalendarEvent]:
        events = list(self._events.list_all())
        if event_date is not None:
            events = [e for e in events if e.event_date == event_date]
        events.sort(key=lambda e: (e.event_date, e.start_time))
        return events

    def get_event(self, event_id: str) -> CalendarEvent:
        event = self._events.get_by_id(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def event_shifts(self, event_id: str) -> list[Shift]:
        self.get_event(event_id)
        return [s for s in self._shift_service.list_shifts() if s.event_id == event_id]

    def create_event(
        self,
        *,
        title: str,
        event_date: str,
        start_time: str,
        end_time: str,
        location_id: str,
        event_type: str = EventType.EVENT.value,
        color: Optional[str] = None,
        description: Optional[str] = None,
        assignments: Sequence[dict] = (),
        now: Optional[datetime] = None,
    ) -> CalendarEvent:
        """Create an event and one shift per assignment.

        Each assignment is a dict with `employee_id` and optional
        `start_time` / `end_time` / `notes`; times default to the event's.
        """
        title = require_non_empty(title, "Title")
        require_date(event_date, "Date")
        require_hhmm(start_time, "Start time")
        require_hhmm(end_time, "End time")
        try:
            kind = EventType(event_type)
        except ValueError:
            raise ValidationError(f"Unknown event type: {event_type}")

        location = self._locations.get_by_id(location_id)
        if not location:
            raise NotFoundError("Location not found")

        now = now or now_local()
        event_id = new_id()
        shifts = [
            self._shift_service.new_shift(
                employee_id=a.get("employee_id", ""),
                location_id=location.location_id,
                shift_date=event_date,
                start_time=a.get("start_time") or start_time,
                end_time=a.get("end_time") or end_time,
                notes=a.get("notes"),
                event_id=event_id,
                now=now,
            )
            for a in assignments
        ]

        event = CalendarEvent(
            event_id=event_id,
            title=title,
            event_date=parse_iso_date(event_date),
            start_time=parse_hhmm(start_time),
            end_time=parse_hhmm(end_time),
            location_id=location.location_id,
            location_name=location.name,
            event_type=kind,
            color=optional_text(color) or DEFAULT_EVENT_COLOR,
            description=optional_text(description),
            shift_ids=tuple(s.shift_id for s in shifts),
        )
        self._events.add(event)
        if shifts:
            self._shifts.add_many(shifts)
        logger.info(f"Event created: {event.event_id} ({event.title}) with {len(shifts)} shift(s)")
        return event

    def delete_event(self, event_id: str) -> int:
        """Delete an event and its shifts. Returns the number of shifts removed; no-op if absent."""
        removed_shifts = self._shifts.delete_for_event(event_id)
        removed = self._events.delete_by_id(event_id)
        if removed or removed_shifts:
            logger.info(f"Event deleted: {event_id} (shifts={len(removed_shifts)})")
        return len(removed_shifts)
