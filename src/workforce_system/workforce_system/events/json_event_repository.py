from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..core.enums import EventType
from ..storage.collections import JsonCollection
from .model import CalendarEvent
from .repository import EventRepository


def _shift_ids(value) -> tuple[str, ...]:
    # Older records embedded whole shift objects instead of ids.
    ids = []
    for item in value or ():
        if isinstance(item, dict):
            if item.get("id") is not None:
                ids.append(str(item["id"]))
        elif item is not None:
            ids.append(str(item))
    return tuple(ids)


def _parse_type(value) -> EventType:
    try:
        return EventType(value)
    except ValueError:
        return EventType.EVENT


def _to_model(r: dict) -> CalendarEvent:
    return CalendarEvent(
        event_id=str(r["id"]),
        title=r.get("title") or "",
        event_date=parse_iso_date(str(r["date"])[:10]),
        start_time=parse_hhmm(str(r["startTime"])[:5]),
        end_time=parse_hhmm(str(r["endTime"])[:5]),
        location_id=str(r.get("locationId") or ""),
        location_name=r.get("locationName") or "",
        event_type=_parse_type(r.get("type")),
        color=r.get("color") or None,
        description=r.get("description") or None,
        shift_ids=_shift_ids(r.get("shifts")),
    )


def _to_record(e: CalendarEvent) -> dict:
    return {
        "id": e.event_id,
        "title": e.title,
        "description": e.description or "",
        "date": e.event_date.isoformat(),
        "startTime": e.start_time.strftime("%H:%M"),
        "endTime": e.end_time.strftime("%H:%M"),
        "locationId": e.location_id,
        "locationName": e.location_name,
        "type": e.event_type.value,
        "color": e.color,
        "shifts": list(e.shift_ids),
    }


class JsonEventRepository(EventRepository):
    def __init__(self, collection: JsonCollection):
        self._collection = collection

    def list_all(self) -> Sequence[CalendarEvent]:
        return [_to_model(r) for r in self._collection.load() if r.get("id") is not None]

    def get_by_id(self, event_id: str) -> Optional[CalendarEvent]:
        for e in self.list_all():
            if e.event_id == event_id:
                return e
        return None

    def add(self, event: CalendarEvent) -> None:
        with self._collection.mutate() as records:
            records.append(_to_record(event))

    def delete_by_id(self, event_id: str) -> bool:
        with self._collection.mutate() as records:
            before = len(records)
            records[:] = [r for r in records if str(r.get("id")) != event_id]
            return len(records) < before

    def remove_shift_ids(self, shift_ids: Sequence[str]) -> int:
        drop = set(shift_ids)
        touched = 0
        with self._collection.mutate() as records:
            for r in records:
                current = _shift_ids(r.get("shifts"))
                kept = [sid for sid in current if sid not in drop]
                if len(kept) != len(current):
                    r["shifts"] = kept
                    touched += 1
        return touched
