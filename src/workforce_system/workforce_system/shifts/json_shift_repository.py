from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import format_timestamp, parse_hhmm, parse_iso_date, parse_timestamp
from ..core.enums import ShiftStatus
from ..storage.collections import JsonCollection
from .model import Shift
from .repository import ShiftRepository


def _parse_status(value) -> ShiftStatus:
    try:
        return ShiftStatus(value)
    except ValueError:
        return ShiftStatus.SCHEDULED


def _to_model(r: dict) -> Shift:
    return Shift(
        shift_id=str(r["id"]),
        employee_id=str(r.get("employeeId") or ""),
        employee_name=r.get("employeeName") or "",
        location_id=str(r.get("locationId") or ""),
        location_name=r.get("locationName") or "",
        shift_date=parse_iso_date(str(r["date"])[:10]),
        start_time=parse_hhmm(str(r["startTime"])[:5]),
        end_time=parse_hhmm(str(r["endTime"])[:5]),
        status=_parse_status(r.get("status")),
        notes=r.get("notes") or None,
        event_id=r.get("eventId") or None,
        created_at=parse_timestamp(r.get("createdAt")),
        updated_at=parse_timestamp(r.get("updatedAt")),
    )


_OPTIONAL_KEYS = ("notes", "eventId")


def _to_record(s: Shift) -> dict:
    record = {
        "id": s.shift_id,
        "employeeId": s.employee_id,
        "employeeName": s.employee_name,
        "locationId": s.location_id,
        "locationName": s.location_name,
        "date": s.shift_date.isoformat(),
        "startTime": s.start_time.strftime("%H:%M"),
        "endTime": s.end_time.strftime("%H:%M"),
        "status": s.status.value,
        "createdAt": format_timestamp(s.created_at),
        "updatedAt": format_timestamp(s.updated_at),
    }
    if s.notes:
        record["notes"] = s.notes
    if s.event_id:
        record["eventId"] = s.event_id
    return record


class JsonShiftRepository(ShiftRepository):
    def __init__(self, collection: JsonCollection):
        self._collection = collection

    def list_all(self) -> Sequence[Shift]:
        return [_to_model(r) for r in self._collection.load() if r.get("id") is not None]

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        for s in self.list_all():
            if s.shift_id == shift_id:
                return s
        return None

    def list_for_employee(self, employee_id: str) -> Sequence[Shift]:
        return [s for s in self.list_all() if s.employee_id == employee_id]

    def list_for_date(self, shift_date: date) -> Sequence[Shift]:
        return [s for s in self.list_all() if s.shift_date == shift_date]

    def add_many(self, shifts: Sequence[Shift]) -> None:
        with self._collection.mutate() as records:
            records.extend(_to_record(s) for s in shifts)

    def update(self, shift: Shift) -> bool:
        with self._collection.mutate() as records:
            for i, r in enumerate(records):
                if str(r.get("id")) == shift.shift_id:
                    records[i] = {**{k: v for k, v in r.items() if k not in _OPTIONAL_KEYS}, **_to_record(shift)}
                    return True
        return False

    def _delete_where(self, predicate: Callable[[dict], bool]) -> list[str]:
        with self._collection.mutate() as records:
            deleted = [str(r.get("id")) for r in records if predicate(r)]
            records[:] = [r for r in records if not predicate(r)]
            return deleted

    def delete_by_id(self, shift_id: str) -> bool:
        return bool(self._delete_where(lambda r: str(r.get("id")) == shift_id))

    def delete_for_employee(self, employee_id: str) -> list[str]:
        return self._delete_where(lambda r: str(r.get("employeeId") or "") == employee_id)

    def delete_for_event(self, event_id: str) -> list[str]:
        return self._delete_where(lambda r: (r.get("eventId") or None) == event_id)
