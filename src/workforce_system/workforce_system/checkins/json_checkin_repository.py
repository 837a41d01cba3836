from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import format_timestamp, parse_timestamp
from ..core.exceptions import ConflictError
from ..storage.collections import JsonCollection
from .model import CapturedLocation, CheckIn
from .repository import CheckInRepository


def _to_location(value) -> Optional[CapturedLocation]:
    if not isinstance(value, dict):
        return None
    if value.get("latitude") is None or value.get("longitude") is None:
        return None
    accuracy = value.get("accuracy")
    return CapturedLocation(
        latitude=float(value["latitude"]),
        longitude=float(value["longitude"]),
        accuracy=float(accuracy) if accuracy is not None else None,
        address=value.get("address") or None,
    )


def _to_model(r: dict) -> CheckIn:
    return CheckIn(
        checkin_id=str(r["id"]),
        shift_id=str(r.get("shiftId") or ""),
        employee_id=str(r.get("employeeId") or ""),
        employee_name=r.get("employeeName") or "",
        location_id=str(r.get("locationId") or ""),
        location_name=r.get("locationName") or "",
        check_in_time=parse_timestamp(r["checkInTime"]),
        check_out_time=parse_timestamp(r.get("checkOutTime")),
        actual_location=_to_location(r.get("actualLocation")),
        notes=r.get("notes") or None,
        signature=r.get("signature") or None,
        photos=tuple(r.get("photos") or ()),
    )


# Optional keys this repository writes; a cleared field must be dropped on update.
_OPTIONAL_KEYS = ("checkOutTime", "actualLocation", "notes", "signature", "photos")


def _to_record(c: CheckIn) -> dict:
    record = {
        "id": c.checkin_id,
        "shiftId": c.shift_id,
        "employeeId": c.employee_id,
        "employeeName": c.employee_name,
        "locationId": c.location_id,
        "locationName": c.location_name,
        "checkInTime": format_timestamp(c.check_in_time),
    }
    if c.check_out_time:
        record["checkOutTime"] = format_timestamp(c.check_out_time)
    if c.actual_location:
        loc = {"latitude": c.actual_location.latitude, "longitude": c.actual_location.longitude}
        if c.actual_location.accuracy is not None:
            loc["accuracy"] = c.actual_location.accuracy
        if c.actual_location.address:
            loc["address"] = c.actual_location.address
        record["actualLocation"] = loc
    if c.notes:
        record["notes"] = c.notes
    if c.signature:
        record["signature"] = c.signature
    if c.photos:
        record["photos"] = list(c.photos)
    return record


class JsonCheckInRepository(CheckInRepository):
    def __init__(self, collection: JsonCollection):
        self._collection = collection

    def list_all(self) -> Sequence[CheckIn]:
        return [
            _to_model(r)
            for r in self._collection.load()
            if r.get("id") is not None and r.get("checkInTime")
        ]

    def get_by_id(self, checkin_id: str) -> Optional[CheckIn]:
        for c in self.list_all():
            if c.checkin_id == checkin_id:
                return c
        return None

    def list_for_employee(self, employee_id: str) -> Sequence[CheckIn]:
        return [c for c in self.list_all() if c.employee_id == employee_id]

    def get_open_for_employee(self, employee_id: str) -> Optional[CheckIn]:
        for c in self.list_for_employee(employee_id):
            if c.is_open:
                return c
        return None

    def add(self, checkin: CheckIn) -> None:
        with self._collection.mutate() as records:
            records.append(_to_record(checkin))

    def add_open(self, checkin: CheckIn) -> None:
        with self._collection.mutate() as records:
            for r in records:
                if str(r.get("employeeId") or "") == checkin.employee_id and not r.get("checkOutTime"):
                    raise ConflictError("You are already checked in")
            records.append(_to_record(checkin))

    def update(self, checkin: CheckIn) -> bool:
        with self._collection.mutate() as records:
            for i, r in enumerate(records):
                if str(r.get("id")) == checkin.checkin_id:
                    kept = {k: v for k, v in r.items() if k not in _OPTIONAL_KEYS}
                    records[i] = {**kept, **_to_record(checkin)}
                    return True
        return False

    def delete_by_id(self, checkin_id: str) -> bool:
        with self._collection.mutate() as records:
            before = len(records)
            records[:] = [r for r in records if str(r.get("id")) != checkin_id]
            return len(records) < before

    def delete_for_employee(self, employee_id: str) -> int:
        with self._collection.mutate() as records:
            before = len(records)
            records[:] = [r for r in records if str(r.get("employeeId") or "") != employee_id]
            return before - len(records)
