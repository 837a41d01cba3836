from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CalendarEvent


class EventRepository(Protocol):
    def list_all(self) -> Sequence[CalendarEvent]:
        raise NotImplementedError

    def get_by_id(self, event_id: str) -> Optional[CalendarEvent]:
        raise NotImplementedError

    def add(self, event: CalendarEvent) -> None:
        raise NotImplementedError

    def delete_by_id(self, event_id: str) -> bool:
        raise NotImplementedError

    def remove_shift_ids(self, shift_ids: Sequence[str]) -> int:
        """Drop shift ids from every event's shift list. Returns events touched."""

        raise NotImplementedError
