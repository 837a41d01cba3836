from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Session role used for permission checks."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class ShiftStatus(str, Enum):
    """Shift state as persisted in the shifts collection."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    MISSED = "missed"


class EventType(str, Enum):
    EVENT = "event"
    MEETING = "meeting"
    TRAINING = "training"
    MAINTENANCE = "maintenance"


class ReportPeriod(str, Enum):
    """Trailing window used by the report and history views."""

    WEEK = "week"
    MONTH = "month"
    ALL = "all"
