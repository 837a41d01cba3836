from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse a wall-clock HH:MM string (no timezone)."""
    return datetime.strptime(value, "%H:%M").time()


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a stored ISO-8601 timestamp.

    Device data was written by JavaScript `JSON.stringify(new Date())`, which
    produces a trailing `Z`. Timestamps are compared as naive local values, so
    any offset is dropped after conversion.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def require_date(value: str, field_name: str) -> str:
    try:
        parse_iso_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date")
    return value


def require_hhmm(value: str, field_name: str) -> str:
    try:
        parse_hhmm(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an HH:MM time")
    return value


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
