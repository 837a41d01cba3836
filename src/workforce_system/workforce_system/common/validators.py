from __future__ import annotations

import re
from typing import Optional

from ..core.constants import PIN_LENGTH
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_RE = re.compile(r"^\+?[0-9][0-9\s\-().]{5,}$")
_PIN_RE = re.compile(rf"^[0-9]{{{PIN_LENGTH}}}$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_email(value: str, field_name: str = "Email") -> str:
    value = require_non_empty(value, field_name)
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"{field_name} is not a valid email address")
    return value


def require_phone(value: str, field_name: str = "Phone") -> str:
    value = require_non_empty(value, field_name)
    if not _PHONE_RE.match(value):
        raise ValidationError(f"{field_name} is not a valid phone number")
    return value


def require_pin(value: str) -> str:
    value = str(value).strip()
    if not _PIN_RE.match(value):
        raise ValidationError(f"PIN must be exactly {PIN_LENGTH} digits")
    return value


def require_coordinates(latitude, longitude) -> tuple[float, float]:
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError("Coordinates must be numbers")
    if not (-90 <= lat <= 90):
        raise ValidationError("Latitude must be between -90 and 90")
    if not (-180 <= lon <= 180):
        raise ValidationError("Longitude must be between -180 and 180")
    return lat, lon


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None
