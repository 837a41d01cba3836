from __future__ import annotations

import math


def format_hours(hours: float) -> str:
    """Render hours as `{h}h {m}m`, e.g. 8.25 -> "8h 15m".

    Minutes are rounded half-up; a value that rounds to 60 carries into the hour.
    """
    hours = max(float(hours), 0.0)
    whole = math.floor(hours)
    minutes = math.floor((hours - whole) * 60 + 0.5)
    if minutes >= 60:
        whole += 1
        minutes -= 60
    return f"{whole}h {minutes}m"
