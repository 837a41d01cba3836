"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

PIN_LENGTH = 5
PIN_MIN = 10000
PIN_MAX = 99999

STANDARD_HOURS_PER_SHIFT = 8
DEFAULT_TOP_PERFORMERS = 5
DEFAULT_UPCOMING_LIMIT = 5
DEFAULT_HISTORY_LOCATIONS = 5

# Trailing windows for report periods, in days.
PERIOD_DAYS = {
    "week": 7,
    "month": 30,
}

# Storage keys, one JSON array per collection.
EMPLOYEES_KEY = "employees"
LOCATIONS_KEY = "locations"
SHIFTS_KEY = "shifts"
CHECKINS_KEY = "checkIns"
EVENTS_KEY = "events"
SESSION_KEY = "user"

DEFAULT_EVENT_COLOR = "#2563eb"
