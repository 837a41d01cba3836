from __future__ import annotations

from ...checkins.model import CheckIn
from ...core.constants import STANDARD_HOURS_PER_SHIFT
from .base import HoursCalculator, OvertimeSplit


class StandardHoursCalculator(HoursCalculator):
    """Standard rule: hours = out - in; open sessions count 0.

    Overtime is whatever exceeds 8 hours per shift worked.
    """

    def hours_worked(self, checkin: CheckIn) -> float:
        if not checkin.check_out_time:
            return 0.0
        return (checkin.check_out_time - checkin.check_in_time).total_seconds() / 3600

    def overtime(self, total_hours: float, shift_count: int) -> OvertimeSplit:
        regular = min(total_hours, STANDARD_HOURS_PER_SHIFT * shift_count)
        return OvertimeSplit(regular=regular, overtime=max(0.0, total_hours - regular))
