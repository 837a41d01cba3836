from datetime import datetime

from src.workforce_system.workforce_system.checkins.model import CheckIn
from src.workforce_system.workforce_system.reports.calculator.standard_calculator import StandardHoursCalculator


def _checkin(check_in: datetime, check_out=None) -> CheckIn:
    return CheckIn(
        checkin_id="c1",
        shift_id="s1",
        employee_id="e1",
        employee_name="A",
        location_id="l1",
        location_name="L",
        check_in_time=check_in,
        check_out_time=check_out,
    )


def test_hours_worked_is_checkout_minus_checkin():
    calc = StandardHoursCalculator()
    assert calc.hours_worked(_checkin(datetime(2024, 1, 1, 9, 0), datetime(2024, 1, 1, 17, 0))) == 8.0


def test_open_session_counts_zero():
    calc = StandardHoursCalculator()
    assert calc.hours_worked(_checkin(datetime(2024, 1, 1, 9, 0))) == 0.0


def test_overtime_is_hours_above_eight_per_shift():
    calc = StandardHoursCalculator()

    split = calc.overtime(8.25, 2)
    assert (split.regular, split.overtime) == (8.25, 0.0)

    split = calc.overtime(9.0, 3)
    assert (split.regular, split.overtime) == (9.0, 0.0)

    split = calc.overtime(10.5, 1)
    assert (split.regular, split.overtime) == (8.0, 2.5)
