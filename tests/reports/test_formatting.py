import pytest

from src.workforce_system.workforce_system.reports.formatting import format_hours


@pytest.mark.parametrize(
    "hours,label",
    [
        (8.0, "8h 0m"),
        (8.25, "8h 15m"),
        (0, "0h 0m"),
        (1.5, "1h 30m"),
        (1.9999, "2h 0m"),
        (2.0 + 59.6 / 60, "3h 0m"),
        (2.0 + 59.4 / 60, "2h 59m"),
    ],
)
def test_format_hours(hours, label):
    assert format_hours(hours) == label
