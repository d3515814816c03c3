from datetime import datetime

import pytest

from bpay.services.dates import due_date_for, format_month, month_window, parse_target_month, shift_month


@pytest.mark.parametrize(
    "due_day, year, month, expected",
    [
        (31, 2025, 4, datetime(2025, 4, 30)),
        (29, 2025, 2, datetime(2025, 2, 28)),
        (29, 2024, 2, datetime(2024, 2, 29)),
        (31, 2025, 12, datetime(2025, 12, 31)),
        (1, 2025, 1, datetime(2025, 1, 1)),
        (15, 2025, 6, datetime(2025, 6, 15)),
    ],
)
def test_due_date_clamps_to_month_length(due_day, year, month, expected):
    assert due_date_for(due_day, year, month) == expected


@pytest.mark.parametrize("due_day", [0, 32, -1])
def test_due_day_out_of_range(due_day):
    with pytest.raises(ValueError):
        due_date_for(due_day, 2025, 1)


def test_month_window_covers_whole_month():
    start, end = month_window(2025, 2)
    assert start == datetime(2025, 2, 1)
    assert end == datetime(2025, 2, 28, 23, 59, 59)


def test_parse_and_format_month():
    assert parse_target_month("2025-02") == (2025, 2)
    assert format_month(2025, 2) == "2025-02"


def test_shift_month_across_years():
    assert shift_month(2025, 1, -1) == (2024, 12)
    assert shift_month(2025, 2, -11) == (2024, 3)
    assert shift_month(2024, 12, 1) == (2025, 1)
