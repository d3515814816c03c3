from datetime import datetime

from bpay.services.scheduler import seconds_until


def test_later_today():
    assert seconds_until(6, datetime(2025, 2, 10, 5, 30)) == 30 * 60


def test_already_past_waits_until_tomorrow():
    assert seconds_until(6, datetime(2025, 2, 10, 6, 0)) == 24 * 3600
    assert seconds_until(6, datetime(2025, 2, 28, 23, 0)) == 7 * 3600
