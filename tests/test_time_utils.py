import datetime

import pytest

from app.core.analytics.time_utils import days_ago, format_pace, round_half_up, week_start


@pytest.mark.parametrize("day, monday", [
    (datetime.date(2026, 10, 12), datetime.date(2026, 10, 12)),
    (datetime.date(2026, 10, 14), datetime.date(2026, 10, 12)),
    (datetime.date(2026, 10, 18), datetime.date(2026, 10, 12)),
    (datetime.date(2026, 11, 1), datetime.date(2026, 10, 26)),
])
def test_week_start(day, monday):
    assert week_start(day) == monday


def test_days_ago():
    assert days_ago(7, datetime.date(2026, 10, 18)) == datetime.date(2026, 10, 11)


def test_format_pace():
    assert format_pace(5.5) == "5:30"
    assert format_pace(6.0) == "6:00"
    assert format_pace(4.25) == "4:15"
    # 59.7 秒四舍五入后进位到下一分钟
    assert format_pace(5.995) == "6:00"
    assert format_pace(None) is None
    assert format_pace(0) is None


def test_round_half_up():
    assert round_half_up(402.5) == 403
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
