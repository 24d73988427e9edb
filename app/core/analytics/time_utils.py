import datetime
import math
from typing import Optional


def week_start(day: datetime.date) -> datetime.date:
    """Return the Monday on or before ``day``.

    Same as subtracting ``(dayOfWeek + 6) % 7`` days with Sunday = 0;
    ``date.weekday()`` already counts Monday as 0.
    """
    return day - datetime.timedelta(days=day.weekday())


def days_ago(days: int, today: Optional[datetime.date] = None) -> datetime.date:
    today = today or datetime.date.today()
    return today - datetime.timedelta(days=days)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_pace(pace_min_per_km: Optional[float]) -> Optional[str]:
    """Format a decimal pace (min/km) as ``m:ss``, e.g. 5.5 -> "5:30"."""
    try:
        if pace_min_per_km is None or pace_min_per_km <= 0:
            return None
        minutes = int(math.floor(pace_min_per_km))
        seconds = round_half_up((pace_min_per_km - minutes) * 60)
        if seconds == 60:
            minutes += 1
            seconds = 0
        return f"{minutes}:{seconds:02d}"
    except (ValueError, TypeError):
        return None
