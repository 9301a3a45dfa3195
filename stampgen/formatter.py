"""
Renders a timestamp as chat timestamp markup (<t:SECONDS:CODE>) plus the
human-readable text each style displays as, using a 12-hour en-US clock.
"""

import math
import time
from datetime import datetime
from enum import Enum
from typing import List, NamedTuple, Optional

import pytz

from stampgen import utils
from stampgen.errors import InvalidResult

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
WEEKDAYS = [day.capitalize() for day in utils.DAYS_OF_WEEK]

DAYS_PER_MONTH = 30.44


def _clock(dt: datetime, seconds=False) -> str:
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    if seconds:
        return f"{hour}:{dt.minute:02d}:{dt.second:02d} {suffix}"
    return f"{hour}:{dt.minute:02d} {suffix}"


def _long_date(dt: datetime) -> str:
    return f"{MONTHS[dt.month - 1]} {dt.day}, {dt.year}"


def short_time(dt, diff):
    return _clock(dt)


def long_time(dt, diff):
    return _clock(dt, seconds=True)


def short_date(dt, diff):
    return f"{dt.month}/{dt.day}/{dt.year}"


def long_date(dt, diff):
    return _long_date(dt)


def short_date_time(dt, diff):
    return f"{_long_date(dt)} at {_clock(dt)}"


def long_date_time(dt, diff):
    return f"{WEEKDAYS[dt.weekday()]}, {_long_date(dt)} at {_clock(dt)}"


def _plural(count, unit):
    return f"{count} {unit}{'' if count == 1 else 's'}"


def relative_time(dt, diff):
    return describe_relative(diff)


def describe_relative(diff: int) -> str:
    """
    "in 3 hours" / "3 hours ago" for a signed difference in seconds (target - now).
    Every unit is floored: 90 minutes is "1 hour".
    """
    future = diff > 0
    seconds = abs(int(diff))
    if seconds < 60:
        return "in a few seconds" if future else "a few seconds ago"

    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    # 30 days is under one 30.44-day month but past the days bucket
    months = max(1, math.floor(days / DAYS_PER_MONTH))
    years = months // 12

    if minutes < 60:
        amount = _plural(minutes, "minute")
    elif hours < 24:
        amount = _plural(hours, "hour")
    elif days < 30:
        amount = _plural(days, "day")
    elif months < 12:
        amount = _plural(months, "month")
    else:
        amount = _plural(years, "year")
    return f"in {amount}" if future else f"{amount} ago"


class FormatStyle(Enum):
    """
    Timestamp styles in display order: (label, format code, render function).

    Every render function takes (local datetime, seconds from now) so the rows can
    be built in one loop; each uses whichever of the two it needs.
    """

    DEFAULT = ("Default", "", short_date_time)
    SHORT_TIME = ("Short Time", "t", short_time)
    LONG_TIME = ("Long Time", "T", long_time)
    SHORT_DATE = ("Short Date", "d", short_date)
    LONG_DATE = ("Long Date", "D", long_date)
    SHORT_DATE_TIME = ("Short Date/Time", "f", short_date_time)
    LONG_DATE_TIME = ("Long Date/Time", "F", long_date_time)
    RELATIVE_TIME = ("Relative Time", "R", relative_time)

    def __init__(self, label, code, render):
        self.label = label
        self.code = code
        self.render = render

    def markup(self, seconds: int) -> str:
        if not self.code:
            return f"<t:{seconds}>"
        return f"<t:{seconds}:{self.code}>"


class DisplayRow(NamedTuple):
    style: FormatStyle
    markup: str
    text: str

    def as_dict(self):
        return {
            "style": self.style.label,
            "format": self.style.code,
            "example": self.markup,
            "output12Hour": self.text,
        }


def format_timestamp(seconds: int, time_zone: str, now: Optional[int] = None) -> List[DisplayRow]:
    """Builds the eight display rows for `seconds`, rendered in `time_zone`."""
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise InvalidResult(f"Timestamp must be a whole number of seconds: {seconds!r}")
    if not 0 <= seconds <= utils.MAX_EPOCH_SECONDS:
        raise InvalidResult(f"Timestamp is out of range: {seconds}")
    zone = utils.get_zone(time_zone)
    if now is None:
        now = math.floor(time.time())

    local = datetime.fromtimestamp(seconds, tz=pytz.utc).astimezone(zone)
    diff = seconds - now
    return [DisplayRow(style, style.markup(seconds), style.render(local, diff)) for style in FormatStyle]
