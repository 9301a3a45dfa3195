import math
import re
from datetime import datetime, time, timedelta

import pytz

from stampgen.errors import MissingInput

# 9999-12-31T23:59:59Z
MAX_EPOCH_SECONDS = 253402300799

DAYS_OF_WEEK = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

# H or H:MM, optional am/pm or a.m./p.m., and nothing word-like (or a stray dot) right after
TIME_OF_DAY_RE = re.compile(r"(\d{1,2})(?::(\d{2}))?\s*(?:([ap])\.?m\.?)?(?![\w.])", re.IGNORECASE)
AT_CLAUSE_RE = re.compile(r"\bat\b(.*)$", re.IGNORECASE | re.DOTALL)


def get_zone(name):
    """Looks up a pytz zone by IANA name, raising MissingInput for unknown names."""
    if not name or not str(name).strip():
        raise MissingInput("Time zone is required")
    try:
        return pytz.timezone(str(name).strip())
    except pytz.UnknownTimeZoneError:
        raise MissingInput(f"Unknown time zone: {name}")


def localize(zone, naive):
    """Attaches `zone` to a naive wall-clock datetime."""
    return zone.normalize(zone.localize(naive))


def at_wall_clock(zone, day, hour, minute):
    """The instant at hour:minute:00 local time on `day` in `zone`."""
    return localize(zone, datetime.combine(day, time(hour, minute)))


def parse_time_of_day(clause):
    """
    Parses 'H', 'H:MM' with an optional am/pm (or a.m./p.m.) suffix into (hour, minute).
    An empty clause means midnight. Returns None if the clause isn't a valid time.
    """
    clause = (clause or "").strip()
    if not clause:
        return 0, 0
    match = TIME_OF_DAY_RE.match(clause)
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    ampm = match.group(3).lower() + "m" if match.group(3) else ""
    if minute > 59:
        return None
    if ampm:
        if not 1 <= hour <= 12:
            return None
        if ampm == "pm" and hour < 12:
            hour += 12
        elif ampm == "am" and hour == 12:
            hour = 0
    elif hour > 23:
        return None
    return hour, minute


def time_clause(phrase):
    """Text after the first standalone 'at', or '' if there is none."""
    match = AT_CLAUSE_RE.search(phrase)
    return match.group(1) if match else ""


def days_until_next(target_dow, current_dow):
    """Days from `current_dow` to the next `target_dow`; a full week when they're equal."""
    return (target_dow + 7 - current_dow) % 7 or 7


def to_epoch_seconds(dt):
    """Whole seconds since the epoch for an aware datetime, or None if out of range."""
    try:
        seconds = math.floor(dt.timestamp())
    except (OverflowError, ValueError, OSError):
        return None
    if not 0 <= seconds <= MAX_EPOCH_SECONDS:
        return None
    return seconds


def start_of_day(dt):
    """Naive local midnight of an aware datetime's date."""
    return datetime.combine(dt.date(), time())


def add_days(day, days):
    return day + timedelta(days=days)
